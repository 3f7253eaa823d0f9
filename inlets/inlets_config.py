"""Immutable user configurations (EXPERIMENTAL).

On module import, we attempt to parse the config located at
INLETS_CONFIG (default: ~/.inlets/config.yaml). To read a nested-key config:

  >> inlets_config.get_nested(('azure', 'image'), default_value)

The config file is optional. Every key has a default in
inlets/provision/constants.py; the file only overrides those defaults.
Example:

    azure:
      image: jpangms/inlets:2.4.1
      control_port: 8000
      provision_timeout_seconds: 600
"""
import copy
import os
import threading
from typing import Any, Dict, Optional, Tuple

import yaml

from inlets import inlets_logging
from inlets.utils import common_utils
from inlets.utils import schemas

logger = inlets_logging.init_logger(__name__)

ENV_VAR_INLETS_CONFIG = 'INLETS_CONFIG'
_GLOBAL_CONFIG_PATH = '~/.inlets/config.yaml'


class Config(Dict[str, Any]):
    """Config that supports getting values with nested keys."""

    def get_nested(self, keys: Tuple[str, ...], default_value: Any) -> Any:
        """Gets a nested key.

        If any key is not found, or any intermediate key does not point to a
        dict value, returns 'default_value'.
        """
        curr: Any = self
        for key in keys:
            if isinstance(curr, dict) and key in curr:
                curr = curr[key]
            else:
                return default_value
        return copy.deepcopy(curr)

    @classmethod
    def from_dict(cls, config: Optional[Dict[str, Any]]) -> 'Config':
        if config is None:
            return cls()
        return cls(**config)


_config_lock = threading.Lock()
_loaded_config: Config = Config()


def _validate_config(config: Dict[str, Any], config_source: str) -> None:
    """Validates the config."""
    common_utils.validate_schema(config,
                                 schemas.get_config_schema(),
                                 f'Invalid config YAML ({config_source}): ',
                                 skip_none=False)


def resolve_config_path() -> Optional[str]:
    """Returns the config file path, None if there is none to load."""
    config_path = os.environ.get(ENV_VAR_INLETS_CONFIG)
    if config_path is not None:
        config_path = os.path.expanduser(config_path)
        logger.debug('using config file specified by '
                     f'{ENV_VAR_INLETS_CONFIG}: {config_path}')
        if not os.path.exists(config_path):
            raise FileNotFoundError(
                'Config file specified by env var '
                f'{ENV_VAR_INLETS_CONFIG} ({config_path!r}) does not exist. '
                'Please double check the path or unset the env var: '
                f'unset {ENV_VAR_INLETS_CONFIG}')
        return config_path
    config_path = os.path.expanduser(_GLOBAL_CONFIG_PATH)
    if os.path.exists(config_path):
        return config_path
    return None


def parse_and_validate_config_file(config_path: str) -> Config:
    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            config_dict = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(
                f'Error in loading config file ({config_path}): {e}') from e
    if config_dict is None:
        return Config()
    if not isinstance(config_dict, dict):
        raise ValueError(f'Invalid config YAML ({config_path}): expected a '
                         f'mapping, got {type(config_dict).__name__}.')
    config = Config.from_dict(config_dict)
    if config:
        _validate_config(config, config_path)
    logger.debug(f'Config syntax check passed for path: {config_path}')
    return config


def reload_config() -> None:
    """Re-reads the config file."""
    global _loaded_config
    config_path = resolve_config_path()
    config = Config()
    if config_path is not None:
        config = parse_and_validate_config_file(config_path)
    with _config_lock:
        _loaded_config = config


def get_nested(keys: Tuple[str, ...], default_value: Any) -> Any:
    """Gets a nested key.

    If any key is not found, or any intermediate key does not point to a dict
    value, returns 'default_value'.
    """
    return _loaded_config.get_nested(keys, default_value)


# The config is loaded when the module is imported.
reload_config()
