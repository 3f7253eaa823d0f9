"""Cloud provision interface.

This module provides the standard interface that every cloud backend
supported by inlets implements, and the registry the controller uses to pick
one by name.
"""
from typing import Dict, Optional, Type

from inlets import inlets_logging
# These provision.<cloud> modules should never fail even if underlying cloud SDK
# dependencies are not installed. This is ensured by using inlets.adaptors
# inside these modules, for lazy loading of cloud SDKs.
from inlets.provision import azure
from inlets.provision import common
from inlets.provision.provisioner import wait_for_ready

logger = inlets_logging.init_logger(__name__)

_PROVISIONERS: Dict[str, Type[common.Provisioner]] = {
    azure.AzureProvisioner.NAME: azure.AzureProvisioner,
}


def supported_providers():
    return sorted(_PROVISIONERS)


def get_provisioner(provider_name: str,
                    credentials_path: Optional[str] = None
                   ) -> common.Provisioner:
    """Constructs the provisioner for a cloud backend.

    Credentials are loaded once here; the returned provisioner can be reused
    for any number of hosts.

    Args:
        provider_name: The backend name, e.g. 'azure'. Case-insensitive.
        credentials_path: Path to the backend's credentials file. Each
            backend falls back to its own environment variable when None.

    Raises:
        ValueError: if the provider is not supported.
        InvalidCloudCredentials: if the credentials cannot be loaded.
    """
    provisioner_cls = _PROVISIONERS.get(provider_name.lower())
    if provisioner_cls is None:
        raise ValueError(f'Unknown provider: {provider_name!r}. Supported '
                         f'providers: {", ".join(supported_providers())}')
    logger.debug(f'Using {provisioner_cls.__name__} for {provider_name!r}.')
    return provisioner_cls(credentials_path=credentials_path)


__all__ = [
    'get_provisioner',
    'supported_providers',
    'wait_for_ready',
]
