"""Lazy import for cloud SDK modules."""
import functools
import importlib
from typing import Any, Callable, Optional, Tuple


class LazyImport:
    """Lazy importer for cloud SDK modules.

    Cloud SDKs are optional extras (e.g. `pip install
    inlets-provisioner[azure]`). Importing them only on first use keeps
    `import inlets` working when a backend's SDK is not installed, and turns
    a missing SDK into an error that names the extra to install.
    """

    def __init__(self,
                 module_name: str,
                 import_error_message: Optional[str] = None,
                 set_loggers: Optional[Callable] = None):
        self._module_name = module_name
        self._module = None
        self._import_error_message = import_error_message
        self._set_loggers = set_loggers

    def load_module(self):
        if self._module is None:
            try:
                self._module = importlib.import_module(self._module_name)
                if self._set_loggers is not None:
                    self._set_loggers()
            except ImportError as e:
                if self._import_error_message is not None:
                    raise ImportError(self._import_error_message) from e
                raise
        return self._module

    def __getattr__(self, name: str) -> Any:
        # Attempt to access the attribute, if it fails, assume it's a submodule
        # and lazily import it
        try:
            if name in self.__dict__:
                return self.__dict__[name]
            return getattr(self.load_module(), name)
        except AttributeError:
            submodule_name = f'{self._module_name}.{name}'
            lazy_submodule = LazyImport(submodule_name,
                                        self._import_error_message)
            setattr(self, name, lazy_submodule)
            return lazy_submodule


def load_lazy_modules(modules: Tuple[LazyImport, ...]):
    """Load lazy modules before entering a function to error out quickly."""

    def decorator(func):

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            for m in modules:
                m.load_module()
            return func(*args, **kwargs)

        return wrapper

    return decorator
