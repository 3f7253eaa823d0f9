"""Global environment options for inlets."""
import enum
import os


class Options(enum.Enum):
    """Environment variables for the inlets provisioner."""

    # (env var name, default value)
    SHOW_DEBUG_INFO = ('INLETS_DEBUG', False)
    MINIMIZE_LOGGING = ('INLETS_MINIMIZE_LOGGING', False)
    # Keep the inlets.provision loggers at INFO even when INLETS_DEBUG is set.
    SUPPRESS_SENSITIVE_LOG = ('INLETS_SUPPRESS_SENSITIVE_LOG', False)

    def __init__(self, env_var: str, default: bool) -> None:
        self.env_var = env_var
        self.default = default

    def __repr__(self) -> str:
        return self.env_var

    def get(self) -> bool:
        """Check if an environment variable is set to True."""
        return os.getenv(self.env_var,
                         str(self.default)).lower() in ('true', '1')
