"""Exceptions."""
import enum
from typing import Optional


class ProvisionError(Exception):
    """Base class for errors raised by a provisioner."""
    pass


class InvalidCloudCredentials(Exception):
    """Raised when the cloud credentials cannot be loaded."""
    pass


class ResourceNotFoundError(ProvisionError):
    """Raised when a backend resource does not exist.

    This is an expected outcome while upserting a resource and is recovered
    by the backend itself; it is not surfaced by `provision`.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class HostNotFoundError(ProvisionError):
    """Raised by `status` when the host's backend resource is gone."""

    def __init__(self, host_id: str, cause: Optional[BaseException] = None):
        super().__init__(f'Host {host_id!r} does not exist.')
        self.host_id = host_id
        self.cause = cause


class HostNotReadyError(ProvisionError):
    """Raised when a host exists but is not usable yet.

    This is a retryable condition: the caller should call `status` again
    later. `state` and `ip` are the values observed on the backend.
    """

    def __init__(self,
                 state: Optional[str],
                 ip: Optional[str],
                 status: Optional[str] = None) -> None:
        self.state = state
        self.ip = ip or ''
        self.status = status
        super().__init__(
            f'Host not ready [state: {state}, ip: {self.ip or "<none>"}]')


class FatalProvisionError(ProvisionError):
    """Raised when provisioning fails in a way retrying will not fix.

    The `stage` names the step that failed, so the controller can tell a
    resource group failure from a container group failure without
    backend-specific tracing. The originating backend error is chained and
    kept on `cause`.
    """

    class Stage(enum.Enum):
        RESOURCE_GROUP = 'resource group'
        CONTAINER_GROUP = 'container group'
        WAIT = 'wait for completion'
        RESULT = 'result extraction'
        STATUS = 'status'

    class Reason(enum.Enum):
        """Reason for the failure."""

        AUTH = 'AUTH'
        QUOTA = 'QUOTA'
        INVALID_INPUT = 'INVALID_INPUT'
        MALFORMED_ID = 'MALFORMED_ID'
        UNKNOWN = 'UNKNOWN'

        @property
        def message(self) -> str:
            if self == self.AUTH:
                return ('Failed to authenticate with the cloud. Please check '
                        'the credentials file.')
            elif self == self.QUOTA:
                return 'Cloud quota exceeded.'
            elif self == self.INVALID_INPUT:
                return 'The cloud rejected the request.'
            elif self == self.MALFORMED_ID:
                return 'Malformed host identifier.'
            elif self == self.UNKNOWN:
                return 'Unexpected cloud error.'
            else:
                raise ValueError(f'Unknown reason {self}')

    def __init__(self,
                 message: str,
                 stage: 'FatalProvisionError.Stage',
                 reason: 'FatalProvisionError.Reason' = Reason.UNKNOWN,
                 cause: Optional[BaseException] = None) -> None:
        self.stage = stage
        self.reason = reason
        self.cause = cause
        super().__init__(
            f'[{stage.value}] {reason.message} {message}'.rstrip())


class MalformedIdentifierError(FatalProvisionError, ValueError):
    """Raised when a host identifier cannot be decoded."""

    def __init__(self, host_id: str, detail: str) -> None:
        self.host_id = host_id
        super().__init__(f'{detail} (id: {host_id!r})',
                         stage=FatalProvisionError.Stage.STATUS,
                         reason=FatalProvisionError.Reason.MALFORMED_ID)


class ProvisionCancelledError(ProvisionError):
    """Raised when the call's context is canceled or its deadline passes.

    Resources already created on the backend are left in place.
    """

    def __init__(self, message: str, stage: Optional[str] = None) -> None:
        super().__init__(message)
        self.stage = stage
