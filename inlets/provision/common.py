"""Common data structures for provisioning"""
import abc
import dataclasses
import functools
from typing import Dict, Optional

from inlets import inlets_logging
from inlets.utils import context

logger = inlets_logging.init_logger(__name__)

_START_TITLE = '\n' + '-' * 20 + 'Start: {} ' + '-' * 20
_END_TITLE = '-' * 20 + 'End:   {} ' + '-' * 20 + '\n'

# -------------------- input data model -------------------- #


@dataclasses.dataclass
class BasicHost:
    """Provisioning intent for one tunnel server host."""
    # Logical host name. Used as the backend resource name, so it must
    # satisfy the backend's naming rules; it is not validated here.
    name: str
    # Backend location, e.g. 'eastus'.
    region: str
    # Shared secret the tunnel server requires from clients.
    token: str = dataclasses.field(repr=False)
    # Backend-specific parameters, e.g. {'subscriptionID': '...'}.
    additional: Dict[str, str] = dataclasses.field(default_factory=dict)


# -------------------- output data model -------------------- #


@dataclasses.dataclass
class ProvisionedHost:
    """Status snapshot of a provisioned host."""
    # Opaque, backend-encoded identifier. Pass it back to status().
    id: str
    # Public address; empty until assigned.
    ip: str = ''
    # Coarse-grained state, see inlets.utils.status_lib.HostStatus.
    status: str = ''


class Provisioner(abc.ABC):
    """A cloud backend able to run tunnel server hosts.

    Implementations hold only read-only state (credentials) after
    construction, so one instance can serve concurrent calls for different
    hosts.
    """

    # Name used to select the backend, e.g. 'azure'.
    NAME: str = ''

    @abc.abstractmethod
    def provision(self,
                  host: BasicHost,
                  ctx: Optional[context.Context] = None) -> ProvisionedHost:
        """Creates or updates the host.

        Calling it again with the same `host.name` updates the existing
        resources instead of creating new ones. It may return before the
        host is ready; poll status() with the returned id.

        Raises:
            FatalProvisionError: the backend rejected the request.
            ProvisionCancelledError: `ctx` was canceled or expired.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def status(self,
               host_id: str,
               ctx: Optional[context.Context] = None) -> ProvisionedHost:
        """Returns the host if it is ready.

        Raises:
            HostNotReadyError: the host exists but is still converging.
            HostNotFoundError: the host no longer exists.
            MalformedIdentifierError: `host_id` cannot be decoded.
            FatalProvisionError: any other backend failure.
        """
        raise NotImplementedError


def log_function_start_end(func):

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger.debug(_START_TITLE.format(func.__name__))
        try:
            return func(*args, **kwargs)
        finally:
            logger.debug(_END_TITLE.format(func.__name__))

    return wrapper
