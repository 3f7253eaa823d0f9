"""Readiness polling for provisioned hosts.

`status()` never waits or retries by itself. Controllers that do not run
their own requeue loop can use `wait_for_ready` to poll it with backoff.
"""
from typing import Optional

from inlets import exceptions
from inlets import inlets_logging
from inlets.provision import common
from inlets.utils import common_utils
from inlets.utils import context as context_lib

logger = inlets_logging.init_logger(__name__)

_INITIAL_BACKOFF_SECONDS = 2
_MAX_BACKOFF_FACTOR = 8
_STAGE = 'wait for ready'


def wait_for_ready(provisioner: common.Provisioner,
                   host_id: str,
                   timeout: Optional[float] = None,
                   ctx: Optional[context_lib.Context] = None,
                   initial_backoff: float = _INITIAL_BACKOFF_SECONDS
                  ) -> common.ProvisionedHost:
    """Polls `provisioner.status(host_id)` until the host is ready.

    Args:
        provisioner: The provisioner that created the host.
        host_id: The id returned by `provision`.
        timeout: Seconds to wait before giving up. Ignored if `ctx` is
            given.
        ctx: Cancellation context; takes precedence over `timeout`.
        initial_backoff: Seconds to wait after the first not-ready answer.

    Returns:
        The ready host.

    Raises:
        ProvisionCancelledError: the timeout passed or `ctx` was canceled.
        Any error from `status` other than HostNotReadyError, unchanged.
    """
    if ctx is None:
        ctx = context_lib.Context(timeout=timeout)
    backoff = common_utils.Backoff(initial_backoff=initial_backoff,
                                   max_backoff_factor=_MAX_BACKOFF_FACTOR)
    attempt = 0
    while True:
        ctx.check(_STAGE)
        attempt += 1
        try:
            return provisioner.status(host_id, ctx=ctx)
        except exceptions.HostNotReadyError as e:
            delay = backoff.current_backoff()
            logger.debug(f'Host {host_id} not ready (attempt {attempt}): '
                         f'{common_utils.format_exception(e)}. Retrying in '
                         f'{delay:.1f}s.')
            if ctx.sleep(delay):
                raise exceptions.ProvisionCancelledError(
                    f'Host {host_id} was not ready before the deadline; last '
                    f'observed state: {e.state}, ip: {e.ip or "<none>"}.',
                    stage=_STAGE) from e
