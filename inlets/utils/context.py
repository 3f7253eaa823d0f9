"""Cancellation context for provisioning calls.

A `Context` bounds a single `provision` or `status` call: the caller may
cancel it from another thread, or give it a deadline up front. Blocking
waits inside a backend check the context between short polling slices, so a
caller-imposed timeout aborts the wait without waiting for the cloud
operation to finish.

To propagate a context implicitly through a reconcile loop, install it in
the current thread or coroutine with `initialize()`; provisioners fall back
to `get()` when no context is passed explicitly.

Example:
    import threading
    from inlets.utils import context

    ctx = context.Context(timeout=300)
    threading.Timer(10, ctx.cancel).start()
    provisioner.provision(host, ctx=ctx)
"""
import contextvars
import threading
import time
from typing import Optional

from inlets import exceptions


class Context(object):
    """Cancellation scope with an optional deadline."""

    def __init__(self, timeout: Optional[float] = None):
        self._canceled = threading.Event()
        self._deadline: Optional[float] = None
        if timeout is not None:
            self._deadline = time.monotonic() + timeout

    @property
    def deadline(self) -> Optional[float]:
        """The deadline as a `time.monotonic()` value, if any."""
        return self._deadline

    def cancel(self):
        """Cancel the context."""
        self._canceled.set()

    def is_canceled(self) -> bool:
        """Check if the context is canceled or past its deadline."""
        if self._canceled.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, None if unbounded."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def slice(self, interval: float) -> float:
        """Returns how long the next blocking wait may last."""
        remaining = self.remaining()
        if remaining is None:
            return interval
        return min(interval, remaining)

    def sleep(self, seconds: float) -> bool:
        """Sleeps up to `seconds`, waking early on cancel.

        Returns:
            True if the context got canceled while sleeping.
        """
        self._canceled.wait(self.slice(seconds))
        return self.is_canceled()

    def check(self, stage: str) -> None:
        """Raises ProvisionCancelledError if the context is canceled."""
        if not self.is_canceled():
            return
        reason = ('deadline exceeded'
                  if not self._canceled.is_set() else 'canceled')
        raise exceptions.ProvisionCancelledError(
            f'Provisioning {reason} during stage {stage!r}.', stage=stage)


_CONTEXT: contextvars.ContextVar[Optional[Context]] = contextvars.ContextVar(
    'inlets_context', default=None)


def initialize(ctx: Optional[Context] = None) -> Context:
    """Installs a context for the current thread or coroutine."""
    if ctx is None:
        ctx = Context()
    _CONTEXT.set(ctx)
    return ctx


def get() -> Optional[Context]:
    """Get the current context, None if not initialized."""
    return _CONTEXT.get()


def resolve(ctx: Optional[Context],
            default_timeout: Optional[float] = None) -> Context:
    """Returns `ctx`, else the installed context, else a new one.

    The new context expires after `default_timeout` seconds, or never if it
    is None.
    """
    if ctx is not None:
        return ctx
    current = get()
    if current is not None:
        return current
    return Context(timeout=default_timeout)
