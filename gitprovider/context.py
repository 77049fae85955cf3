"""Cancellation token passed to every provider call."""

import threading

from gitprovider.exceptions import CancelledError


class Context:
    """
    A cancellable token shared by the caller and the provider adapters.

    The transport checks the token before each request, between pages,
    while backing off, and after each response.

    Example:
        ```python
        ctx = Context()
        threading.Timer(5.0, ctx.cancel).start()
        repo.reconcile(ctx)  # raises CancelledError once cancelled
        ```
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    @classmethod
    def background(cls) -> "Context":
        """Return a fresh context that is only cancelled when asked to."""
        return cls()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def check(self) -> None:
        """Raise CancelledError if the context was cancelled."""
        if self._event.is_set():
            raise CancelledError()

    def sleep(self, seconds: float) -> None:
        """Sleep for ``seconds``, waking up early with CancelledError on cancel."""
        if self._event.wait(seconds):
            raise CancelledError()


def ensure_context(ctx: Context | None) -> Context:
    return ctx if ctx is not None else Context.background()
