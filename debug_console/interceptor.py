"""
Capture of print output and uncaught errors into a LogStore.

    with capture(store):
        run_app()

    listen(run_app, store=store)

Everything printed inside the scope is logged line by line and still reaches
the original stdout. An exception escaping the scope is logged with its
traceback and re-raised. Errors handed to sys.excepthook while the scope is
active (PySide6 does this for exceptions raised in slots) are logged too
before reaching the previous hook.

Scopes nest; output inside an inner scope is logged by the inner scope and
by every enclosing one. Routing follows the current context (see
contextvars), so asyncio tasks started in a scope are captured, other
threads are not.
"""

import sys
import threading
import traceback
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Callable, Optional, Tuple

from .log_entry import LogLevel
from .log_store import LogStore, get_default_store
from .logging_config import get_logger

logger = get_logger("Interceptor")

_active_scopes: ContextVar[Tuple["CaptureScope", ...]] = ContextVar("debug_console_capture_scopes", default=())


def format_stack_trace(error: BaseException, tb=None) -> str:
    if tb is None:
        tb = error.__traceback__
    return "".join(traceback.format_exception(type(error), error, tb)).rstrip("\n")


class _StdoutTee:
    """Stands in for sys.stdout while a scope is active."""

    def __init__(self, wrapped, scope: "CaptureScope"):
        self._wrapped = wrapped
        self._scope = scope
        self.detached = False

    def write(self, text: str) -> int:
        if not self.detached and self._scope in _active_scopes.get():
            self._scope.feed(text)
        if self._wrapped is None:
            return len(text)
        return self._wrapped.write(text)

    def flush(self):
        if self._wrapped is not None:
            self._wrapped.flush()

    def __getattr__(self, name: str) -> Any:
        return getattr(self._wrapped, name)


class CaptureScope:
    """Context manager returned by capture()."""

    def __init__(self, store: LogStore):
        self.store = store
        self.exited = False
        self._buffer = ""
        # Worker threads started with a copied context feed the same scope
        self._buffer_lock = threading.Lock()
        self._tee: Optional[_StdoutTee] = None
        self._previous_excepthook = sys.__excepthook__
        # Per thread flag set while logging, so observers that print do not loop back
        self._state = threading.local()

    @property
    def is_logging(self) -> bool:
        return getattr(self._state, "logging", False)

    def _log(self, message: Any, **kwargs):
        already_logging = self.is_logging
        self._state.logging = True
        try:
            self.store.log(message, **kwargs)
        finally:
            self._state.logging = already_logging

    def feed(self, text: str):
        if self.is_logging:
            return
        with self._buffer_lock:
            self._buffer += text
            if "\n" not in self._buffer:
                return
            *lines, self._buffer = self._buffer.split("\n")
        for line in lines:
            self._log(line.rstrip("\r"))

    def flush_pending(self):
        """Log a trailing partial line, if any."""
        with self._buffer_lock:
            pending, self._buffer = self._buffer, ""
        if pending:
            self._log(pending)

    def __enter__(self) -> "CaptureScope":
        _active_scopes.set(_active_scopes.get() + (self,))
        self._tee = _StdoutTee(sys.stdout, self)
        sys.stdout = self._tee
        self._previous_excepthook = sys.excepthook
        sys.excepthook = self._excepthook
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        try:
            # Enclosing scopes buffered the same characters, end the line for all of them
            scopes = _active_scopes.get()
            if self not in scopes:
                scopes += (self,)
            for scope in reversed(scopes):
                scope.flush_pending()
            if isinstance(exc, Exception):
                self._log(exc, level=LogLevel.ERROR, stack_trace=format_stack_trace(exc))
        finally:
            self._restore()
        # Never suppress the error
        return False

    def _excepthook(self, exc_type, exc, tb):
        if not self.exited and self in _active_scopes.get() and isinstance(exc, Exception):
            self._log(exc, level=LogLevel.ERROR, stack_trace=format_stack_trace(exc, tb))
        self._previous_excepthook(exc_type, exc, tb)

    def _restore(self):
        self.exited = True
        tee, self._tee = self._tee, None
        tee.detached = True
        if not isinstance(sys.stdout, _StdoutTee):
            # Someone replaced stdout after us; keep their stream
            logger.debug("stdout was replaced inside a capture scope, detaching")
        # Scopes exiting out of order leave detached tees behind, unwrap them all
        while isinstance(sys.stdout, _StdoutTee) and sys.stdout.detached:
            sys.stdout = sys.stdout._wrapped

        while True:
            owner = getattr(sys.excepthook, "__self__", None)
            if not (isinstance(owner, CaptureScope) and owner.exited):
                break
            sys.excepthook = owner._previous_excepthook

        # Not a token reset: scopes may exit out of order
        _active_scopes.set(tuple(s for s in _active_scopes.get() if s is not self))


def capture(store: Optional[LogStore] = None) -> CaptureScope:
    """Capture prints and uncaught errors into ``store`` (default store if None)."""
    return CaptureScope(store if store is not None else get_default_store())


def listen(body: Callable[..., Any], *args, store: Optional[LogStore] = None, **kwargs) -> Any:
    """
    Run ``body`` with prints and uncaught errors captured.

    Returns what ``body`` returns; errors are logged and re-raised.
    """
    with capture(store):
        return body(*args, **kwargs)


@contextmanager
def capture_loop_errors(loop, store: Optional[LogStore] = None):
    """
    Log errors reaching the exception handler of an asyncio loop, such as
    exceptions of tasks nobody awaited, then hand them to the previous handler.
    """
    target = store if store is not None else get_default_store()
    previous = loop.get_exception_handler()

    def handle(loop, context):
        error = context.get("exception")
        if error is not None:
            target.log(error, level=LogLevel.ERROR, stack_trace=format_stack_trace(error))
        else:
            target.log(context.get("message", "Unhandled error in event loop"), level=LogLevel.ERROR)
        if previous is not None:
            previous(loop, context)
        else:
            loop.default_exception_handler(context)

    loop.set_exception_handler(handle)
    try:
        yield
    finally:
        loop.set_exception_handler(previous)
