"""
Minimal synchronous signals.

Callbacks are called in connection order. A callback that raises is logged
and the exception propagates to whoever emitted the signal.
"""

import logging
from typing import Any, Callable, List

LOG = logging.getLogger(__name__)


class Signal(object):
    def __init__(self, name: str):
        self.name = name
        self._callbacks: List[Callable[..., Any]] = []

    def connect(self, callback: Callable[..., Any]) -> Callable[..., Any]:
        self._callbacks.append(callback)
        return callback

    def disconnect(self, callback: Callable[..., Any]) -> None:
        self._callbacks.remove(callback)

    def emit(self, *args, **kwargs) -> None:
        for callback in list(self._callbacks):
            try:
                callback(*args, **kwargs)
            except Exception:
                LOG.exception("signal %s: callback %r failed", self.name, callback)
                raise

    def __len__(self):
        return len(self._callbacks)

    def __repr__(self):
        return "Signal({!r}, {} callbacks)".format(self.name, len(self._callbacks))
