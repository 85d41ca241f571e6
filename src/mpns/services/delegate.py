from __future__ import annotations

from typing import Any, Callable, Optional, Protocol

from mpns.responses import Outcome

Callback = Callable[[Any, Outcome], None]


class MpnsDelegate(Protocol):
    """Receives the outcome of every notification that got an HTTP response."""

    def message_sent(self, message: Any, outcome: Outcome) -> None:
        ...

    def message_failed(self, message: Any, outcome: Outcome) -> None:
        ...


def notify(message: Any, outcome: Outcome, on_success: Callback, on_failure: Callback) -> None:
    """Invoke exactly one of the callbacks depending on outcome.success.

    should_retry is left to the caller; nothing is resent here.
    """
    if outcome.success:
        on_success(message, outcome)
    else:
        on_failure(message, outcome)


def fire_delegate(message: Any, outcome: Outcome, delegate: Optional[MpnsDelegate]) -> None:
    if delegate is None:
        return
    notify(message, outcome, delegate.message_sent, delegate.message_failed)
