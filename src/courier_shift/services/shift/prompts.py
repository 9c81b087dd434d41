"""Notify/confirm capability injected into the workflow."""

from __future__ import annotations

from typing import Protocol, Sequence

ACCEPT = "accept"
CANCEL = "cancel"
DEFAULT_CHOICES: tuple[str, str] = (ACCEPT, CANCEL)


class Prompter(Protocol):
    """User-facing feedback channel.

    ``notify`` shows a non-blocking notice; ``confirm`` asks the courier to pick
    one of ``choices`` and returns the selection.
    """

    def notify(self, message: str) -> None:
        ...

    def confirm(self, message: str, choices: Sequence[str] = DEFAULT_CHOICES) -> str:
        ...


class PresetPrompter:
    """Answers every confirmation with a decision made ahead of time.

    Used where the courier's answer arrives together with the request, e.g. an
    HTTP call carrying ``confirm: true``. Notices and questions are kept so they
    can be returned to the caller.
    """

    def __init__(self, accept: bool = True) -> None:
        self.accept = accept
        self.notices: list[str] = []
        self.questions: list[str] = []

    def notify(self, message: str) -> None:
        self.notices.append(message)

    def confirm(self, message: str, choices: Sequence[str] = DEFAULT_CHOICES) -> str:
        self.questions.append(message)
        if self.accept and ACCEPT in choices:
            return ACCEPT
        return CANCEL
