from __future__ import annotations

import logging

from clickengine.events import KeyPress
from clickengine.state import ProgressionState

logger = logging.getLogger(__name__)


class CheatSequenceDetector:
    """Sliding-window matcher for the hidden unlock code.

    Keeps the last ``len(code)`` qualifying characters, lower-cased. A match
    clears the window and latches ``cheat_unlocked`` on the state. Any key
    that is not a plain character clears the window, except Shift on its own.
    """

    def __init__(self, code: str, state: ProgressionState) -> None:
        if not code:
            raise ValueError("Cheat code must not be empty")
        self.code = code.lower()
        self.state = state
        self._buffer = ""

    @property
    def buffer(self) -> str:
        return self._buffer

    def reset(self) -> None:
        self._buffer = ""

    def feed(self, event: KeyPress) -> bool:
        """Process one keystroke. Returns True if it unlocked the cheat."""
        if (
            event.text_input_focused
            or not event.is_character
            or event.has_modifier
        ):
            if event.key != "Shift":
                self._buffer = ""
            return False

        self._buffer = (self._buffer + event.key.lower())[-len(self.code):]
        if self._buffer != self.code:
            return False

        self._buffer = ""
        if self.state.unlock_cheat():
            logger.info("Sigma mode unlocked")
            return True
        return False

    def feed_text(self, text: str) -> bool:
        """Feed each character of *text* as a plain keystroke."""
        fired = False
        for ch in text:
            if self.feed(KeyPress(ch)):
                fired = True
        return fired
