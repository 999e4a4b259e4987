# ---
# File: incident_deck/dashboard/cursor_stack.py
# Purpose: Back-navigable history of opaque pagination cursors over a forward-only API
# ---

from dataclasses import dataclass, field
from typing import Optional, Tuple


class PaginationError(ValueError):
    pass


# ---
# Immutable cursor history.
# `current` is the cursor of the page on screen; None means the first page.
# `stack` holds the cursors of every earlier page, oldest first, so its length is
# the zero-indexed page number. advance() and retreat() are exact inverses.
# ---
@dataclass(frozen=True)
class CursorStack:
    stack: Tuple[Optional[str], ...] = field(default_factory=tuple)
    current: Optional[str] = None

    @property
    def page_number(self) -> int:
        return len(self.stack) + 1

    @property
    def has_previous(self) -> bool:
        return bool(self.stack)

    def advance(self, next_cursor: Optional[str]) -> "CursorStack":
        if next_cursor is None:
            raise PaginationError("cannot advance without a next cursor")
        return CursorStack(stack=self.stack + (self.current,), current=next_cursor)

    def retreat(self) -> "CursorStack":
        if not self.stack:
            raise PaginationError("already on the first page")
        return CursorStack(stack=self.stack[:-1], current=self.stack[-1])

    def reset(self) -> "CursorStack":
        return CursorStack()
