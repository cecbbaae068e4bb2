"""Protocol for language scanners."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from codestruct.core.models import Element


class Scanner(Protocol):
    """Protocol for language scanners."""

    def scan(self, lines: Sequence[str], offset: int = 0) -> list[Element]:
        """Scan lines in one forward pass and return the top-level elements.

        ``offset`` is added to every reported line number, so a fragment cut
        out of a larger document reports positions in that document.
        """
        ...
