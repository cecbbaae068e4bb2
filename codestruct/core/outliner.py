"""Outliner: the composition root that turns files and lines into elements."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

import structlog

from codestruct.core.config import ScanSettings
from codestruct.core.exceptions import SourceReadError
from codestruct.core.models import Element, OutlineReport
from codestruct.languages.registry import ScannerRegistry, default_registry, normalize_kind

logger = structlog.get_logger()

ProgressCallback = Callable[[Path, int, int], None]

# Only CR, LF and CRLF end a source line; str.splitlines also breaks on U+2028 and friends
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def split_lines(text: str) -> list[str]:
    """Split text on real line terminators, ignoring a final trailing one."""
    lines = _LINE_BREAK.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


class Outliner:
    """Dispatches source lines to the scanner registered for their kind.

    Args:
        registry: Scanner registry; defaults to every built-in scanner
        settings: Scan settings for the default registry (ignored when a
            registry is supplied, since its factories are already bound)
    """

    def __init__(
        self,
        registry: ScannerRegistry | None = None,
        settings: ScanSettings | None = None,
    ) -> None:
        self.settings = settings or ScanSettings()
        self._registry = registry if registry is not None else default_registry(self.settings)

    @property
    def registry(self) -> ScannerRegistry:
        return self._registry

    def outline_lines(
        self, lines: Sequence[str], kind: str, offset: int = 0
    ) -> list[Element] | None:
        """Scan lines with the scanner for ``kind``.

        Returns:
            The top-level elements, or None when no scanner handles the kind
        """
        factory = self._registry.resolve(kind)
        if factory is None:
            logger.debug("kind_unsupported", kind=normalize_kind(kind))
            return None
        return factory().scan(lines, offset)

    def outline_text(self, text: str, kind: str, offset: int = 0) -> list[Element] | None:
        """Split text into lines and scan it; see outline_lines."""
        return self.outline_lines(split_lines(text), kind, offset)

    def outline_file(
        self, path: Path | str, kind: str | None = None, offset: int = 0
    ) -> list[Element] | None:
        """Read a UTF-8 file and scan it.

        Args:
            path: File to outline
            kind: Kind key overriding the file's own extension
            offset: Added to every reported line number

        Returns:
            The top-level elements, or None when the kind is unsupported
            (the file is not read in that case)

        Raises:
            SourceReadError: If the file cannot be read or decoded
        """
        path = Path(path)
        key = kind or str(path)
        if not self._registry.supports(key):
            logger.debug("kind_unsupported", kind=normalize_kind(key), path=str(path))
            return None

        try:
            text = path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug("file_unreadable", path=str(path), error=str(e))
            raise SourceReadError(f"Cannot read {path}: {e}") from e

        return self.outline_text(text, key, offset)

    def outline_files(
        self,
        paths: Iterable[Path | str],
        on_progress: ProgressCallback | None = None,
    ) -> OutlineReport:
        """Outline many files, collecting errors instead of raising.

        Args:
            paths: Files to outline, each dispatched on its own extension
            on_progress: Optional callback for progress updates (file, current, total)

        Returns:
            OutlineReport with per-file elements, unsupported files and errors
        """
        files = [Path(p) for p in paths]
        report = OutlineReport()

        for i, file in enumerate(files):
            try:
                elements = self.outline_file(file)
            except SourceReadError as e:
                report.errors.append(str(e))
            else:
                if elements is None:
                    report.unsupported.append(file)
                else:
                    report.results[file] = elements

            if on_progress:
                on_progress(file, i + 1, len(files))

        return report
