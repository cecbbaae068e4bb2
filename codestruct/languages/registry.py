"""Scanner dispatch: file-kind keys mapped to scanner factories."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from functools import partial
from pathlib import PurePath

import structlog

from codestruct.core.config import ScanSettings
from codestruct.core.exceptions import UnsupportedKindError
from codestruct.languages.base import Scanner

logger = structlog.get_logger()

ScannerFactory = Callable[[], Scanner]


def normalize_kind(key: str) -> str:
    """Normalize a file path, extension or bare kind name to a ``.ext`` key.

    ``"src/Foo.CS"``, ``".cs"`` and ``"cs"`` all normalize to ``".cs"``.
    """
    key = key.strip().lower()
    if key.startswith(".") and "/" not in key and "\\" not in key:
        return key
    suffix = PurePath(key).suffix
    return suffix if suffix else f".{key}"


class ScannerRegistry:
    """Maps normalized file-kind keys to zero-argument scanner factories.

    A registry is meant to be populated once at the composition root and then
    only read; it does no locking.
    """

    def __init__(self, factories: Mapping[str, ScannerFactory] | None = None) -> None:
        self._factories: dict[str, ScannerFactory] = {}
        for key, factory in (factories or {}).items():
            self.register(key, factory)

    def register(self, key: str, factory: ScannerFactory) -> None:
        """Register a factory for a kind, replacing any earlier registration."""
        normalized = normalize_kind(key)
        self._factories[normalized] = factory
        logger.debug("scanner_registered", kind=normalized)

    def resolve(self, key: str) -> ScannerFactory | None:
        """Return the factory for a kind, or None when the kind is unsupported."""
        return self._factories.get(normalize_kind(key))

    def require(self, key: str) -> ScannerFactory:
        """Return the factory for a kind.

        Raises:
            UnsupportedKindError: If no scanner is registered for the kind.
        """
        factory = self.resolve(key)
        if factory is None:
            raise UnsupportedKindError(f"No scanner registered for '{normalize_kind(key)}'")
        return factory

    def supports(self, key: str) -> bool:
        """Check if a scanner is registered for the kind."""
        return normalize_kind(key) in self._factories

    def list_keys(self) -> set[str]:
        """All registered kind keys."""
        return set(self._factories)

    def copy(self) -> ScannerRegistry:
        """An independent registry with the same registrations."""
        return ScannerRegistry(self._factories)

    def __len__(self) -> int:
        return len(self._factories)

    def __repr__(self) -> str:
        return f"ScannerRegistry(kinds={sorted(self._factories)})"


def default_registry(settings: ScanSettings | None = None) -> ScannerRegistry:
    """A registry populated with every built-in scanner, sharing one ScanSettings."""
    from codestruct.languages.braces import CSharpScanner, JavaScanner
    from codestruct.languages.container import ContainerScanner
    from codestruct.languages.markup import MarkupScanner
    from codestruct.languages.script import ScriptScanner, TypedScriptScanner

    return ScannerRegistry(
        {
            ".cs": partial(CSharpScanner, settings),
            ".java": partial(JavaScanner, settings),
            ".js": partial(ScriptScanner, settings),
            ".ts": partial(TypedScriptScanner, settings),
            ".vue": partial(ContainerScanner, settings),
            ".html": partial(MarkupScanner, settings),
            ".htm": partial(MarkupScanner, settings),
        }
    )
