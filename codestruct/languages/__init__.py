"""
Language scanners: Recover element trees from source lines.

Every scanner makes one forward pass over the lines it is given and returns
the top-level elements; nothing is shared between calls.

Components:
    - Scanner: Protocol defining the scanner interface
    - CSharpScanner/JavaScanner: Brace-depth scope tracking
    - ScriptScanner/TypedScriptScanner: JS/TS declarations and options objects
    - MarkupScanner: Tag-stack scanning for HTML
    - ContainerScanner: Template/script/style regions of .vue files
    - ScannerRegistry: Maps file-kind keys to scanner factories

Adding a new language:
    1. Create a scanner class implementing the Scanner protocol
    2. Implement scan(lines, offset) to return the top-level elements
    3. Register a zero-argument factory for its kind key
"""

from codestruct.languages.base import Scanner
from codestruct.languages.braces import CSharpScanner, JavaScanner
from codestruct.languages.container import ContainerScanner
from codestruct.languages.markup import MarkupScanner
from codestruct.languages.registry import (
    ScannerRegistry,
    default_registry,
    normalize_kind,
)
from codestruct.languages.script import ScriptScanner, TypedScriptScanner

__all__ = [
    "Scanner",
    "CSharpScanner",
    "JavaScanner",
    "ScriptScanner",
    "TypedScriptScanner",
    "MarkupScanner",
    "ContainerScanner",
    "ScannerRegistry",
    "default_registry",
    "normalize_kind",
]
