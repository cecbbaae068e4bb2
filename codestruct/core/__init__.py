"""
Core module: data models, exceptions, configuration and the outliner.

Models (models.py):
    - Element: A recovered structural unit with ordered children
    - ElementKind/Accessibility: Enums for categorization
    - OutlineReport: Results of outlining a batch of files

Exceptions (exceptions.py):
    - CodestructError: Base exception for all codestruct errors
    - UnsupportedKindError: No scanner registered for a file kind
    - SourceReadError: Source file could not be read or decoded
    - ConfigError: Configuration failed validation

Index (index.py):
    - ElementIndex: Flattened pre-order view with parent positions

Outliner (outliner.py):
    - Outliner: Reads files and dispatches lines to the right scanner
"""

from codestruct.core.config import CodestructConfig, ScanSettings, load_config
from codestruct.core.exceptions import (
    CodestructError,
    ConfigError,
    SourceReadError,
    UnsupportedKindError,
)
from codestruct.core.index import ElementIndex, IndexEntry
from codestruct.core.models import (
    Accessibility,
    Element,
    ElementKind,
    OutlineReport,
    ParamDescription,
)
from codestruct.core.outliner import Outliner

__all__ = [
    # Models
    "Element",
    "ElementKind",
    "Accessibility",
    "ParamDescription",
    "OutlineReport",
    # Exceptions
    "CodestructError",
    "UnsupportedKindError",
    "SourceReadError",
    "ConfigError",
    # Config
    "CodestructConfig",
    "ScanSettings",
    "load_config",
    # Index
    "ElementIndex",
    "IndexEntry",
    # Outliner
    "Outliner",
]
