"""Codestruct custom exceptions."""


class CodestructError(Exception):
    """Base exception for Codestruct errors."""


class UnsupportedKindError(CodestructError):
    """No scanner is registered for a file kind."""


class SourceReadError(CodestructError):
    """A source file could not be read or decoded."""


class ConfigError(CodestructError):
    """Configuration could not be loaded or validated."""
