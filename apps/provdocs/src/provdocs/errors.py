"""Typed exceptions for provdocs."""


class ProvdocsError(Exception):
    """Base exception for provdocs failures."""


class ConfigError(ProvdocsError):
    """Raised when the pipeline configuration is invalid."""


class DocumentReadError(ProvdocsError):
    """Raised when a documentation source cannot be read."""


class DocumentWriteError(ProvdocsError):
    """Raised when normalized output cannot be written."""


class ConversionError(ProvdocsError):
    """Raised when an example cannot be converted to a target language."""


class TransientConversionError(ConversionError):
    """Raised for conversion failures that may succeed on retry."""


class ConversionTimeoutError(ConversionError):
    """Raised when a single-language conversion exceeds its time budget."""
