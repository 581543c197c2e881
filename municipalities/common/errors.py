"""Domain errors and failure typing."""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for pipeline failures."""

    error_code = "PIPELINE_ERROR"


class ConfigError(PipelineError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class LoadError(PipelineError):
    """Raised when an input dataset cannot be loaded as a whole."""

    error_code = "LOAD_ERROR"


class ReadError(LoadError):
    """Raised when an input file is missing or unreadable."""

    error_code = "READ_ERROR"


class ParseError(LoadError):
    """Raised when input text cannot be interpreted as rows or JSON."""

    error_code = "PARSE_ERROR"


class ValidationError(LoadError):
    """Raised when decoded JSON does not match the expected shape."""

    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = list(errors or [])
        if self.errors:
            message = f"{message}: {'; '.join(self.errors)}"
        super().__init__(message)


class PersistError(PipelineError):
    """Raised when a single output record cannot be written."""

    error_code = "PERSIST_ERROR"
