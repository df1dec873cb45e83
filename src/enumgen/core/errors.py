"""
Error types for enumgen scanning, validation, and generation.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class EnumgenError(Exception):
    """Base exception for all enumgen errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}: {self.message}"
        return self.message


class DiscoveryError(EnumgenError):
    """
    Raised when the input pattern cannot be resolved to source files.

    Examples:
    - Glob matches nothing
    - Default output directory/package cannot be inferred
    """

    pass


class ParseError(EnumgenError):
    """
    Raised when a Go source file cannot be parsed into declarations.

    Examples:
    - Unterminated string, rune, or block comment
    - Unbalanced brackets
    - Missing package clause
    - Unexpected tokens at top level
    """

    pass


class MalformedDeclaration(EnumgenError):
    """
    Raised when an annotated declaration cannot carry an enum.

    Examples:
    - type ( A int; B int ) under one directive
    - Directive with no member entries
    """

    pass


class UnsupportedBaseType(EnumgenError):
    """
    Raised when the underlying type is not a recognized scalar.

    Examples:
    - type Point struct { ... }
    - type IDs []int
    - type When time.Duration
    """

    pass


class ValidationError(EnumgenError):
    """
    Raised by strict member validation.

    Examples:
    - Empty member name
    - Duplicate member names
    - Member name that is not a Go identifier
    """

    pass


class GenerationError(EnumgenError):
    """Raised when a companion file cannot be rendered."""

    pass


class GenerationIOError(GenerationError):
    """Raised when a companion file cannot be created, read, or written."""

    pass


class ConfigError(EnumgenError):
    """Raised when the project configuration file is malformed."""

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        file: Path to the source file where error occurred
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    file: Path
    line: int
    column: int | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "colors.go:10:5"
        """
        if self.column is None:
            return f"{self.file}:{self.line}"
        return f"{self.file}:{self.line}:{self.column}"


def make_parse_error(
    message: str,
    file: Path,
    line: int,
    column: int,
) -> ParseError:
    """
    Helper to create a ParseError with context.

    Args:
        message: Error description
        file: Source file path
        line: Line number (1-indexed)
        column: Column number (1-indexed)

    Returns:
        ParseError with context attached
    """
    context = ErrorContext(file=file, line=line, column=column)
    return ParseError(message, context)


def make_declaration_error(
    error_cls: type[EnumgenError],
    message: str,
    file: Path | None = None,
    line: int | None = None,
) -> EnumgenError:
    """
    Helper to create a scanner error with optional location.

    Args:
        error_cls: MalformedDeclaration or UnsupportedBaseType
        message: Error description
        file: Optional source file path
        line: Optional line number of the directive

    Returns:
        Error instance with context if location provided
    """
    if file and line:
        return error_cls(message, ErrorContext(file=file, line=line))
    return error_cls(message)
