"""Core enumgen functionality: Go lexer/parser, directive scanner, IR, validation, configuration."""

from . import ir
from .errors import (
    ConfigError,
    DiscoveryError,
    EnumgenError,
    ErrorContext,
    GenerationError,
    GenerationIOError,
    MalformedDeclaration,
    ParseError,
    UnsupportedBaseType,
    ValidationError,
)
from .fileset import discover_go_files, infer_defaults
from .manifest import GeneratorConfig, GuardMode, load_config, resolve_config
from .parser import parse_file, parse_source
from .scanner import parse_enums, scan_file
from .validator import validate_enum, validate_enums

__all__ = [
    "ir",
    "EnumgenError",
    "ErrorContext",
    "DiscoveryError",
    "ParseError",
    "MalformedDeclaration",
    "UnsupportedBaseType",
    "ValidationError",
    "GenerationError",
    "GenerationIOError",
    "ConfigError",
    "discover_go_files",
    "infer_defaults",
    "GeneratorConfig",
    "GuardMode",
    "load_config",
    "resolve_config",
    "parse_file",
    "parse_source",
    "parse_enums",
    "scan_file",
    "validate_enum",
    "validate_enums",
]
