"""
Strict member validation for EnumSpecs.

The scanner is permissive about member names; these checks are only
applied when strict mode is requested.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from .errors import ErrorContext, ValidationError
from .ir import EnumSpec

logger = logging.getLogger(__name__)

GO_IDENTIFIER = re.compile(r"[^\W\d]\w*")

GO_KEYWORDS = frozenset(
    {
        "break",
        "case",
        "chan",
        "const",
        "continue",
        "default",
        "defer",
        "else",
        "fallthrough",
        "for",
        "func",
        "go",
        "goto",
        "if",
        "import",
        "interface",
        "map",
        "package",
        "range",
        "return",
        "select",
        "struct",
        "switch",
        "type",
        "var",
    }
)


def validate_enum(enum: EnumSpec) -> tuple[list[str], list[str]]:
    """
    Validate the members of one enum.

    Checks:
    - Member names are not empty
    - Member names are Go identifiers and not keywords
    - No duplicate member names

    Warns about:
    - Unexported (lower-case) member names
    - Duplicate member values

    Returns:
        Tuple of (errors, warnings)
    """
    errors = []
    warnings = []

    names = enum.member_names()
    for index, name in enumerate(names, start=1):
        if not name:
            errors.append(f"Enum '{enum.type_name}' member #{index} has an empty name")
        elif not GO_IDENTIFIER.fullmatch(name) or name in GO_KEYWORDS:
            errors.append(f"Enum '{enum.type_name}' member '{name}' is not a valid Go identifier")
        elif not name[0].isupper():
            warnings.append(f"Enum '{enum.type_name}' member '{name}' is not exported")

    duplicates = sorted({name for name in names if name and names.count(name) > 1})
    if duplicates:
        errors.append(f"Enum '{enum.type_name}' has duplicate member names: {', '.join(duplicates)}")

    literals = [v.value for v in enum.values]
    repeated = sorted({lit for lit in literals if literals.count(lit) > 1})
    if repeated:
        warnings.append(f"Enum '{enum.type_name}' repeats member values: {', '.join(repeated)}")

    return errors, warnings


def validate_enums(enums: Iterable[EnumSpec]) -> list[str]:
    """
    Validate every enum, failing on the first one with errors.

    Returns:
        Warnings collected across all enums

    Raises:
        ValidationError: If any enum has errors
    """
    all_warnings: list[str] = []
    for enum in enums:
        errors, warnings = validate_enum(enum)
        for warning in warnings:
            logger.debug("Validation warning: %s", warning)
        all_warnings.extend(warnings)
        if errors:
            context = ErrorContext(file=enum.source, line=enum.line) if enum.source and enum.line else None
            raise ValidationError("; ".join(errors), context)
    return all_warnings
