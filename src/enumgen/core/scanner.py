"""
Directive scanner.

Finds ``type`` declarations whose doc comment carries an enum directive
and turns each into an EnumSpec::

    //enum: RED=#FF0000 | GREEN=#00FF00 | BLUE
    type Color string

The payload is a ``|``-separated list of ``Name`` or ``Name=Value``
entries. Values are derived per base type:

- textual: always a quoted literal, user quotes stripped first
- integral: bare entries take a running counter (explicit values do
  not advance it)
- floating/boolean and explicit values: verbatim
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from .errors import MalformedDeclaration, UnsupportedBaseType, make_declaration_error
from .ir import BaseTypeKind, EnumSpec, EnumValue, resolve_base_type
from .lexer import Comment
from .parser import GenDecl, Ident, TypeSpec, parse_file

logger = logging.getLogger(__name__)

SOURCE_SUFFIX = ".go"
COMPANION_SUFFIX = "_enum"
DIRECTIVE_PREFIX = "//enum:"


def is_candidate(path: Path | str) -> bool:
    """Whether a path is a Go source file that is not generated output."""
    name = str(path)
    return name.endswith(SOURCE_SUFFIX) and not name.endswith(COMPANION_SUFFIX + SOURCE_SUFFIX)


def is_directive(comment_text: str) -> bool:
    """Whether a comment is an enum directive (case and spacing ignored)."""
    normalized = "".join(comment_text.lower().split())
    return normalized.startswith(DIRECTIVE_PREFIX)


def directive_payload(comment_text: str) -> str:
    """Return the text after ``enum:`` in a directive comment."""
    # Only comment markers, "enum" and whitespace can precede the colon
    return comment_text.partition(":")[2].strip()


def parse_values(payload: str, kind: BaseTypeKind) -> list[EnumValue]:
    """
    Split a directive payload into members and derive their values.

    Args:
        payload: Text after ``enum:``
        kind: Base type category of the enum

    Returns:
        Members in directive order; blank entries are dropped
    """
    values: list[EnumValue] = []
    counter = 0

    for entry in payload.split("|"):
        entry = entry.strip()
        if not entry:
            continue

        name, sep, raw = entry.partition("=")
        name = name.strip()
        value = raw.strip()
        explicit = bool(sep)

        if kind == BaseTypeKind.TEXTUAL:
            value = '"' + value.strip('"') + '"'
        elif kind == BaseTypeKind.INTEGRAL and not value:
            value = str(counter)
            counter += 1
        elif kind == BaseTypeKind.INTEGRAL:
            # Explicit values leave the counter where it is
            logger.debug("Explicit value %s=%s does not advance counter (%d)", name, value, counter)

        values.append(EnumValue(name=name, value=value, explicit=explicit))

    return values


def parse_enum_directive(comment: Comment, decl: GenDecl, file: Path | None = None) -> EnumSpec:
    """
    Build an EnumSpec from one directive comment and its declaration.

    Raises:
        MalformedDeclaration: If the group does not hold exactly one type
            spec, or the directive lists no members
        UnsupportedBaseType: If the underlying type is not a supported scalar
    """
    if len(decl.specs) != 1:
        raise make_declaration_error(
            MalformedDeclaration,
            f"enum directive must annotate exactly one type specification, found {len(decl.specs)}",
            file,
            comment.line,
        )

    spec = decl.specs[0]
    if not isinstance(spec, TypeSpec):
        raise make_declaration_error(
            MalformedDeclaration, "invalid type specification", file, comment.line
        )

    if not isinstance(spec.type, Ident):
        raise make_declaration_error(
            UnsupportedBaseType,
            f"unsupported base type {spec.type} for {spec.name}",
            file,
            comment.line,
        )

    kind = resolve_base_type(spec.type.name)
    if kind is None:
        raise make_declaration_error(
            UnsupportedBaseType,
            f"unsupported base type {spec.type.name} for {spec.name}",
            file,
            comment.line,
        )

    values = parse_values(directive_payload(comment.text), kind)
    if not values:
        raise make_declaration_error(
            MalformedDeclaration,
            f"enum directive for {spec.name} declares no values",
            file,
            comment.line,
        )

    return EnumSpec(
        type_name=spec.name,
        base_type=spec.type.name,
        kind=kind,
        values=values,
        source=file,
        line=comment.line,
    )


def scan_file(path: Path) -> list[EnumSpec]:
    """
    Extract every annotated enum from one Go file.

    Raises:
        ParseError: If the file cannot be read or parsed
        MalformedDeclaration, UnsupportedBaseType: On a bad directive
    """
    source = parse_file(path)
    enums: list[EnumSpec] = []

    for decl in source.type_decls():
        if decl.doc is None:
            continue
        for comment in decl.doc.comments:
            if is_directive(comment.text):
                enum = parse_enum_directive(comment, decl, path)
                logger.debug(
                    "Found enum %s (%s) with %d values in %s",
                    enum.type_name,
                    enum.base_type,
                    len(enum.values),
                    path,
                )
                enums.append(enum)

    return enums


def parse_enums(files: Iterable[Path | str]) -> list[EnumSpec]:
    """
    Scan Go files for enum directives.

    Files that are not ``.go`` sources, or are generated companions, are
    skipped. The first error aborts the scan.

    Args:
        files: Candidate paths in the order to scan

    Returns:
        EnumSpecs in file and declaration order
    """
    enums: list[EnumSpec] = []
    for file in files:
        if not is_candidate(file):
            logger.debug("Skipping %s", file)
            continue
        enums.extend(scan_file(Path(file)))
    return enums
