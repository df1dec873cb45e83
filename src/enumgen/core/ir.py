"""
Intermediate representation for annotated enum declarations.

An EnumSpec is built by the scanner from one ``//enum:`` directive and
consumed once by the generator.
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class BaseTypeKind(StrEnum):
    """Closed set of underlying representations an enum may have."""

    TEXTUAL = "textual"
    INTEGRAL = "integral"
    FLOATING = "floating"
    BOOLEAN = "boolean"


# Go identifiers accepted as an enum's underlying type
BASE_TYPES: dict[str, BaseTypeKind] = {
    "string": BaseTypeKind.TEXTUAL,
    "int": BaseTypeKind.INTEGRAL,
    "int8": BaseTypeKind.INTEGRAL,
    "int16": BaseTypeKind.INTEGRAL,
    "int32": BaseTypeKind.INTEGRAL,
    "int64": BaseTypeKind.INTEGRAL,
    "uint": BaseTypeKind.INTEGRAL,
    "uint8": BaseTypeKind.INTEGRAL,
    "uint16": BaseTypeKind.INTEGRAL,
    "uint32": BaseTypeKind.INTEGRAL,
    "uint64": BaseTypeKind.INTEGRAL,
    "uintptr": BaseTypeKind.INTEGRAL,
    "byte": BaseTypeKind.INTEGRAL,
    "rune": BaseTypeKind.INTEGRAL,
    "float32": BaseTypeKind.FLOATING,
    "float64": BaseTypeKind.FLOATING,
    "bool": BaseTypeKind.BOOLEAN,
}

# Zero value literal per kind, used for members without a value and for
# the error return of generated lookups
ZERO_VALUES: dict[BaseTypeKind, str] = {
    BaseTypeKind.TEXTUAL: '""',
    BaseTypeKind.INTEGRAL: "0",
    BaseTypeKind.FLOATING: "0.0",
    BaseTypeKind.BOOLEAN: "false",
}


def resolve_base_type(name: str) -> BaseTypeKind | None:
    """Return the kind for a Go identifier, or None if unsupported."""
    return BASE_TYPES.get(name)


class EnumValue(BaseModel):
    """
    One member of an enum.

    Attributes:
        name: Member name, verbatim from the directive
        value: Go literal for the member
        explicit: Whether the directive supplied ``=value``
    """

    name: str
    value: str
    explicit: bool = False

    model_config = ConfigDict(frozen=True)


class EnumSpec(BaseModel):
    """
    One annotated type declaration.

    Attributes:
        type_name: Declared Go type name
        base_type: Underlying Go identifier (e.g. ``int64``)
        kind: Category of the underlying type
        values: Members in directive order
        source: File the directive was found in
        line: Line of the directive comment
    """

    type_name: str = Field(min_length=1)
    base_type: str
    kind: BaseTypeKind
    values: list[EnumValue] = Field(default_factory=list)
    source: Path | None = None
    line: int | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def file_stem(self) -> str:
        """Lower-cased type name used for the companion file."""
        return self.type_name.strip().lower()

    def member_names(self) -> list[str]:
        return [v.name for v in self.values]
