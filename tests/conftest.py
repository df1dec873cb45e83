"""Shared pytest fixtures for enumgen tests."""

from __future__ import annotations

import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from enumgen.core.ir import BaseTypeKind, EnumSpec, EnumValue


@pytest.fixture
def write_go(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper that writes a Go file with a package clause."""

    def _write(name: str, body: str, package: str = "colors") -> Path:
        path = tmp_path / name
        path.write_text(f"package {package}\n\n{textwrap.dedent(body).lstrip()}")
        return path

    return _write


@pytest.fixture
def color_enum() -> EnumSpec:
    """A textual enum as the scanner builds it for the Color example."""
    return EnumSpec(
        type_name="Color",
        base_type="string",
        kind=BaseTypeKind.TEXTUAL,
        values=[
            EnumValue(name="RED", value='"#FF0000"', explicit=True),
            EnumValue(name="GREEN", value='"#00FF00"', explicit=True),
            EnumValue(name="BLUE", value='""'),
        ],
    )


@pytest.fixture
def status_enum() -> EnumSpec:
    """An integral enum with one explicit value."""
    return EnumSpec(
        type_name="Status",
        base_type="int",
        kind=BaseTypeKind.INTEGRAL,
        values=[
            EnumValue(name="Active", value="0"),
            EnumValue(name="Inactive", value="1"),
            EnumValue(name="Pending", value="5", explicit=True),
        ],
    )


@pytest.fixture
def ratio_enum() -> EnumSpec:
    """A floating enum whose second member has no value."""
    return EnumSpec(
        type_name="Ratio",
        base_type="float64",
        kind=BaseTypeKind.FLOATING,
        values=[
            EnumValue(name="Half", value="0.5", explicit=True),
            EnumValue(name="None", value=""),
        ],
    )


@pytest.fixture
def switch_enum() -> EnumSpec:
    """A boolean enum whose second member has no value."""
    return EnumSpec(
        type_name="Switch",
        base_type="bool",
        kind=BaseTypeKind.BOOLEAN,
        values=[
            EnumValue(name="On", value="true", explicit=True),
            EnumValue(name="Off", value=""),
        ],
    )
