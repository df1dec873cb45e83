"""Tests for the Jinja2 environment and the packaged companion template."""

from pathlib import Path

import pytest
from jinja2 import StrictUndefined, UndefinedError

from enumgen.core.ir import BaseTypeKind, EnumSpec, EnumValue
from enumgen.generator.generator import canonical_header
from enumgen.generator.renderer import (
    ENUM_TEMPLATE,
    TEMPLATES_DIR,
    create_jinja_env,
    default_for,
    get_enum_template,
    get_jinja_env,
)


def render(enum: EnumSpec, package: str = "colors") -> str:
    return get_enum_template().render(
        package_name=package,
        enum=enum,
        header=canonical_header(package, enum.type_name),
    )


class TestHelpers:
    @pytest.mark.parametrize(
        "kind,expected",
        [
            (BaseTypeKind.TEXTUAL, '""'),
            (BaseTypeKind.INTEGRAL, "0"),
            (BaseTypeKind.FLOATING, "0.0"),
            (BaseTypeKind.BOOLEAN, "false"),
            ("boolean", "false"),
        ],
    )
    def test_default_for(self, kind, expected: str) -> None:
        assert default_for(kind) == expected

    def test_packaged_template_exists(self) -> None:
        assert (TEMPLATES_DIR / ENUM_TEMPLATE).is_file()


class TestEnvironment:
    def test_configuration(self) -> None:
        env = create_jinja_env()
        assert env.undefined is StrictUndefined
        assert env.trim_blocks
        assert env.keep_trailing_newline
        assert {"contains", "default_for", "lower"} <= set(env.globals)
        assert {"lower", "default_for"} <= set(env.filters)

    def test_strict_undefined(self) -> None:
        env = create_jinja_env()
        with pytest.raises(UndefinedError):
            env.from_string("{{ missing }}").render()

    def test_shared_per_directory(self, tmp_path: Path) -> None:
        assert get_jinja_env() is get_jinja_env()
        assert get_jinja_env(tmp_path) is get_jinja_env(tmp_path / ".")
        assert get_jinja_env(tmp_path) is not get_jinja_env()

    def test_project_template_overrides(self, tmp_path: Path) -> None:
        (tmp_path / ENUM_TEMPLATE).write_text("// custom {{ enum.type_name }}\n")
        env = create_jinja_env(tmp_path)
        assert env.get_template(ENUM_TEMPLATE).render(enum={"type_name": "Color"}) == "// custom Color\n"

    def test_packaged_template_reachable_by_prefix(self, tmp_path: Path) -> None:
        (tmp_path / ENUM_TEMPLATE).write_text('{% extends "enumgen://enum.go.j2" %}')
        env = create_jinja_env(tmp_path)
        packaged = env.get_template("enumgen://" + ENUM_TEMPLATE)
        assert Path(packaged.filename).resolve() == (TEMPLATES_DIR / ENUM_TEMPLATE).resolve()

    def test_missing_project_directory_falls_back(self, tmp_path: Path) -> None:
        env = create_jinja_env(tmp_path / "nope")
        template = env.get_template(ENUM_TEMPLATE)
        assert Path(template.filename).resolve() == (TEMPLATES_DIR / ENUM_TEMPLATE).resolve()


class TestTextualTemplate:
    def test_header_lines(self, color_enum: EnumSpec) -> None:
        content = render(color_enum)
        assert content.startswith(
            "// Code generated by enumgen. DO NOT EDIT.\n\n"
            "// Package colors adds an enum value and parsing functions for the enum type Color.\n"
            "package colors\n"
        )
        assert content.endswith("}\n")

    def test_constants(self, color_enum: EnumSpec) -> None:
        content = render(color_enum)
        assert '\tRED   Color = "#FF0000"\n' in content
        assert '\tGREEN Color = "#00FF00"\n' in content
        assert '\tBLUE  Color = ""\n' in content

    def test_lookup_functions(self, color_enum: EnumSpec) -> None:
        content = render(color_enum)
        assert "func ColorValues() []Color {" in content
        assert "func (e Color) String() string {" in content
        assert "func (e Color) Value() string {" in content
        assert "func (e Color) IsValid() bool {" in content
        assert "func ParseColor(s string) (Color, error) {" in content
        assert "func ColorFromValue(v string) (Color, error) {" in content
        assert "func (e Color) MarshalText() ([]byte, error) {" in content
        assert "func (e *Color) UnmarshalText(text []byte) error {" in content

    def test_parse_is_case_insensitive(self, color_enum: EnumSpec) -> None:
        content = render(color_enum)
        assert '\tcase "red":\n\t\treturn RED, nil\n' in content
        assert 'return "", fmt.Errorf("%q is not a valid Color", s)' in content

    def test_string_uses_member_names(self, color_enum: EnumSpec) -> None:
        content = render(color_enum)
        assert '\tcase GREEN:\n\t\treturn "GREEN"\n' in content
        assert 'return fmt.Sprintf("Color(%q)", string(e))' in content

    def test_no_leftover_template_syntax(self, color_enum: EnumSpec) -> None:
        content = render(color_enum)
        assert "{{" not in content
        assert "{%" not in content


class TestOtherKinds:
    def test_integral(self, status_enum: EnumSpec) -> None:
        content = render(status_enum, package="model")
        assert "package model\n" in content
        assert "\tActive   Status = 0\n" in content
        assert "\tPending  Status = 5\n" in content
        assert 'return 0, fmt.Errorf("%q is not a valid Status", s)' in content
        assert 'fmt.Sprintf("Status(%d)", int(e))' in content

    def test_floating_without_values_uses_zero(self, ratio_enum: EnumSpec) -> None:
        content = render(ratio_enum)
        assert "\tHalf Ratio = 0.5\n" in content
        assert "\tNone Ratio = 0.0\n" in content
        assert 'fmt.Sprintf("Ratio(%v)", float64(e))' in content

    def test_boolean_without_values_uses_false(self, switch_enum: EnumSpec) -> None:
        content = render(switch_enum)
        assert "\tOn  Switch = true\n" in content
        assert "\tOff Switch = false\n" in content
        assert "return false, fmt.Errorf" in content


class TestConstBlock:
    def test_names_padded_to_longest(self, status_enum: EnumSpec) -> None:
        content = render(status_enum)
        assert (
            "const (\n"
            "\tActive   Status = 0\n"
            "\tInactive Status = 1\n"
            "\tPending  Status = 5\n"
            ")\n"
        ) in content

    def test_single_member_not_padded(self) -> None:
        enum = EnumSpec(
            type_name="Mode",
            base_type="int",
            kind=BaseTypeKind.INTEGRAL,
            values=[EnumValue(name="Only", value="0")],
        )
        assert "const (\n\tOnly Mode = 0\n)\n" in render(enum)


@pytest.mark.parametrize("fixture", ["color_enum", "status_enum", "ratio_enum", "switch_enum"])
class TestMemberCoverage:
    def test_every_member_has_string_case(self, fixture: str, request: pytest.FixtureRequest) -> None:
        enum = request.getfixturevalue(fixture)
        content = render(enum)
        for v in enum.values:
            assert content.count(f'\tcase {v.name}:\n\t\treturn "{v.name}"\n') == 1

    def test_every_member_parses(self, fixture: str, request: pytest.FixtureRequest) -> None:
        enum = request.getfixturevalue(fixture)
        content = render(enum)
        for v in enum.values:
            assert f'\tcase "{v.name.lower()}":\n\t\treturn {v.name}, nil\n' in content

    def test_every_member_is_valid(self, fixture: str, request: pytest.FixtureRequest) -> None:
        enum = request.getfixturevalue(fixture)
        content = render(enum)
        for v in enum.values:
            assert f"\tcase {v.name}:\n\t\treturn true\n" in content

    def test_every_member_listed_in_values(self, fixture: str, request: pytest.FixtureRequest) -> None:
        enum = request.getfixturevalue(fixture)
        content = render(enum)
        values_body = content.split(f"func {enum.type_name}Values()", 1)[1].split("\n}\n", 1)[0]
        assert values_body.count("\t\t") == len(enum.values)
        for v in enum.values:
            assert f"\t\t{v.name},\n" in values_body
