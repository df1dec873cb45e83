import glob
import tomllib
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Any

from .errors import ConfigError

CONFIG_FILENAME = "enumgen.toml"
PYPROJECT_FILENAME = "pyproject.toml"


class GuardMode(StrEnum):
    """How an existing companion file is recognized as up to date."""

    HEADER = "header"  # canonical header line present
    CONTENT = "content"  # rendered bytes identical


@dataclass
class GeneratorConfig:
    """
    Settings for one enumgen run.

    Examples in enumgen.toml:

        [enumgen]
        input = "internal/model/*.go"
        output_dir = "internal/model"
        package = "model"
        strict = true

    or in pyproject.toml under ``[tool.enumgen]``.
    """

    input: str = "*"
    output_dir: Path | None = None
    package: str | None = None
    strict: bool = False
    guard: GuardMode = GuardMode.HEADER
    template_dir: Path | None = None
    source: Path | None = None  # file the settings came from

    def merge(self, **overrides: Any) -> "GeneratorConfig":
        """Return a copy with every non-None override applied."""
        values = {
            "input": self.input,
            "output_dir": self.output_dir,
            "package": self.package,
            "strict": self.strict,
            "guard": self.guard,
            "template_dir": self.template_dir,
            "source": self.source,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return GeneratorConfig(**values)


def _get(data: dict[str, Any], key: str, expected: type, path: Path) -> Any:
    value = data.get(key)
    if value is not None and not isinstance(value, expected):
        raise ConfigError(f"{path}: '{key}' must be a {expected.__name__}")
    return value


def parse_config(data: dict[str, Any], path: Path) -> GeneratorConfig:
    """
    Build a GeneratorConfig from a decoded TOML table.

    Relative paths are resolved against the config file's directory.
    """
    base = path.parent

    input_glob = _get(data, "input", str, path) or "*"
    if data.get("input") and not Path(input_glob).is_absolute():
        input_glob = str(Path(glob.escape(str(base))) / input_glob)
    output_dir = _get(data, "output_dir", str, path)
    package = _get(data, "package", str, path)
    strict = _get(data, "strict", bool, path) or False
    guard_value = _get(data, "guard", str, path) or GuardMode.HEADER.value
    template_dir = _get(data, "template_dir", str, path)

    try:
        guard = GuardMode(guard_value)
    except ValueError:
        choices = ", ".join(m.value for m in GuardMode)
        raise ConfigError(f"{path}: 'guard' must be one of {choices}, got {guard_value!r}") from None

    return GeneratorConfig(
        input=input_glob,
        output_dir=base / output_dir if output_dir else None,
        package=package,
        strict=strict,
        guard=guard,
        template_dir=base / template_dir if template_dir else None,
        source=path,
    )


def load_config(path: Path) -> GeneratorConfig:
    """
    Load settings from an enumgen.toml or pyproject.toml file.

    Raises:
        ConfigError: If the file is unreadable or malformed
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"{path}: {e}") from e

    if path.name == PYPROJECT_FILENAME:
        table = data.get("tool", {}).get("enumgen", {})
    else:
        table = data.get("enumgen", data)

    if not isinstance(table, dict):
        raise ConfigError(f"{path}: enumgen settings must be a table")
    return parse_config(table, path)


def find_config(directory: Path) -> Path | None:
    """
    Locate the config file for a directory.

    ``enumgen.toml`` wins; ``pyproject.toml`` counts only when it has a
    ``[tool.enumgen]`` table.
    """
    candidate = directory / CONFIG_FILENAME
    if candidate.is_file():
        return candidate

    pyproject = directory / PYPROJECT_FILENAME
    if pyproject.is_file():
        try:
            data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError):
            return None
        if "enumgen" in data.get("tool", {}):
            return pyproject
    return None


def resolve_config(directory: Path, explicit: Path | None = None) -> GeneratorConfig:
    """Load the explicit config file, a discovered one, or defaults."""
    path = explicit or find_config(directory)
    if path is None:
        return GeneratorConfig()
    return load_config(path)
