"""
Companion file generator.

Renders one EnumSpec into ``<output_dir>/<typename>_enum.go``. An
existing file is left alone when it already carries the canonical
header for the same package and type (or, in content mode, when it is
byte-identical to the fresh rendering).

Key features:
- Deterministic destination naming
- Idempotency guard before any write
- Template rendering through a shared Jinja2 environment
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from pathlib import Path

from jinja2 import TemplateError

from enumgen.core.errors import GenerationError, GenerationIOError
from enumgen.core.ir import EnumSpec
from enumgen.core.manifest import GuardMode
from enumgen.core.scanner import COMPANION_SUFFIX, SOURCE_SUFFIX

from .renderer import get_enum_template

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """
    Result from a generator run.

    Attributes:
        files_created: Companion files that were written
        files_skipped: Companion files left untouched by the guard
        warnings: Any warnings to display to user
    """

    files_created: list[Path] = field(default_factory=list)
    files_skipped: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_file(self, path: Path) -> None:
        """Record a file that was created."""
        self.files_created.append(path)

    def add_skipped(self, path: Path) -> None:
        """Record a file the guard skipped."""
        self.files_skipped.append(path)

    def add_warning(self, warning: str) -> None:
        """Record a warning."""
        self.warnings.append(warning)

    def merge(self, other: "GenerationResult") -> None:
        """Merge another result into this one."""
        self.files_created.extend(other.files_created)
        self.files_skipped.extend(other.files_skipped)
        self.warnings.extend(other.warnings)


def canonical_header(package_name: str, type_name: str) -> str:
    """The identity line embedded in every companion file."""
    return f"{package_name} adds an enum value and parsing functions for the enum type {type_name}."


def destination_path(output_dir: Path, enum: EnumSpec) -> Path:
    return Path(output_dir) / f"{enum.file_stem}{COMPANION_SUFFIX}{SOURCE_SUFFIX}"


def file_contains_header(path: Path, header: str) -> bool:
    """
    Check whether an existing file carries the header on any line.

    Returns:
        False if the file does not exist

    Raises:
        GenerationIOError: If the file exists but cannot be read
    """
    try:
        with path.open(encoding="utf-8", errors="replace") as fh:
            return any(header in line for line in fh)
    except FileNotFoundError:
        return False
    except OSError as e:
        raise GenerationIOError(f"cannot read {path}: {e}") from e


def file_matches_content(path: Path, content: str) -> bool:
    """Check whether an existing file is byte-identical to ``content``."""
    try:
        existing = path.read_bytes()
    except FileNotFoundError:
        return False
    except OSError as e:
        raise GenerationIOError(f"cannot read {path}: {e}") from e
    return hashlib.sha256(existing).digest() == hashlib.sha256(content.encode("utf-8")).digest()


class EnumGenerator:
    """
    Generate companion files for EnumSpecs.

    The generator keeps no state between calls; the template is shared
    process-wide through the renderer module.
    """

    def __init__(
        self,
        output_dir: Path,
        package_name: str,
        guard: GuardMode = GuardMode.HEADER,
        template_dir: Path | None = None,
    ):
        """
        Initialize generator.

        Args:
            output_dir: Directory companion files are written to
            package_name: Go package clause for generated files
            guard: How existing files are recognized as up to date
            template_dir: Optional directory overriding the packaged template
        """
        self.output_dir = Path(output_dir)
        self.package_name = package_name
        self.guard = guard
        self.template_dir = template_dir

    def render(self, enum: EnumSpec) -> str:
        """
        Render the companion file content for an enum.

        Raises:
            GenerationError: If the template fails to load or render
        """
        try:
            template = get_enum_template(self.template_dir)
            return template.render(
                package_name=self.package_name,
                enum=enum,
                header=canonical_header(self.package_name, enum.type_name),
            )
        except TemplateError as e:
            raise GenerationError(f"template rendering failed for {enum.type_name}: {e}") from e

    def is_up_to_date(self, path: Path, enum: EnumSpec, content: str | None = None) -> bool:
        """Apply the configured guard to an existing destination file."""
        if self.guard == GuardMode.CONTENT:
            return file_matches_content(path, content if content is not None else self.render(enum))
        return file_contains_header(path, canonical_header(self.package_name, enum.type_name))

    def generate(self, enum: EnumSpec) -> GenerationResult:
        """
        Generate the companion file for one enum.

        Returns:
            GenerationResult with the file either created or skipped

        Raises:
            GenerationError: If rendering fails
            GenerationIOError: If the file cannot be read or written
        """
        result = GenerationResult()
        path = destination_path(self.output_dir, enum)

        content = self.render(enum) if self.guard == GuardMode.CONTENT else None
        if self.is_up_to_date(path, enum, content):
            logger.info("Skipping %s: already generated for %s", path, enum.type_name)
            result.add_skipped(path)
            return result

        if content is None:
            content = self.render(enum)

        try:
            with path.open("w", encoding="utf-8") as fh:
                fh.write(content)
        except OSError as e:
            raise GenerationIOError(f"cannot write {path}: {e}") from e

        logger.info("Generated %s for %s", path, enum.type_name)
        result.add_file(path)
        return result


def generate_enum(
    output_dir: Path,
    package_name: str,
    enum: EnumSpec,
    guard: GuardMode = GuardMode.HEADER,
    template_dir: Path | None = None,
) -> GenerationResult:
    """
    Generate the companion file for one enum.

    Args:
        output_dir: Directory to write into
        package_name: Go package name for the generated file
        enum: The enum to render
        guard: Guard mode for existing files
        template_dir: Optional template override directory

    Returns:
        GenerationResult
    """
    generator = EnumGenerator(output_dir, package_name, guard=guard, template_dir=template_dir)
    return generator.generate(enum)
