"""
Sequential scan-then-generate pipeline.

    files = discover(config, root)               # Stage.DISCOVER
    config = infer(config, files)                # Stage.INFER
    enums, warnings = scan(files, strict=...)    # Stage.SCAN
    for enum in enums: generator.generate(enum)  # Stage.GENERATE

Every stage fails fast. Errors leave a stage wrapped in a PipelineError
that names the stage (and, while generating, the enum type). All enums
are scanned (and validated) before the first file is written, so a bad
directive anywhere in the input leaves the output directory untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from enum import StrEnum
from pathlib import Path

from enumgen.core.errors import DiscoveryError, EnumgenError
from enumgen.core.fileset import discover_go_files, infer_defaults
from enumgen.core.ir import EnumSpec
from enumgen.core.manifest import GeneratorConfig
from enumgen.core.scanner import SOURCE_SUFFIX, parse_enums
from enumgen.core.validator import validate_enums
from enumgen.generator import EnumGenerator, GenerationResult

logger = logging.getLogger(__name__)


class Stage(StrEnum):
    """Pipeline stages, in the order they run."""

    DISCOVER = "discover"
    INFER = "infer"
    SCAN = "scan"
    GENERATE = "generate"


class PipelineError(EnumgenError):
    """
    An error raised inside one pipeline stage.

    Attributes:
        stage: Stage that failed
        error: The underlying enumgen error
        type_name: Enum being generated when the GENERATE stage failed
    """

    def __init__(self, stage: Stage, error: EnumgenError, type_name: str | None = None):
        self.stage = stage
        self.error = error
        self.type_name = type_name
        super().__init__(str(error))


@contextmanager
def stage(name: Stage, type_name: str | None = None) -> Iterator[None]:
    """Attribute any enumgen error raised in the block to a stage."""
    try:
        yield
    except PipelineError:
        raise
    except EnumgenError as e:
        raise PipelineError(name, e, type_name) from e


def resolve_defaults(config: GeneratorConfig, files: list[Path]) -> GeneratorConfig:
    """
    Fill in output_dir and package from the first Go file when unset.

    Raises:
        DiscoveryError: If inference is needed and impossible
    """
    if config.output_dir is not None and config.package:
        return config

    go_files = [f for f in files if str(f).endswith(SOURCE_SUFFIX)]
    if not go_files:
        raise DiscoveryError("no Go files to infer output directory and package from")

    directory, package = infer_defaults(go_files[0])
    logger.debug("Inferred output dir %s and package %s from %s", directory, package, go_files[0])
    return config.merge(
        output_dir=config.output_dir or directory,
        package=config.package or package,
    )


def scan_enums(files: Iterable[Path], strict: bool = False) -> tuple[list[EnumSpec], list[str]]:
    """
    Scan files and, in strict mode, validate every enum.

    Returns:
        Tuple of (enums, validation warnings)
    """
    enums = parse_enums(files)
    warnings = validate_enums(enums) if strict else []
    return enums, warnings


def make_generator(config: GeneratorConfig) -> EnumGenerator:
    if config.output_dir is None or not config.package:
        raise DiscoveryError("output directory and package must be resolved before generating")
    return EnumGenerator(
        config.output_dir,
        config.package,
        guard=config.guard,
        template_dir=config.template_dir,
    )


def discover(config: GeneratorConfig, root: Path | None = None) -> list[Path]:
    with stage(Stage.DISCOVER):
        return discover_go_files(config.input, root)


def infer(config: GeneratorConfig, files: list[Path]) -> GeneratorConfig:
    with stage(Stage.INFER):
        return resolve_defaults(config, files)


def scan(files: list[Path], strict: bool = False) -> tuple[list[EnumSpec], list[str]]:
    with stage(Stage.SCAN):
        return scan_enums(files, strict=strict)


def run(
    config: GeneratorConfig,
    root: Path | None = None,
    on_result: Callable[[GenerationResult], None] | None = None,
) -> GenerationResult:
    """
    Run discovery, scanning and generation for one configuration.

    Args:
        config: Run settings; unset output_dir/package are inferred
        root: Directory relative input globs are resolved against
        on_result: Called after each enum is generated or skipped

    Returns:
        Combined GenerationResult for all enums, with validation warnings

    Raises:
        PipelineError: On the first failure, naming the failed stage
    """
    files = discover(config, root)
    config = infer(config, files)
    enums, warnings = scan(files, strict=config.strict)

    combined = GenerationResult()
    for warning in warnings:
        combined.add_warning(warning)

    with stage(Stage.GENERATE):
        generator = make_generator(config)
    for enum in enums:
        with stage(Stage.GENERATE, enum.type_name):
            result = generator.generate(enum)
        if on_result is not None:
            on_result(result)
        combined.merge(result)

    logger.info(
        "Generated %d file(s), skipped %d",
        len(combined.files_created),
        len(combined.files_skipped),
    )
    return combined
