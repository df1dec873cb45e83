"""
Companion file generation for enumgen.

Renders EnumSpecs into ``<type>_enum.go`` files through a Jinja2
template, skipping files that were already generated.
"""

from enumgen.generator.generator import (
    EnumGenerator,
    GenerationResult,
    canonical_header,
    destination_path,
    generate_enum,
)
from enumgen.generator.renderer import create_jinja_env, get_enum_template, get_jinja_env

__all__ = [
    "EnumGenerator",
    "GenerationResult",
    "canonical_header",
    "destination_path",
    "generate_enum",
    "create_jinja_env",
    "get_enum_template",
    "get_jinja_env",
]
