"""
Jinja2 environment for companion file templates.

The packaged ``templates/enum.go.j2`` is the default. A project may
supply its own directory; templates found there take priority and the
packaged originals stay reachable through the ``enumgen://`` prefix
(e.g. ``{% extends "enumgen://enum.go.j2" %}``).
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PrefixLoader, StrictUndefined, Template

from enumgen.core.ir import ZERO_VALUES, BaseTypeKind

# Template directory
TEMPLATES_DIR = Path(__file__).parent / "templates"

ENUM_TEMPLATE = "enum.go.j2"


def contains(base: str, substr: str) -> bool:
    return substr in base


def default_for(kind: BaseTypeKind | str) -> str:
    """Zero value literal for a base type category."""
    return ZERO_VALUES[BaseTypeKind(kind)]


def lower(s: str) -> str:
    return s.lower()


def create_jinja_env(project_templates_dir: Path | None = None) -> Environment:
    """Create and configure the Jinja2 environment.

    Args:
        project_templates_dir: Optional directory whose templates override
            the packaged ones.
    """
    framework_loader = FileSystemLoader(str(TEMPLATES_DIR))

    if project_templates_dir and project_templates_dir.is_dir():
        project_loader = FileSystemLoader(str(project_templates_dir))
        main_loader = ChoiceLoader([project_loader, framework_loader])
    else:
        main_loader = ChoiceLoader([framework_loader])

    loader = PrefixLoader({"enumgen": framework_loader}, delimiter="://")
    combined = ChoiceLoader([loader, main_loader])

    env = Environment(
        loader=combined,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        autoescape=False,
    )

    env.globals["contains"] = contains
    env.globals["default_for"] = default_for
    env.globals["lower"] = lower
    env.filters["lower"] = lower
    env.filters["default_for"] = default_for

    return env


# Module-level singletons, one per template directory
_envs: dict[Path | None, Environment] = {}


def get_jinja_env(project_templates_dir: Path | None = None) -> Environment:
    """Get the shared Jinja2 environment for a template directory (lazy)."""
    key = project_templates_dir.resolve() if project_templates_dir else None
    env = _envs.get(key)
    if env is None:
        env = create_jinja_env(key)
        _envs[key] = env
    return env


def get_enum_template(project_templates_dir: Path | None = None) -> Template:
    """Return the compiled companion file template (Jinja2 caches it)."""
    return get_jinja_env(project_templates_dir).get_template(ENUM_TEMPLATE)
