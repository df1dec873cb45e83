import glob
from pathlib import Path

from .errors import DiscoveryError, ParseError
from .parser import parse_package_name


def discover_go_files(pattern: str, root: Path | None = None) -> list[Path]:
    """
    Expand the input glob into paths, in sorted order.

    Raises:
        DiscoveryError: If nothing matches
    """
    root = root or Path.cwd()
    full_pattern = pattern if Path(pattern).is_absolute() else str(root / pattern)
    files = [Path(p) for p in sorted(glob.glob(full_pattern, recursive=True))]
    files = [p for p in files if p.is_file()]
    if not files:
        raise DiscoveryError(f"no files match {pattern!r}")
    return files


def infer_defaults(file: Path) -> tuple[Path, str]:
    """
    Infer the output directory and package name from a Go file.

    Returns:
        Tuple of (absolute directory of the file, its package name)

    Raises:
        DiscoveryError: If the package clause cannot be read
    """
    directory = file.resolve().parent
    try:
        package = parse_package_name(file)
    except ParseError as e:
        raise DiscoveryError(str(e)) from e
    return directory, package
