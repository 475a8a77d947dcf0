"""Top-level package for Slice Studio.

Provides subpackages:
- slice_studio.core – frozen data models (rectangles, grid axes, zip entries)
- slice_studio.slicing – grid geometry, editor and Pillow cropper
- slice_studio.archive – CRC-32 and stored ZIP archive builder
- slice_studio.workspace – slicer session and processing area
- slice_studio.enhance – generation backend client for slice enhancement
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"

    if pyproject.exists():
        try:
            content = pyproject.read_text()
        except OSError:
            content = ""
        for line in content.splitlines():
            if line.strip().startswith("version"):
                # Parse: version = "0.3.1"
                return line.split("=")[1].strip().strip('"').strip("'")

    # Fallback to importlib.metadata for installed package
    from importlib.metadata import PackageNotFoundError, version as pkg_version
    try:
        return pkg_version("slice_studio")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__copyright__ = "Copyright 2026 Slice Studio contributors. Licensed under the MIT License"
__all__: list[str] = ["__version__"]
