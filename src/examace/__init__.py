"""Top-level package for the ExamAce toolkit.

Provides subpackages:
- examace.core – immutable data models and the error hierarchy
- examace.extractor – document-to-question segmentation pipeline
- examace.analysis – normalization, similarity, concept matching, repetition
- examace.store – file-backed question store with per-subject locking
- examace.cli – command-line front end
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.3.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    # Fallback to importlib.metadata for installed package
    try:
        from importlib.metadata import PackageNotFoundError, version as pkg_version
    except ImportError:
        return "0.0.0"
    try:
        return pkg_version("examace_toolkit")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
