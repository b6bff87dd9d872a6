# codelingo/__init__.py
"""
CodeLingo - AI Code Converter

Converts source code between programming languages using NiceGUI and an
OpenAI-compatible chat backend.
"""

from pathlib import Path


def _get_version() -> str:
    """
    Read the version from pyproject.toml.

    Falls back to the hardcoded version when the package is installed
    without its pyproject.toml next to it.

    Returns:
        str: Version string (e.g. "0.1.0")
    """
    try:
        import tomllib  # Python 3.11+ standard library

        pyproject_path = Path(__file__).parent.parent / "pyproject.toml"
        if pyproject_path.exists():
            with open(pyproject_path, "rb") as f:
                data = tomllib.load(f)
            return data.get("project", {}).get("version", "0.0.0")
    except Exception:
        pass

    # フォールバック: ハードコードされたバージョン
    return "0.1.0"


__version__ = _get_version()
__app_name__ = "CodeLingo"
