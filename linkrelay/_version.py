from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION = "linkrelay"
DEFAULT_VERSION = "0.0.0"

# Source checkouts carry a VERSION file at the repository root.
VERSION_FILE = Path(__file__).resolve().parents[1] / "VERSION"


def get_version() -> str:
    """
    Installed distribution metadata first, then the VERSION file, then DEFAULT_VERSION.
    """
    try:
        return version(DISTRIBUTION)
    except PackageNotFoundError:
        pass
    if VERSION_FILE.is_file():
        text = VERSION_FILE.read_text(encoding="utf-8").strip()
        if text:
            return text
    return DEFAULT_VERSION


__version__ = get_version()
