"""Resource resolver for fuzdur packaged data.

Priority for data root:
  1. ``FUZDUR_DATA_ROOT`` env var (power-user override).
  2. Packaged data shipped inside the wheel (``fuzdur/data/``).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

# -- internal helpers --------------------------------------------------------

_REQUIRED_SUBDIRS = ("schemas",)


def _has_required_subdirs(root: Path) -> bool:
    return all((root / d).is_dir() for d in _REQUIRED_SUBDIRS)


def _packaged_data_path() -> Optional[Path]:
    """Resolve via importlib.resources, else Path(__file__)."""
    try:
        from importlib.resources import files as _ir_files

        candidate = Path(str(_ir_files("fuzdur") / "data"))
    except (ImportError, TypeError):
        candidate = Path(__file__).resolve().parent / "data"

    if candidate.is_dir() and _has_required_subdirs(candidate):
        return candidate
    return None


# -- public API --------------------------------------------------------------


def data_root() -> Path:
    """Return the directory containing schemas/.

    Raises ``RuntimeError`` if no valid data root can be found.
    """
    env = os.environ.get("FUZDUR_DATA_ROOT")
    if env:
        p = Path(env).expanduser().resolve()
        if _has_required_subdirs(p):
            return p
        raise RuntimeError(
            f"FUZDUR_DATA_ROOT={env!r} does not contain the required "
            f"subdirectories: {', '.join(_REQUIRED_SUBDIRS)}"
        )

    pkg = _packaged_data_path()
    if pkg is not None:
        return pkg

    raise RuntimeError(
        "Cannot locate fuzdur data files.  Set FUZDUR_DATA_ROOT or reinstall the package."
    )


def schemas_dir() -> Path:
    """Return the directory containing JSON schema files."""
    return data_root() / "schemas"


def schema_path(name: str) -> Path:
    return schemas_dir() / f"{name}.schema.json"
