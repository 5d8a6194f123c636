import sys
from pathlib import Path
from typing import Optional


def _resolved_path(path_value: str) -> Optional[Path]:
    try:
        return Path(path_value).resolve()
    except (OSError, RuntimeError, TypeError, ValueError):
        return None


def _prefer_path(directory: Path) -> None:
    if not directory.is_dir():
        return

    existing_index = None
    for index, entry in enumerate(sys.path):
        if _resolved_path(entry) == directory:
            existing_index = index
            break

    if existing_index == 0:
        return

    if existing_index is not None:
        sys.path.pop(existing_index)

    sys.path.insert(0, str(directory))


def _prefer_repo_src() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    # tools/ is imported as a top-level package by the fixture builders.
    _prefer_path(repo_root.resolve())
    _prefer_path((repo_root / "src").resolve())


_prefer_repo_src()
