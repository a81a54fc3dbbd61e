from __future__ import annotations

import logging
import sys
from pathlib import Path


def _ensure_repo_root_on_path() -> None:
    """Ensure the repository root (parent of this package) is on ``sys.path``.

    If this module is executed as a script (``python frameclock/__main__.py``),
    the package may not be discoverable by Python. This helper inserts the
    parent directory of the package into ``sys.path`` so that imports resolve
    correctly.
    """
    pkg_dir = Path(__file__).resolve().parent
    repo_root_str = str(pkg_dir.parent)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


try:
    # Works when executed as a module: python -m frameclock
    from .app import run  # type: ignore[attr-defined]
    from .config import ClockConfig  # type: ignore[attr-defined]
except ImportError:
    # Works when executed as a script (absolute path, IDE "Run Python File", etc.)
    _ensure_repo_root_on_path()
    from frameclock.app import run  # type: ignore[attr-defined]
    from frameclock.config import ClockConfig  # type: ignore[attr-defined]


def main() -> int:
    """Entry point for running the clock demo from the command line."""
    config = ClockConfig.from_env()
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    return run(config=config)


if __name__ == "__main__":
    raise SystemExit(main())
