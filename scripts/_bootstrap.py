from __future__ import annotations

import sys
from pathlib import Path

# secretforge/ is a namespace directory; core/ is the first real package inside it.
_PACKAGE_MARKER = Path("secretforge") / "core" / "__init__.py"


def _resolve_repo_root(script_file: str | Path) -> Path:
    script_path = Path(script_file).resolve()
    repo_root = script_path.parent.parent
    if not (repo_root / _PACKAGE_MARKER).is_file():
        raise RuntimeError(
            "unable to resolve repository root from wrapper location; "
            f"expected wrapper under '<repo>/scripts/' with '<repo>/{_PACKAGE_MARKER.as_posix()}' present"
        )
    return repo_root


def bootstrap_repo_path(script_file: str | Path | None = None) -> Path:
    """Put the checkout root first on sys.path and return it."""
    source_file = __file__ if script_file is None else script_file
    repo_root = _resolve_repo_root(source_file)
    root = str(repo_root)
    if root in sys.path:
        sys.path.remove(root)
    sys.path.insert(0, root)
    return repo_root
