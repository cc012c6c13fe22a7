from __future__ import annotations

import os
import tempfile
from pathlib import Path


def enforce_private_file_permissions(path: Path) -> None:
    try:
        os.chmod(path, 0o600)
    except OSError as exc:
        # Windows only honours the read-only bit; POSIX failures are real.
        if os.name != "nt":
            raise ValueError(f"Unable to enforce private permissions on '{path}': {exc}") from exc


def fsync_parent_directory(path: Path) -> None:
    try:
        dir_fd = os.open(str(path.parent), os.O_RDONLY)
    except OSError:
        return
    try:
        os.fsync(dir_fd)
    except OSError:
        pass
    finally:
        try:
            os.close(dir_fd)
        except OSError:
            pass


def write_private_text(path: Path, text: str) -> None:
    """Atomically replace `path` with `text`, leaving it readable by the owner only."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.tmp-", dir=str(path.parent))
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        enforce_private_file_permissions(tmp_path)
        os.replace(tmp_path, path)
        enforce_private_file_permissions(path)
        fsync_parent_directory(path)
    except OSError as exc:
        raise ValueError(f"Unable to write file '{path}': {exc}") from exc
    finally:
        try:
            if tmp_path.exists():
                tmp_path.unlink()
        except OSError:
            pass
