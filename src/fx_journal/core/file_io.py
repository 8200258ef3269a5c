"""Safe file I/O utilities.

Provides atomic replace-on-write for JSON documents with file locking
(``fcntl``) and ``fsync`` to minimise data loss on crash or concurrent
access.
"""

from __future__ import annotations

import fcntl
import os
from pathlib import Path


def safe_write_text(path: Path, text: str) -> None:
    """Replace ``path`` with ``text`` atomically.

    * Writers serialise on ``fcntl.LOCK_EX`` held on a sibling ``.lock``
      file, so two processes cannot interleave their temp files.
    * The content goes to a sibling ``.tmp`` file and is flushed with
      ``os.fsync`` before ``os.replace`` swaps it in; readers see either
      the old or the new document, never a torn one.
    * Parent directories are created as needed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    with open(path.with_name(path.name + ".lock"), "a") as lock:
        fcntl.flock(lock.fileno(), fcntl.LOCK_EX)
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, path)
        finally:
            fcntl.flock(lock.fileno(), fcntl.LOCK_UN)
