"""
Module: store.file_locking

Purpose:
    Cross-platform file locking utilities for the file-backed store.
    Uses portalocker for Mac, Windows, and Linux compatibility.

Key Functions:
    - locked_file: Context manager for locked file access
    - exclusive_lock: Hold an exclusive lock on a lock file
    - locked_append_jsonl: Append records to JSONL with exclusive lock
    - locked_read_jsonl: Read JSONL records under a shared lock
    - locked_read_modify_write_json: Read-modify-write JSON with lock

Dependencies:
    - portalocker: Cross-platform file locking

Used By:
    - store.jsonl_store: Question and paper files, per-subject lock
    - extractor.timing: Timing data merging
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Generator, Iterable, List

import portalocker

from examace.core.errors import StoreError

logger = logging.getLogger(__name__)


@contextmanager
def locked_file(
    path: Path,
    mode: str = 'r',
    lock_type: int = portalocker.LOCK_EX,
) -> Generator:
    """
    Context manager for cross-platform locked file access.

    Args:
        path: Path to file.
        mode: File open mode ('r', 'w', 'a', etc.).
        lock_type: Lock type (LOCK_EX for exclusive, LOCK_SH for shared).

    Yields:
        Open file handle with lock held.

    Example:
        >>> with locked_file(path, 'a') as f:
        ...     f.write('data')
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    # Ensure file exists for read modes
    if 'r' in mode and not path.exists():
        path.touch()

    with open(path, mode, encoding='utf-8') as f:
        portalocker.lock(f, lock_type)
        try:
            yield f
        finally:
            portalocker.unlock(f)


@contextmanager
def exclusive_lock(lock_path: Path) -> Generator[None, None, None]:
    """
    Hold an exclusive lock on ``lock_path`` for the duration of the block.

    Blocks until the lock is free. Other processes using the same lock
    path are serialized; the lock file's content is never read.

    Example:
        >>> with exclusive_lock(subject_dir / ".lock"):
        ...     cache = store.load_concept_cache("os")
    """
    with locked_file(lock_path, 'a', portalocker.LOCK_EX):
        logger.debug(f"Acquired lock {lock_path}")
        yield
    logger.debug(f"Released lock {lock_path}")


def locked_append_jsonl(path: Path, records: Iterable[Dict[str, Any]]) -> int:
    """
    Append records to a JSONL file with exclusive lock.

    All records are written while the lock is held, so a concurrent
    reader never sees half of a batch.

    Args:
        path: Path to JSONL file.
        records: Dictionaries to append, one JSON line each.

    Returns:
        Number of records written.
    """
    lines = [json.dumps(record, ensure_ascii=False) + '\n' for record in records]
    if not lines:
        return 0
    with locked_file(path, 'a', portalocker.LOCK_EX) as f:
        f.writelines(lines)
        f.flush()

    logger.debug(f"Appended {len(lines)} record(s) to {path.name}")
    return len(lines)


def locked_read_jsonl(path: Path) -> List[Dict[str, Any]]:
    """
    Read every record of a JSONL file under a shared lock.

    Blank lines are skipped. A missing file reads as empty.

    Raises:
        StoreError: If a line is not a JSON object.
    """
    if not path.exists():
        return []
    records: List[Dict[str, Any]] = []
    with locked_file(path, 'r', portalocker.LOCK_SH) as f:
        for line_no, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as exc:
                raise StoreError(
                    f"Corrupt record in {path.name} line {line_no}: {exc}",
                    path=str(path),
                    line=line_no,
                ) from exc
            if not isinstance(record, dict):
                raise StoreError(
                    f"Record in {path.name} line {line_no} is not an object",
                    path=str(path),
                    line=line_no,
                )
            records.append(record)
    return records


def locked_read_modify_write_json(
    path: Path,
    modifier: Callable[[Dict[str, Any]], Dict[str, Any]],
    default: Callable[[], Dict[str, Any]] = dict,
) -> Dict[str, Any]:
    """
    Read JSON, apply modifier, write back - all with exclusive lock.

    Args:
        path: Path to JSON file.
        modifier: Function that takes existing data, returns modified data.
        default: Factory for default data if file doesn't exist.

    Returns:
        The modified data that was written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    if not path.exists():
        path.write_text(json.dumps(default(), indent=2), encoding='utf-8')

    with open(path, 'r+', encoding='utf-8') as f:
        portalocker.lock(f, portalocker.LOCK_EX)
        try:
            f.seek(0)
            content = f.read()
            existing = json.loads(content) if content.strip() else default()

            modified = modifier(existing)

            f.seek(0)
            f.truncate()
            json.dump(modified, f, indent=2, ensure_ascii=False)

            return modified
        finally:
            portalocker.unlock(f)
