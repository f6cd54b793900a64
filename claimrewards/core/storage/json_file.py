"""JSON file persistence shared by the allocation store and the claim ledger.

Files are human-indented UTF-8 JSON. A save serializes the whole document to
a sibling temp file and replaces the target, so a reader sees either the old
or the new content. What happens on failure is decided by PersistencePolicy:

- FAIL_OPEN: write errors are logged and reported as False; unparsable files
  are logged and the caller starts from an empty document.
- FAIL_CLOSED: write errors raise PersistenceError; unparsable files raise
  CorruptDataError.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from claimrewards.core.config.config import PersistencePolicy
from claimrewards.core.exceptions import CorruptDataError, PersistenceError
from claimrewards.core.logging.logger import get_logger

logger = get_logger(__name__)

JSON_INDENT = 2


def read_json(path: Path) -> Any:
    """Read a JSON document. Raises OSError or ValueError on failure."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def write_json(path: Path, data: Any) -> None:
    """Write a JSON document atomically, creating parent dirs as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=JSON_INDENT, ensure_ascii=False)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def persist(path: Path, data: Any, policy: PersistencePolicy, label: str) -> bool:
    """
    Overwrite `path` with `data` under the given failure policy.

    Returns True when the file was written. Under FAIL_OPEN a failed write is
    logged and False is returned; under FAIL_CLOSED PersistenceError is raised.
    """
    try:
        write_json(path, data)
    except OSError as exc:
        if policy is PersistencePolicy.FAIL_CLOSED:
            raise PersistenceError(f"save {label}", path, exc) from exc
        logger.error(
            f"Failed to save {label}: {exc}",
            extra={"path": str(path), "error_type": type(exc).__name__},
        )
        return False

    logger.debug(f"{label.capitalize()} saved successfully.", extra={"path": str(path)})
    return True


def recover_corrupt(
    path: Path,
    error: Exception,
    policy: PersistencePolicy,
    label: str,
) -> None:
    """
    Apply the recovery policy to a file that could not be read or parsed.

    Returns normally under FAIL_OPEN (the caller starts empty); raises
    CorruptDataError under FAIL_CLOSED.
    """
    if policy is PersistencePolicy.FAIL_CLOSED:
        raise CorruptDataError(path, str(error)) from error

    logger.warning(
        f"Failed to load {label}: {error}. Starting empty.",
        extra={"path": str(path), "error_type": type(error).__name__},
    )


__all__ = [
    "JSON_INDENT",
    "persist",
    "read_json",
    "recover_corrupt",
    "write_json",
]
