"""Persistence helpers for the JSON backing files."""

from claimrewards.core.storage.json_file import (
    persist,
    read_json,
    recover_corrupt,
    write_json,
)

__all__ = ["persist", "read_json", "recover_corrupt", "write_json"]
