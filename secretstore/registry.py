"""
Keylist bookkeeping.

The keylist is a plain text file of ``<key id> <key name>`` lines. It is
only ever appended to; existing lines are never rewritten and duplicate
ids or names are neither detected nor rejected.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List


@dataclass(frozen=True)
class RegistryEntry:
    key_id: str
    key_name: str

    def to_line(self) -> str:
        return f"{self.key_id} {self.key_name}\n"

    @classmethod
    def parse(cls, line: str) -> "RegistryEntry":
        parts = line.split(None, 1)
        key_name = parts[1].strip() if len(parts) > 1 else ""
        return cls(key_id=parts[0], key_name=key_name)


class Registry:
    def __init__(self, path: str | Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def entries(self) -> List[RegistryEntry]:
        """
        Read every entry in file order. Blank lines are skipped.

        A missing keylist reads as empty.
        """

        if not self.exists():
            return []

        with self.path.open("r", encoding="utf-8") as fh:
            return [RegistryEntry.parse(line) for line in fh if line.strip()]

    def key_ids(self) -> List[str]:
        return [entry.key_id for entry in self.entries()]

    def append(self, key_id: str, key_name: str) -> RegistryEntry:
        entry = RegistryEntry(key_id=key_id, key_name=key_name)
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Hand-edited files may lack a trailing newline
        prefix = ""
        if self.exists() and self.path.stat().st_size:
            with self.path.open("rb") as fh:
                fh.seek(-1, 2)
                if fh.read(1) != b"\n":
                    prefix = "\n"

        with self.path.open("a", encoding="utf-8") as fh:
            fh.write(prefix + entry.to_line())
        return entry
