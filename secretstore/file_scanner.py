"""
Filesystem scanning for ciphertext/plaintext pairs.

This module is responsible for:
- walking a directory tree
- recognising ciphertext files by suffix
- pairing each ciphertext with its plaintext counterpart

This module does NOT:
- decrypt or encrypt data
- delete or modify files
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, Tuple

from .config import CIPHER_SUFFIX
from .utils import strip_suffix


class FileScanner:
    def __init__(self, root: str | Path, cipher_suffix: str = CIPHER_SUFFIX):
        self.root = Path(root)
        self.cipher_suffix = cipher_suffix

    def scan(self) -> Iterator[Path]:
        """
        Walk the tree and yield every ciphertext file, in sorted order.
        """

        for path in sorted(self.root.rglob(f"*{self.cipher_suffix}")):
            if not path.is_file():
                continue
            if path.name == self.cipher_suffix:
                continue

            yield path

    def scan_pairs(self) -> Iterator[Tuple[Path, Path]]:
        """
        Yield (ciphertext, plaintext) for ciphertexts whose plaintext exists.
        """

        for path in self.scan():
            plaintext = strip_suffix(path, self.cipher_suffix)
            if not plaintext.is_file():
                continue

            yield path, plaintext
