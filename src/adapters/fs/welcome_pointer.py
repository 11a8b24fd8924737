"""
File-backed welcome document pointer.

Implements WelcomePointerPort with a one-line text file at a fixed path.

Key behaviors:
- Missing file or blank first line reads as absent
- ``write`` truncates and rewrites the file (last writer wins)
- ``try_initialize`` writes a temp file and hard-links it into place; the link
  fails if the pointer already exists, so only one initializer can win even
  across processes
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from src.ports.pointer import PointerStoreError

logger = logging.getLogger(__name__)


class FileWelcomePointer:
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def read(self) -> str | None:
        try:
            with open(self.path, encoding="utf-8") as f:
                first_line = f.readline().strip()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PointerStoreError(f"Failed to read welcome pointer {self.path}: {e}") from e
        return first_line or None

    def write(self, document_id: str) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                f.write(document_id)
                f.write("\n")
        except OSError as e:
            raise PointerStoreError(f"Failed to write welcome pointer {self.path}: {e}") from e
        logger.info("Welcome pointer %s set to %s", self.path, document_id)

    def try_initialize(self, document_id: str) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
        except OSError as e:
            raise PointerStoreError(f"Failed to stage welcome pointer {self.path}: {e}") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(document_id)
                f.write("\n")
            try:
                os.link(tmp_name, self.path)
            except FileExistsError:
                if self.read() is not None:
                    logger.info("Welcome pointer %s already initialized", self.path)
                    return False
                # A blank pointer file reads as absent; take it over.
                os.replace(tmp_name, self.path)
        except OSError as e:
            raise PointerStoreError(f"Failed to write welcome pointer {self.path}: {e}") from e
        finally:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass

        logger.info("Welcome pointer %s initialized to %s", self.path, document_id)
        return True
