"""JSON document files with atomic replacement."""

import json
import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class JsonDocumentFile:
    """A single JSON object persisted at a fixed path."""

    path: Path

    def read(self) -> dict[str, object] | None:
        """Return the stored object, or None when the file does not exist.

        Raises ``ValueError`` when the file holds something other than a JSON
        object and ``OSError`` when it cannot be read.
        """
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except FileNotFoundError:
            return None
        if not isinstance(payload, dict):
            raise ValueError(f"Expected a JSON object in {self.path}")
        return payload

    def write(self, payload: dict[str, object]) -> None:
        """Atomically replace the file with the serialized payload."""
        data = json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with tmp_path.open("w", encoding="utf-8") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        try:
            tmp_path.replace(self.path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise

    def delete(self) -> None:
        """Remove the file if present."""
        self.path.unlink(missing_ok=True)
