import json
import logging
import os
import tempfile
from collections.abc import Mapping
from contextlib import suppress
from pathlib import Path
from typing import Any

from freesoundkit.domain.ports.storage.credentials import CredentialStorePort

logger = logging.getLogger(__name__)


class JsonFileCredentialStore(CredentialStorePort):
    """Credential store backed by a single JSON document on disk."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._data: dict[str, Any] = self._load()

    def get(self, key: str) -> Any | None:
        return self._data.get(key)

    def set(self, key: str, value: Any | None) -> None:
        self.set_many({key: value})

    def set_many(self, values: Mapping[str, Any | None]) -> None:
        data = {**self._data, **values}
        # Absent values are removed rather than stored as null.
        data = {key: value for key, value in data.items() if value is not None}

        self._write(data)
        self._data = data

    def _load(self) -> dict[str, Any]:
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            logger.warning(f"Unable to read credential file {self.path}: {e}")
            return {}
        except UnicodeDecodeError as e:
            logger.warning(f"Ignoring undecodable credential file {self.path}: {e}")
            return {}

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring corrupted credential file {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring credential file {self.path}: not a JSON object")
            return {}

        return data

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
        finally:
            with suppress(FileNotFoundError):
                os.unlink(tmp_name)
