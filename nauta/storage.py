import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Protocol, Union

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def load(self, key: str, default: Any = None) -> Any:
        ...

    def save(self, key: str, value: Any) -> bool:
        ...

    def remove(self, key: str) -> None:
        ...


class MemoryStore:
    def __init__(self, initial: Dict[str, Any] | None = None):
        self._data: Dict[str, Any] = dict(initial or {})

    def load(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def save(self, key: str, value: Any) -> bool:
        self._data[key] = value
        return True

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """All keys live in one JSON document on disk."""

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    def _read_all(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as fp:
                data = json.load(fp)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Could not read store %s: %s", self._path, e)
            return {}
        if not isinstance(data, dict):
            logger.error("Store %s does not hold a JSON object", self._path)
            return {}
        return data

    def _write_all(self, data: Dict[str, Any]) -> bool:
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tmp.open("w", encoding="utf-8") as fp:
                json.dump(data, fp, ensure_ascii=False, indent=2)
            os.replace(tmp, self._path)
        except OSError as e:
            logger.error("Could not write store %s: %s", self._path, e)
            return False
        return True

    def load(self, key: str, default: Any = None) -> Any:
        return self._read_all().get(key, default)

    def save(self, key: str, value: Any) -> bool:
        data = self._read_all()
        data[key] = value
        return self._write_all(data)

    def remove(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)
