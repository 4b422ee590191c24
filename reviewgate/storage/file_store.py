from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Iterator, MutableMapping, Union

logger = logging.getLogger(__name__)


class JsonFileStore(MutableMapping[str, str]):
    """
    String key-value mapping persisted to a single JSON file.

    Every mutation rewrites the file through a temp file and ``os.replace`` so
    a crash never leaves a half-written document. The file and its parent
    directory are created on first write.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._data: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError):
            logger.warning("review store file unreadable, starting empty", extra={"path": str(self.path)})
            return {}
        if not isinstance(raw, dict):
            return {}
        return {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._data, f, sort_keys=True, separators=(",", ":"))
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def reload(self) -> None:
        self._data = self._load()

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: str) -> None:
        self._data[key] = value
        self._flush()

    def __delitem__(self, key: str) -> None:
        del self._data[key]
        self._flush()

    def __iter__(self) -> Iterator[str]:
        return iter(dict(self._data))

    def __len__(self) -> int:
        return len(self._data)


__all__ = ["JsonFileStore"]
