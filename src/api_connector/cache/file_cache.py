"""
File-based persistent cache backend.
"""

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

from ..core.cache import NOT_FOUND, Cache, validate_identifier
from ..core.exceptions import CacheWriteError


logger = logging.getLogger(__name__)


class FileCache(Cache):
    """
    Stores each entry as a JSON file in a cache directory.

    Files are named {key}.json and hold the value, its tags and the
    write time. Values must be JSON serializable. Entries survive
    process restarts, which makes this backend suitable as the
    fallback cache for raw responses.
    """

    def __init__(self, base_dir: Path, create_dirs: bool = True):
        """
        Initialize the file cache.

        Args:
            base_dir: Directory holding the cache files
            create_dirs: Whether to create the directory automatically
        """
        self.base_dir = Path(base_dir)
        self.create_dirs = create_dirs

        if create_dirs:
            self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        validate_identifier(key)
        return self.base_dir / f"{key}.json"

    def _read_entry(self, path: Path) -> Optional[dict]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                entry = json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable cache file {path}: {e}")
            return None

        if not isinstance(entry, dict) or "value" not in entry:
            logger.warning(f"Ignoring malformed cache file: {path}")
            return None
        return entry

    def get(self, key: str) -> Any:
        entry = self._read_entry(self._path_for(key))
        if entry is None:
            return NOT_FOUND
        return entry["value"]

    def set(self, key: str, value: Any, tags: Optional[Iterable[str]] = None) -> None:
        path = self._path_for(key)
        tags = sorted(set(tags or []))
        for tag in tags:
            validate_identifier(tag, "tag")

        content = {
            "key": key,
            "value": value,
            "tags": tags,
            "written_at_utc": datetime.now(timezone.utc).isoformat(),
        }

        try:
            serialized = json.dumps(content, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise CacheWriteError(f"Value for cache entry {key} is not serializable: {e}") from e

        try:
            if self.create_dirs:
                self.base_dir.mkdir(parents=True, exist_ok=True)

            # Write to a temp file first so readers never see a partial entry
            fd, tmp_name = tempfile.mkstemp(dir=self.base_dir, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(serialized)
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise CacheWriteError(f"Could not write cache entry {key}: {e}") from e

        logger.debug(f"Wrote cache entry to: {path}")

    def remove(self, key: str) -> bool:
        path = self._path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        return True

    def flush_by_tag(self, tag: str) -> int:
        validate_identifier(tag, "tag")
        removed = 0
        for path in self.base_dir.glob("*.json"):
            entry = self._read_entry(path)
            if entry is not None and tag in entry.get("tags", []):
                path.unlink(missing_ok=True)
                removed += 1
        return removed

    def flush(self) -> None:
        for path in self.base_dir.glob("*.json"):
            path.unlink(missing_ok=True)
