import logging
import time
from typing import Callable, Hashable

from wikibase_forms.models.schema import Schema

logger = logging.getLogger(__name__)


class SchemaCache:
    """In-memory schema cache with a fixed time to live.

    Entries are stored with the time they were put; an entry older than
    ``ttl`` seconds is treated as missing and dropped on read.
    """

    def __init__(self, ttl: float = 3600.0, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self.clock = clock
        self._entries: dict[Hashable, tuple[Schema, float]] = {}

    def get(self, key: Hashable) -> Schema | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        schema, stored_at = entry
        if self.clock() - stored_at >= self.ttl:
            logger.debug(f"Schema cache entry {key} expired")
            del self._entries[key]
            return None
        logger.debug(f"Schema cache hit for {key}")
        return schema

    def put(self, key: Hashable, schema: Schema) -> None:
        self._entries[key] = (schema, self.clock())

    def invalidate(self, key: Hashable | None = None) -> None:
        if key is None:
            logger.info(f"Clearing {len(self._entries)} cached schemas")
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)
