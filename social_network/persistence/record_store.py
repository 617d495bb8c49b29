"""
Keyed person record store with flat-file JSON persistence
"""

import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import quote

import aiofiles
import aiofiles.os

from ..core import PersonRecord, UnknownPersonError, person_key
from ..logging import get_logger
from ..utils import fast_json


class PersonStore:
    """Owns every PersonRecord; one JSON file per player when a data directory is given"""

    def __init__(self, data_dir: Optional[str] = None):
        self.data_dir = Path(data_dir) if data_dir else None
        if self.data_dir is not None:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        self._records: Dict[str, PersonRecord] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self.logger = get_logger(__name__)

    async def load(self) -> int:
        """Load all records from the data directory, returning how many were read"""
        if self.data_dir is None:
            return 0

        loaded = 0
        for path in sorted(self.data_dir.glob("*.json")):
            async with aiofiles.open(path, "rb") as f:
                raw = await f.read()
            record = PersonRecord.model_validate(fast_json.loads(raw))
            self._records[record.key] = record
            loaded += 1

        self.logger.info(f"Loaded {loaded} person records from {self.data_dir}")
        return loaded

    # === Lookup ===

    def find(self, identifier: str) -> Optional[PersonRecord]:
        return self._records.get(person_key(identifier))

    def get(self, identifier: str) -> PersonRecord:
        """Get a record, raising UnknownPersonError if the player was never seen"""
        record = self.find(identifier)
        if record is None:
            raise UnknownPersonError(identifier)
        return record

    def __contains__(self, identifier: str) -> bool:
        return person_key(identifier) in self._records

    def __len__(self) -> int:
        return len(self._records)

    def keys(self) -> List[str]:
        return sorted(self._records)

    def records(self) -> List[PersonRecord]:
        return [self._records[k] for k in self.keys()]

    # === Mutation ===

    async def register(self, name: str) -> PersonRecord:
        """Get the record for ``name``, creating it on first reference"""
        record = self.find(name)
        if record is None:
            record = PersonRecord(name=name.strip())
            self._records[record.key] = record
            await self.save(record)
            self.logger.debug(f"Registered new person record for {record.name}")
        return record

    async def save(self, record: PersonRecord):
        self._records[record.key] = record
        if self.data_dir is None:
            return

        path = self._path_for(record.key)
        tmp_path = path.with_suffix(".json.tmp")
        async with aiofiles.open(tmp_path, "wb") as f:
            await f.write(fast_json.dumps_bytes(record.model_dump(mode="json"), pretty=True))
        await aiofiles.os.replace(tmp_path, path)

    async def remove(self, identifier: str) -> bool:
        """Administrative removal of a record; does not touch other records' edges"""
        key = person_key(identifier)
        # The lock entry outlives the record so waiters keep excluding each other
        async with self.locked(key):
            if self._records.pop(key, None) is None:
                return False
            if self.data_dir is not None:
                path = self._path_for(key)
                if path.exists():
                    await aiofiles.os.remove(path)
        self.logger.info(f"Removed person record {key}")
        return True

    # === Locking ===

    @asynccontextmanager
    async def locked(self, *identifiers: str):
        """
        Hold the locks of every given record for the duration of the block.

        Locks are acquired in lexicographic key order so two transitions over
        the same pair can never deadlock.
        """
        keys = sorted({person_key(i) for i in identifiers})
        locks = [self._locks.setdefault(k, asyncio.Lock()) for k in keys]
        acquired: List[asyncio.Lock] = []
        try:
            for lock in locks:
                await lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()

    def _path_for(self, key: str) -> Path:
        return self.data_dir / f"{quote(key, safe='')}.json"
