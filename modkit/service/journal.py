"""Hash-chained query journal.

Each entry stores the SHA-256 of the previous entry, so an edited record
breaks the chain.  With ``max_entries`` set, the oldest entries are
dropped once the journal is full; the hash of the last dropped entry is
kept as the anchor the remaining chain is verified from.
"""

from __future__ import annotations

import hashlib
import json
import time
from collections import deque
from dataclasses import asdict, dataclass
from typing import Any, Deque, Dict, List, Optional

GENESIS_HASH = "0" * 64


@dataclass
class JournalEntry:
    timestamp: float
    event: str
    data: Dict[str, Any]
    prev_hash: str
    entry_hash: str


def _digest(timestamp: float, event: str, data: Dict[str, Any], prev_hash: str) -> str:
    payload = json.dumps(
        {"timestamp": timestamp, "event": event, "data": data, "prev_hash": prev_hash},
        sort_keys=True,
        separators=(",", ":"),
    )
    return hashlib.sha256(payload.encode()).hexdigest()


class QueryJournal:
    """Record of service events, optionally bounded to the newest entries."""

    def __init__(self, max_entries: Optional[int] = None) -> None:
        if max_entries is not None and max_entries < 1:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self.max_entries = max_entries
        self.dropped = 0
        self._entries: Deque[JournalEntry] = deque()
        self._anchor: str = GENESIS_HASH
        self._prev_hash: str = GENESIS_HASH

    def __len__(self) -> int:
        return len(self._entries)

    def append(self, event: str, data: Dict[str, Any]) -> JournalEntry:
        ts = time.time()
        entry = JournalEntry(
            timestamp=ts,
            event=event,
            data=data,
            prev_hash=self._prev_hash,
            entry_hash=_digest(ts, event, data, self._prev_hash),
        )
        self._entries.append(entry)
        self._prev_hash = entry.entry_hash

        if self.max_entries is not None and len(self._entries) > self.max_entries:
            self._anchor = self._entries.popleft().entry_hash
            self.dropped += 1
        return entry

    def entries(self) -> List[Dict[str, Any]]:
        return [asdict(e) for e in self._entries]

    def verify_chain(self) -> bool:
        """Verify the retained entries link up from the anchor."""
        prev = self._anchor
        for e in self._entries:
            if e.prev_hash != prev:
                return False
            if e.entry_hash != _digest(e.timestamp, e.event, e.data, e.prev_hash):
                return False
            prev = e.entry_hash
        return True
