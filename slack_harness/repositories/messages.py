import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..domain.blocks import Block
from ..services.rendezvous import Mailbox


@dataclass
class MessageRecord:
    """
    One posted chat message.

    `ts` identifies the message within its channel. `updates` is signalled
    after every edit; pending signals coalesce so an edit nobody waits for
    never blocks the server.
    """
    channel: str
    ts: str
    blocks: List[Block] = field(default_factory=list)
    text: str = ""
    updates: Mailbox = field(default_factory=lambda: Mailbox(capacity=1, replace=True))


class MessageRepository(ABC):
    """
    Defines how the mock server and the sessions share posted messages.
    """

    @abstractmethod
    def post(self, channel: str, blocks: List[Block], text: str = "") -> MessageRecord:
        """Appends a new message with a fresh ts to the channel."""
        pass

    @abstractmethod
    def update(self, channel: str, ts: str, blocks: List[Block], text: Optional[str] = None) -> Optional[MessageRecord]:
        """Replaces the blocks of (channel, ts) and signals it. None if unknown."""
        pass

    @abstractmethod
    def get(self, channel: str, ts: str) -> Optional[MessageRecord]:
        pass

    @abstractmethod
    def list(self, channel: str) -> List[MessageRecord]:
        """Messages of a channel in posting order."""
        pass


class InMemoryMessageRepository(MessageRepository):
    """
    Per-channel message lists held in process memory.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._by_channel: Dict[str, List[MessageRecord]] = {}
        self._last_ts_us = 0

    def _next_ts(self) -> str:
        # Microsecond clock, bumped so two posts never share a ts
        now_us = time.time_ns() // 1000
        self._last_ts_us = max(now_us, self._last_ts_us + 1)
        return f"{self._last_ts_us // 1_000_000}.{self._last_ts_us % 1_000_000:06d}"

    def post(self, channel: str, blocks: List[Block], text: str = "") -> MessageRecord:
        with self._lock:
            record = MessageRecord(channel=channel, ts=self._next_ts(), blocks=list(blocks), text=text)
            self._by_channel.setdefault(channel, []).append(record)
        return record

    def update(self, channel: str, ts: str, blocks: List[Block], text: Optional[str] = None) -> Optional[MessageRecord]:
        with self._lock:
            record = self._find(channel, ts)
            if record is None:
                return None
            record.blocks = list(blocks)
            if text is not None:
                record.text = text
        record.updates.offer(True)
        return record

    def get(self, channel: str, ts: str) -> Optional[MessageRecord]:
        with self._lock:
            return self._find(channel, ts)

    def list(self, channel: str) -> List[MessageRecord]:
        with self._lock:
            return list(self._by_channel.get(channel, []))

    def _find(self, channel: str, ts: str) -> Optional[MessageRecord]:
        for record in self._by_channel.get(channel, []):
            if record.ts == ts:
                return record
        return None
