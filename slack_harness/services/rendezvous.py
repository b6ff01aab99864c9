"""
Rendezvous - Handoff Between Mock Server and Test Script

The mock server runs on its own thread and event loop while the test script
blocks on results. Every handoff goes through a Mailbox: a bounded or
unbounded buffer that a producer fills without ever blocking and a consumer
drains with a timeout.

Three flavours are used:
- trigger mailboxes (capacity 1, first value wins) answer one interaction
  with the modal views.open delivered for it;
- message update signals (capacity 1, latest wins) coalesce edits nobody
  waited for;
- home tab mailboxes (unbounded) keep every views.publish in order, so a
  test can wait for several consecutive home pushes.

The ViewRegistry owns the trigger mailboxes. A trigger is registered before
the interaction is dispatched, resolved at most once, and forgotten as soon
as it is resolved or discarded.
"""

import logging
import threading
import uuid
from collections import deque
from typing import Deque, Dict, Generic, List, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Mailbox(Generic[T]):
    """
    Thread-safe buffer between producers and one waiting consumer.

    Args:
        capacity: Maximum number of buffered values, None for unbounded.
        replace: When full, drop the oldest value instead of refusing the new one.
    """

    def __init__(self, capacity: Optional[int] = 1, replace: bool = False):
        self._capacity = capacity
        self._replace = replace
        self._cond = threading.Condition()
        self._items: Deque[T] = deque()

    def offer(self, value: T) -> bool:
        """Buffers `value` without blocking. False if the mailbox refused it."""
        with self._cond:
            if self._capacity is not None and len(self._items) >= self._capacity:
                if not self._replace:
                    return False
                self._items.popleft()
            self._items.append(value)
            self._cond.notify()
            return True

    def take(self, timeout: Optional[float] = None) -> Optional[T]:
        """Waits for the oldest buffered value. Returns None on timeout."""
        with self._cond:
            if not self._cond.wait_for(lambda: len(self._items) > 0, timeout=timeout):
                return None
            return self._items.popleft()

    def clear(self) -> List[T]:
        """Empties the buffer without waiting and returns what was in it."""
        with self._cond:
            items = list(self._items)
            self._items.clear()
            return items

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)


class ViewRegistry(Generic[T]):
    """
    Pending trigger ids waiting for views.open.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._pending: Dict[str, Mailbox[T]] = {}

    def register(self) -> Tuple[str, Mailbox[T]]:
        trigger_id = uuid.uuid4().hex
        mailbox: Mailbox[T] = Mailbox(capacity=1)
        with self._lock:
            self._pending[trigger_id] = mailbox
        return trigger_id, mailbox

    def resolve(self, trigger_id: str, value: T) -> bool:
        """Delivers `value` to the trigger's waiter. False if unknown or already resolved."""
        with self._lock:
            mailbox = self._pending.pop(trigger_id, None)
        if mailbox is None:
            logger.warning(f"No pending trigger '{trigger_id}', view dropped")
            return False
        return mailbox.offer(value)

    def discard(self, trigger_id: str) -> None:
        with self._lock:
            self._pending.pop(trigger_id, None)

    def __contains__(self, trigger_id: str) -> bool:
        with self._lock:
            return trigger_id in self._pending

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)


class MailboxMap(Generic[T]):
    """Unbounded mailboxes keyed by an id, created on first use and never replaced."""

    def __init__(self):
        self._lock = threading.Lock()
        self._boxes: Dict[str, Mailbox[T]] = {}

    def get(self, key: str) -> Mailbox[T]:
        with self._lock:
            mailbox = self._boxes.get(key)
            if mailbox is None:
                mailbox = Mailbox(capacity=None)
                self._boxes[key] = mailbox
            return mailbox
