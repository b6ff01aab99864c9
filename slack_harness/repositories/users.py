import threading
from abc import ABC, abstractmethod
from typing import Dict, Optional

from ..domain.models import SlackUser


class UserRepository(ABC):
    """
    Defines where registered workspace members are looked up.
    """

    @abstractmethod
    def register(self, user: SlackUser) -> None:
        """Adds or replaces a user."""
        pass

    @abstractmethod
    def get(self, user_id: str) -> Optional[SlackUser]:
        pass


class InMemoryUserRepository(UserRepository):

    def __init__(self):
        self._lock = threading.Lock()
        self._store: Dict[str, SlackUser] = {}

    def register(self, user: SlackUser) -> None:
        with self._lock:
            self._store[user.id] = user

    def get(self, user_id: str) -> Optional[SlackUser]:
        with self._lock:
            return self._store.get(user_id)
