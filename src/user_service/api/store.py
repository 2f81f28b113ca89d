"""User storage keyed by unique username."""

from __future__ import annotations

import secrets
import threading
from abc import ABC, abstractmethod
from typing import Dict, List

from ..exceptions import InvalidCredentialsError, UserAlreadyExistsError
from .models import UserCredentials, UserView


class UserStore(ABC):
    """Storage contract used by the user API."""

    @abstractmethod
    def create(self, credentials: UserCredentials) -> UserView:
        """Persist a new user; raise ``UserAlreadyExistsError`` on a taken name."""

    @abstractmethod
    def authenticate(self, credentials: UserCredentials) -> UserView:
        """Return the matching user or raise ``InvalidCredentialsError``."""

    @abstractmethod
    def list_users(self) -> List[UserView]:
        """Return every stored user."""


class InMemoryUserStore(UserStore):
    """Process-local store guarded by a lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._passwords: Dict[str, str] = {}

    def create(self, credentials: UserCredentials) -> UserView:
        with self._lock:
            if credentials.username in self._passwords:
                raise UserAlreadyExistsError(username=credentials.username)
            self._passwords[credentials.username] = credentials.password
        return UserView(username=credentials.username)

    def authenticate(self, credentials: UserCredentials) -> UserView:
        with self._lock:
            stored = self._passwords.get(credentials.username)
        if stored is None or not secrets.compare_digest(
            stored.encode("utf-8"), credentials.password.encode("utf-8")
        ):
            raise InvalidCredentialsError()
        return UserView(username=credentials.username)

    def list_users(self) -> List[UserView]:
        with self._lock:
            names = list(self._passwords)
        return [UserView(username=name) for name in names]
