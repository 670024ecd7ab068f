from __future__ import annotations

import logging
from typing import MutableMapping

from apps.common.errors import NotAuthenticated, NotFound
from . import services

logger = logging.getLogger(__name__)

SESSION_KEY = "smartbite_user_id"


class SessionState:
    """Current-user state with an explicit lifecycle.

    `storage` is any mutable mapping that outlives the object, typically a
    Django session or a plain dict. Call `hydrate()` once at startup: it
    re-verifies the stored user id against the database and clears the
    storage when the user no longer exists. `logout()` is the teardown.
    """

    def __init__(self, storage: MutableMapping):
        self.storage = storage
        self.user = None
        self.loading = True

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def hydrate(self):
        self.loading = True
        try:
            user_id = self.storage.get(SESSION_KEY)
            if not user_id:
                self.user = None
                return None
            try:
                self.user = services.verify(user_id)
            except NotFound:
                logger.info("Stored session user_id=%s no longer valid; clearing", user_id)
                self._clear()
            return self.user
        finally:
            self.loading = False

    def login(self, email: str, password: str):
        user = services.login(email=email, password=password)
        self._store(user)
        return user

    def register(self, **data):
        user = services.register(**data)
        self._store(user)
        return user

    def logout(self) -> None:
        self._clear()

    def require_user(self):
        if self.user is None:
            raise NotAuthenticated("User not authenticated")
        return self.user

    def _store(self, user) -> None:
        self.storage[SESSION_KEY] = str(user.id)
        self.user = user

    def _clear(self) -> None:
        self.storage.pop(SESSION_KEY, None)
        self.user = None
