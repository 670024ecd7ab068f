from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from apps.accounts.session import SessionState
from apps.common.errors import ServiceError

logger = logging.getLogger(__name__)


class Store:
    """Common loading/error bookkeeping.

    Every failure is recorded in `error` and re-raised, so callers always see
    the same ServiceError whether or not they read the store's flags.
    """

    def __init__(self, session: SessionState):
        self.session = session
        self.loading = False
        self.error: str | None = None

    def clear_error(self) -> None:
        self.error = None

    @contextmanager
    def _track(self, action: str, *, loading: bool = True, on_error=None) -> Iterator[None]:
        if loading:
            self.loading = True
        self.error = None
        try:
            yield
        except ServiceError as exc:
            logger.warning("%s: %s failed: %s", type(self).__name__, action, exc.message)
            self.error = exc.message
            if on_error is not None:
                on_error()
            raise
        finally:
            if loading:
                self.loading = False
