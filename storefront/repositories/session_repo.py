# storefront/repositories/session_repo.py
import logging
import time
from typing import Callable

from storefront.core.scheduler import Scheduler
from storefront.repositories.catalog_repo import CatalogRepository
from storefront.services.storefront_service import StorefrontSession
from storefront.services.submission_service import SubmissionService

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600.0


class SessionRepository:
    """
    In-memory storefront sessions, keyed by session id.

    A session untouched for `ttl_seconds` is dropped on the next create/get.
    Sessions with a submission in flight are kept until it settles.
    """

    def __init__(
        self,
        catalog_repo: CatalogRepository,
        sink: SubmissionService,
        scheduler: Scheduler,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.catalog_repo = catalog_repo
        self.sink = sink
        self.scheduler = scheduler
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self.sessions: dict[str, StorefrontSession] = {}
        self.last_seen: dict[str, float] = {}

    def create(self) -> StorefrontSession:
        self.expire_idle()
        session = StorefrontSession(self.catalog_repo, self.sink, self.scheduler)
        self.sessions[session.id] = session
        self.last_seen[session.id] = self.clock()
        return session

    def get(self, session_id: str) -> StorefrontSession | None:
        self.expire_idle()
        session = self.sessions.get(session_id)
        if session is not None:
            self.last_seen[session_id] = self.clock()
        return session

    def delete(self, session_id: str) -> bool:
        session = self.sessions.pop(session_id, None)
        self.last_seen.pop(session_id, None)
        if session is None:
            return False
        session.checkout.dismiss()
        session.close_wishlist()
        return True

    def expire_idle(self) -> int:
        """Drop idle sessions, cancelling their pending timers. Returns the count."""
        cutoff = self.clock() - self.ttl_seconds
        expired = [
            session_id
            for session_id, seen in self.last_seen.items()
            if seen < cutoff and not self.sessions[session_id].is_submitting
        ]
        for session_id in expired:
            self.delete(session_id)
        if expired:
            logger.info(f"Expired {len(expired)} idle session(s)")
        return len(expired)
