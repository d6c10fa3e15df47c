# storefront/sessions.py
from functools import lru_cache

from fastapi import Depends, Header, HTTPException, status

from storefront.core.config import get_settings
from storefront.core.email_client import EmailClient
from storefront.core.scheduler import AsyncioScheduler
from storefront.repositories.catalog_repo import CatalogRepository
from storefront.repositories.session_repo import SessionRepository
from storefront.services.storefront_service import StorefrontSession
from storefront.services.submission_service import SubmissionService


@lru_cache
def get_catalog_repo() -> CatalogRepository:
    """
    Catalog loaded once per process from the packaged JSON files.
    """
    return CatalogRepository()


@lru_cache
def get_session_repo() -> SessionRepository:
    """
    Process-wide session registry wired to the real mail relay.

    Tests override this dependency with a repository built around a fake
    sink and a manual scheduler.
    """
    settings = get_settings()
    sink = SubmissionService(EmailClient(settings), settings.EMAIL_TO)
    return SessionRepository(
        get_catalog_repo(),
        sink,
        AsyncioScheduler(),
        ttl_seconds=settings.SESSION_TTL_SECONDS,
    )


def get_storefront(
    x_session_id: str = Header(...),
    repo: SessionRepository = Depends(get_session_repo),
) -> StorefrontSession:
    """
    FastAPI dependency resolving the caller's storefront session from the
    X-Session-Id header.

    Raises:
        HTTPException(404): if the session is unknown.
    """
    session = repo.get(x_session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
        )
    return session
