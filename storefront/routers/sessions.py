# storefront/routers/sessions.py
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from storefront.repositories.session_repo import SessionRepository
from storefront.services.storefront_service import StorefrontSession
from storefront.sessions import get_session_repo, get_storefront

router = APIRouter(tags=["Sessions"])


@router.post("/sessions", status_code=status.HTTP_201_CREATED)
def create_session(repo: SessionRepository = Depends(get_session_repo)):
    """
    Start a storefront session.

    Send the returned id as the X-Session-Id header on every other call.
    """
    session = repo.create()
    return {"session_id": session.id, "created_at": session.created_at}


@router.delete("/sessions", status_code=status.HTTP_204_NO_CONTENT)
def end_session(
    session: StorefrontSession = Depends(get_storefront),
    repo: SessionRepository = Depends(get_session_repo),
):
    """Discard the session and everything it holds."""
    repo.delete(session.id)
    return None


@router.get("/storage/{key}")
def read_local_state(
    key: str,
    session: StorefrontSession = Depends(get_storefront),
) -> Any:
    """
    Read one entry of the session's durable local state
    (`cart`, `orderDetails`, `userDetails`).
    """
    if key not in session.store:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Key not found",
        )
    return session.store.get_item(key)
