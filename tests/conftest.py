from typing import Callable

import pytest
from fastapi.testclient import TestClient

from storefront.core.local_store import LocalStore
from storefront.main import app
from storefront.repositories.catalog_repo import CatalogRepository
from storefront.repositories.session_repo import SessionRepository
from storefront.schemas.order import SubmissionResult
from storefront.services.cart_service import CartEngine
from storefront.services.storefront_service import StorefrontSession
from storefront.sessions import get_session_repo


class ManualTask:
    def __init__(self, delay: float, callback: Callable[[], None]):
        self.delay = delay
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if self.cancelled or self.fired:
            return
        self.fired = True
        self.callback()


class ManualScheduler:
    """Records scheduled callbacks; tests fire them explicitly."""

    def __init__(self):
        self.tasks: list[ManualTask] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTask:
        task = ManualTask(delay, callback)
        self.tasks.append(task)
        return task

    def fire_all(self) -> None:
        for task in list(self.tasks):
            task.fire()


class FakeSink:
    """Stands in for SubmissionService and records what it was given."""

    def __init__(self):
        self.result = SubmissionResult(success=True, message="Submitted successfully!")
        self.error: Exception | None = None
        self.orders: list = []
        self.wishlists: list = []

    def fail_with(self, message: str) -> None:
        self.result = SubmissionResult(success=False, message=message)

    def submit_order(self, order):
        self.orders.append(order)
        if self.error:
            raise self.error
        return self.result

    def submit_wishlist(self, wishlist):
        self.wishlists.append(wishlist)
        if self.error:
            raise self.error
        return self.result


BUYER = {
    "name": "Asha Rao",
    "email": "asha.rao@gmail.com",
    "phone": "5551234567",
    "address": "12 Elm Street, Springfield",
    "preferred_contact": "WhatsApp",
}

USER_DETAILS = {
    "name": "Asha Rao",
    "email": "asha.rao@gmail.com",
    "phone": "5551234567",
    "address": "12 Elm Street, Springfield",
}

LOCAL_STORE_VALUES = {
    "item_name": "Paneer",
    "total_weight": "2 kg",
    "quantity": "2",
    "store_address": "Patel Brothers, 5th Ave",
    "store_phone": "5559876543",
}


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(scope="session")
def catalog_repo() -> CatalogRepository:
    return CatalogRepository()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def sink() -> FakeSink:
    return FakeSink()


@pytest.fixture
def cart() -> CartEngine:
    return CartEngine()


@pytest.fixture
def store() -> LocalStore:
    return LocalStore()


@pytest.fixture
def storefront(catalog_repo, sink, scheduler) -> StorefrontSession:
    return StorefrontSession(catalog_repo, sink, scheduler)


@pytest.fixture
def session_repo(catalog_repo, sink, scheduler) -> SessionRepository:
    return SessionRepository(catalog_repo, sink, scheduler)


@pytest.fixture
def client(session_repo):
    app.dependency_overrides[get_session_repo] = lambda: session_repo
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def headers(client) -> dict[str, str]:
    res = client.post("/api/v1/sessions")
    assert res.status_code == 201
    return {"X-Session-Id": res.json()["session_id"]}
