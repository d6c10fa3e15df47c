import pytest
from conftest import BUYER
from fastapi import HTTPException

from storefront.core.local_store import CART_KEY, ORDER_DETAILS_KEY
from storefront.services.order_service import (
    SUCCESS_DISMISS_SECONDS,
    UNEXPECTED_ERROR_MESSAGE,
    OrderConfirmationFlow,
)

pytestmark = pytest.mark.anyio


@pytest.fixture
def flow(cart, store, sink, scheduler, catalog_repo) -> OrderConfirmationFlow:
    cart.add_item(catalog_repo.get_item("rice-5kg"), 2)
    return OrderConfirmationFlow(cart, store, sink, scheduler)


async def test_begin_requires_items(store, sink, scheduler, cart):
    flow = OrderConfirmationFlow(cart, store, sink, scheduler)

    with pytest.raises(HTTPException) as exc:
        flow.begin()

    assert exc.value.status_code == 400
    assert flow.state == "idle"


async def test_begin_persists_cart_snapshot(flow, store):
    read = flow.begin()

    assert read.state == "collecting"
    saved = store.get_item(CART_KEY)
    assert saved[0]["id"] == "rice-5kg"
    assert saved[0]["quantity"] == 2


async def test_invalid_details_stay_collecting_without_contacting_sink(flow, sink, cart):
    flow.begin()

    read = await flow.submit({**BUYER, "email": "not-an-email", "phone": "123"})

    assert read.state == "collecting"
    assert set(read.errors) == {"email", "phone"}
    assert read.errors["phone"] == "Phone number must be at least 10 digits"
    assert sink.orders == []
    assert len(cart) == 1


async def test_unknown_contact_channel_is_rejected(flow, sink):
    flow.begin()

    read = await flow.submit({**BUYER, "preferred_contact": "Pigeon"})

    assert "preferred_contact" in read.errors
    assert sink.orders == []


async def test_successful_submission(flow, sink, store, cart, scheduler):
    flow.begin()

    read = await flow.submit({**BUYER, "feedback": "  Ring the bell  "})

    assert read.state == "succeeded"
    assert read.last_result.success
    assert len(cart) == 0

    order = sink.orders[0]
    assert order.name == "Asha Rao"
    assert order.feedback == "Ring the bell"
    assert [line.id for line in order.cart] == ["rice-5kg"]
    assert order.total_amount == pytest.approx(25.00)

    saved = store.get_item(ORDER_DETAILS_KEY)
    assert saved["email"] == "asha.rao@gmail.com"
    assert saved["cart"][0]["quantity"] == 2
    assert "order_date" in saved

    [task] = scheduler.tasks
    assert task.delay == SUCCESS_DISMISS_SECONDS == 3.0

    task.fire()
    assert flow.state == "idle"
    assert flow.buyer is None
    assert flow.last_result is None


async def test_submission_is_a_snapshot_of_the_cart(flow, sink, cart):
    flow.begin()
    await flow.submit(BUYER)

    assert len(cart) == 0
    assert sink.orders[0].cart[0].quantity == 2


async def test_failed_submission_keeps_cart_and_returns_to_collecting(flow, sink, cart, store, scheduler):
    sink.fail_with("SMTP verification failed: Invalid login")
    flow.begin()

    read = await flow.submit(BUYER)

    assert read.state == "collecting"
    assert read.last_result.success is False
    assert read.last_result.message == "SMTP verification failed: Invalid login"
    assert cart.get("rice-5kg").quantity == 2
    assert flow.buyer.name == "Asha Rao"
    assert ORDER_DETAILS_KEY not in store
    assert scheduler.tasks == []


async def test_retry_after_failure(flow, sink):
    sink.fail_with("Failed to submit order: timed out")
    flow.begin()
    await flow.submit(BUYER)

    sink.result = sink.result.model_copy(update={"success": True, "message": "ok"})
    read = await flow.submit(BUYER)

    assert read.state == "succeeded"
    assert len(sink.orders) == 2


async def test_sink_exception_becomes_retryable_failure(flow, sink, cart):
    sink.error = RuntimeError("boom")
    flow.begin()

    read = await flow.submit(BUYER)

    assert read.state == "collecting"
    assert read.last_result.message == UNEXPECTED_ERROR_MESSAGE
    assert len(cart) == 1


async def test_submit_outside_collecting_is_rejected(flow, sink):
    with pytest.raises(HTTPException) as exc:
        await flow.submit(BUYER)

    assert exc.value.status_code == 409
    assert sink.orders == []


async def test_cancel_returns_to_idle_with_cart_untouched(flow, cart):
    flow.begin()

    read = flow.cancel()

    assert read.state == "idle"
    assert cart.get("rice-5kg").quantity == 2


async def test_dismiss_cancels_pending_reset(flow, scheduler, cart, catalog_repo):
    flow.begin()
    await flow.submit(BUYER)
    [task] = scheduler.tasks

    flow.dismiss()
    assert task.cancelled
    assert flow.state == "idle"

    cart.add_item(catalog_repo.get_item("toor-dal-2kg"), 1)
    flow.begin()
    task.fire()

    assert flow.state == "collecting"


async def test_begin_again_right_after_success(flow, scheduler, cart, catalog_repo):
    flow.begin()
    await flow.submit(BUYER)
    [task] = scheduler.tasks

    cart.add_item(catalog_repo.get_item("toor-dal-2kg"), 1)
    read = flow.begin()

    assert read.state == "collecting"
    assert task.cancelled
