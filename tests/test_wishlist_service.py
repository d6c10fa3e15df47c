import pytest
from conftest import USER_DETAILS
from fastapi import HTTPException

from storefront.core.local_store import USER_DETAILS_KEY, BuyerDetailsHandoff
from storefront.schemas.wishlist import UserDetails
from storefront.services.wishlist_service import ENTRY_POINT, WishlistPipeline

pytestmark = pytest.mark.anyio

ONLINE_ITEM = {
    "item_name": "Tawa",
    "quantity": "1",
    "weight": "1 kg",
    "category": "Online",
    "link": "https://shop.example.org/tawa",
    "store_address": "Should be dropped",
    "store_phone": "5550000000",
    "pickup_address": "",
    "pickup_phone": "",
}


@pytest.fixture
def handoff(store) -> BuyerDetailsHandoff:
    return BuyerDetailsHandoff(store)


@pytest.fixture
def pipeline(handoff, sink, scheduler) -> WishlistPipeline:
    handoff.publish(UserDetails.model_validate(USER_DETAILS))
    return WishlistPipeline(handoff, sink, scheduler)


async def test_missing_handoff_redirects_to_entry_point(handoff, sink, scheduler):
    pipeline = WishlistPipeline(handoff, sink, scheduler)

    assert pipeline.user_details is None
    assert pipeline.redirect_to == ENTRY_POINT == "/"


async def test_details_are_read_once_on_entry(pipeline, handoff):
    handoff.clear()

    assert pipeline.user_details.name == "Asha Rao"
    assert pipeline.redirect_to is None


async def test_online_item_drops_other_category_fields(pipeline):
    assert pipeline.add_item(ONLINE_ITEM)

    data = pipeline.items[0].model_dump(exclude_none=True)
    assert data == {
        "item_name": "Tawa",
        "quantity": "1",
        "weight": "1 kg",
        "category": "Online",
        "link": "https://shop.example.org/tawa",
    }


async def test_local_store_item_omits_blank_fields(pipeline):
    pipeline.add_item(
        {
            "item_name": "Curry leaves",
            "quantity": "3",
            "weight": "100 g",
            "category": "Local Store",
            "store_address": "Patel Brothers",
            "store_phone": "  ",
            "link": "https://ignored.example.org",
        }
    )

    data = pipeline.items[0].model_dump(exclude_none=True)
    assert data["store_address"] == "Patel Brothers"
    for absent in ("store_phone", "link", "pickup_address", "pickup_phone"):
        assert absent not in data


async def test_home_pickup_item_keeps_only_pickup_fields(pipeline):
    pipeline.add_item(
        {
            "item_name": "Pickle jars",
            "quantity": "2",
            "weight": "3 kg",
            "category": "Home Pickup",
            "pickup_address": "9 Lake View",
            "pickup_phone": "5552223333",
            "store_address": "Nope",
        }
    )

    data = pipeline.items[0].model_dump(exclude_none=True)
    assert data["pickup_address"] == "9 Lake View"
    assert data["pickup_phone"] == "5552223333"
    assert "store_address" not in data
    assert "link" not in data


async def test_invalid_item_reports_field_errors(pipeline):
    ok = pipeline.add_item({"item_name": "x", "quantity": "", "weight": "", "category": "Boat"})

    assert not ok
    assert pipeline.errors["item_name"] == "Item name is required"
    assert pipeline.errors["quantity"] == "Quantity is required"
    assert pipeline.errors["weight"] == "Weight is required"
    assert "category" in pipeline.errors
    assert pipeline.items == []


async def test_remove_by_index_keeps_others(pipeline):
    for name in ("Tawa", "Kadai", "Belan"):
        pipeline.add_item({**ONLINE_ITEM, "item_name": name})

    pipeline.remove_item(1)

    assert [i.item_name for i in pipeline.items] == ["Tawa", "Belan"]
    with pytest.raises(HTTPException) as exc:
        pipeline.remove_item(5)
    assert exc.value.status_code == 404


async def test_empty_wishlist_cannot_be_submitted(pipeline, sink):
    with pytest.raises(HTTPException) as exc:
        await pipeline.submit()

    assert exc.value.status_code == 400
    assert sink.wishlists == []


async def test_successful_submission(pipeline, sink, store, scheduler):
    pipeline.add_item(ONLINE_ITEM)

    read = await pipeline.submit("  Please call after 6pm ")

    assert read.succeeded
    assert not read.is_submitting
    submission = sink.wishlists[0]
    assert submission.user_details.feedback == "Please call after 6pm"
    assert len(submission.items) == 1
    assert USER_DETAILS_KEY not in store
    assert pipeline.redirect_to is None

    [task] = scheduler.tasks
    assert task.delay == 3.0
    task.fire()
    assert pipeline.redirect_to == ENTRY_POINT


async def test_failed_submission_keeps_state_for_retry(pipeline, sink, store, scheduler):
    sink.fail_with("Failed to submit wishlist: SMTP verification failed: bad login")
    pipeline.add_item(ONLINE_ITEM)

    read = await pipeline.submit()

    assert not read.succeeded
    assert read.error_message == "Failed to submit wishlist: SMTP verification failed: bad login"
    assert len(pipeline.items) == 1
    assert USER_DETAILS_KEY in store
    assert scheduler.tasks == []


async def test_second_submit_after_success_is_rejected(pipeline):
    pipeline.add_item(ONLINE_ITEM)
    await pipeline.submit()

    with pytest.raises(HTTPException) as exc:
        await pipeline.submit()

    assert exc.value.status_code == 409


async def test_close_cancels_pending_redirect(pipeline, scheduler):
    pipeline.add_item(ONLINE_ITEM)
    await pipeline.submit()
    [task] = scheduler.tasks

    pipeline.close()
    task.fire()

    assert task.cancelled
    assert pipeline.redirect_to is None
