from io import BytesIO

from conftest import USER_DETAILS
from openpyxl import load_workbook

from storefront.core.local_store import USER_DETAILS_KEY, BuyerDetailsHandoff, LocalStore
from storefront.core.spreadsheet import build_workbook
from storefront.schemas.wishlist import UserDetails


def test_store_round_trips_json_values():
    store = LocalStore()

    store.set_item("cart", [{"id": "rice-5kg", "quantity": 2}])

    assert "cart" in store
    assert store.get_item("cart") == [{"id": "rice-5kg", "quantity": 2}]
    assert store.get_item("missing") is None

    store.remove_item("cart")
    store.remove_item("cart")
    assert "cart" not in store


def test_handoff_publishes_under_user_details_key():
    store = LocalStore()
    handoff = BuyerDetailsHandoff(store)

    assert handoff.receive() is None

    handoff.publish(UserDetails.model_validate(USER_DETAILS))

    assert store.get_item(USER_DETAILS_KEY)["email"] == "asha.rao@gmail.com"
    received = handoff.receive()
    assert received.name == "Asha Rao"
    assert received.preferred_contact is None

    handoff.clear()
    assert handoff.receive() is None


def test_user_details_reject_blank_fields():
    details = UserDetails.model_validate({**USER_DETAILS, "name": "  Asha  ", "feedback": "   "})

    assert details.name == "Asha"
    assert details.feedback is None


def test_workbook_header_is_union_of_row_keys():
    content = build_workbook("Order", [{"A": 1, "B": "x"}, {"A": 2, "C": "y"}])

    sheet = load_workbook(BytesIO(content)).active
    assert sheet.title == "Order"
    assert list(sheet.iter_rows(values_only=True)) == [
        ("A", "B", "C"),
        (1, "x", None),
        (2, None, "y"),
    ]


def test_formula_like_text_stays_a_string():
    content = build_workbook("Wishlist", [{"Item Name": "=1+1", "Link": '=HYPERLINK("http://x.org")'}])

    sheet = load_workbook(BytesIO(content)).active
    name, link = sheet[2]
    assert name.data_type == "s"
    assert name.value == "=1+1"
    assert link.data_type == "s"
    assert link.value == '=HYPERLINK("http://x.org")'


def test_empty_workbook_is_still_valid():
    content = build_workbook("Wishlist", [])

    sheet = load_workbook(BytesIO(content)).active
    assert sheet.title == "Wishlist"
    assert sheet.max_row == 1
