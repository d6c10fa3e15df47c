# storefront/services/cart_service.py
from storefront.schemas.cart import CartLine, CartSummary
from storefront.schemas.catalog import CatalogItem


class CartEngine:
    """
    In-memory cart for one browsing session.

    Responsibilities:
      - at most one line per item id (re-adding merges)
      - quantity never below 1 for a held line (0 removes it)
      - special-option lines replace their request on merge
      - compute totals (special lines contribute 0, price not known yet)
    """

    def __init__(self):
        self._lines: dict[str, CartLine] = {}

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines.values())

    def get(self, item_id: str) -> CartLine | None:
        return self._lines.get(item_id)

    def add_item(self, item: CatalogItem | CartLine, quantity: int = 1) -> CartLine:
        """
        Add `quantity` of an item.

        Rules:
          - quantity must be a positive integer (caller clamps)
          - existing line → quantity is summed; a special line also takes
            the newest special_data
          - otherwise a new line is created
        """
        if quantity < 1:
            raise ValueError("quantity must be a positive integer")

        existing = self._lines.get(item.id)
        special_data = item.special_data if isinstance(item, CartLine) else None

        if existing:
            existing.quantity += quantity
            if special_data is not None:
                existing.special_data = special_data
            return existing

        if isinstance(item, CartLine):
            line = item.model_copy(update={"quantity": quantity})
        else:
            line = CartLine.from_catalog_item(item, quantity)
        self._lines[line.id] = line
        return line

    def update_quantity(self, item_id: str, delta: int) -> CartLine | None:
        """
        Apply a relative change, floored at 0. A result of 0 removes the
        line. Unknown ids are ignored.
        """
        line = self._lines.get(item_id)
        if line is None:
            return None

        new_qty = max(0, line.quantity + delta)
        if new_qty == 0:
            del self._lines[item_id]
            return None

        line.quantity = new_qty
        return line

    def remove_item(self, item_id: str) -> None:
        self._lines.pop(item_id, None)

    def clear(self) -> None:
        self._lines.clear()

    def total(self) -> float:
        return sum(line.line_total for line in self._lines.values())

    def total_quantity(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def snapshot(self) -> list[dict]:
        """JSON-ready copy of every line, for durable local state."""
        return [line.model_dump(mode="json") for line in self._lines.values()]

    def summary(self, cart_open: bool = False) -> CartSummary:
        return CartSummary(
            items=self.lines,
            total_quantity=self.total_quantity(),
            total_price=self.total(),
            cart_open=cart_open,
        )
