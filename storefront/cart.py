"""In-memory cart ledger keyed by menu item id."""

from __future__ import annotations

from storefront.models import CartItem, MenuItem


class CartLedger:
    """Cart entries in insertion order, at most one entry per item id."""

    def __init__(self) -> None:
        self._entries: list[CartItem] = []

    def add_item(self, item: MenuItem) -> CartItem:
        """Add one unit of ``item`` and return the updated entry."""
        entry = self.get(item.id)
        if entry is not None:
            entry.quantity += 1
            return entry

        entry = CartItem(item=item, quantity=1)
        self._entries.append(entry)
        return entry

    def set_quantity(self, item_id: str, quantity: int) -> CartItem | None:
        """Replace an entry's quantity; a quantity of zero or less removes it."""
        if quantity <= 0:
            return self.remove_item(item_id)

        entry = self.get(item_id)
        if entry is None:
            return None
        entry.quantity = quantity
        return entry

    def remove_item(self, item_id: str) -> CartItem | None:
        """Remove the entry for ``item_id`` and return it, or None if absent."""
        for idx, entry in enumerate(self._entries):
            if entry.id == item_id:
                del self._entries[idx]
                return entry
        return None

    def get(self, item_id: str) -> CartItem | None:
        for entry in self._entries:
            if entry.id == item_id:
                return entry
        return None

    def items(self) -> tuple[CartItem, ...]:
        """Snapshot of the entries; mutating the copies does not touch the ledger."""
        return tuple(CartItem(item=entry.item, quantity=entry.quantity) for entry in self._entries)

    def item_count(self) -> int:
        return sum(entry.quantity for entry in self._entries)

    def subtotal(self) -> float:
        return sum(entry.line_total for entry in self._entries)

    def is_empty(self) -> bool:
        return not self._entries

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
