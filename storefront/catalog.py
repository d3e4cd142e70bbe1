"""Cached restaurant list and the selected restaurant's menu."""

from __future__ import annotations

import logging

from storefront.models import MenuItem, Restaurant
from storefront.results import Fault, FaultKind, Ok, Result
from storefront.supplier import DataSupplier

logger = logging.getLogger(__name__)


class StaleResponse(Fault):
    """Marker result for a response that arrived after a newer load started."""


def _stale(kind: str, token: int) -> StaleResponse:
    return StaleResponse(FaultKind.SUPPLIER_FAULT, f"stale {kind} response token={token}")


class CatalogCache:
    """
    Restaurant list plus the active restaurant's menu.

    Each load bumps a generation counter before awaiting the supplier. A
    response whose generation is no longer current is dropped, so a late
    menu for an abandoned restaurant never replaces the one on screen.
    """

    def __init__(self, supplier: DataSupplier | None = None) -> None:
        self.supplier = supplier
        self.restaurants: list[Restaurant] = []
        self.selected: Restaurant | None = None
        self.menu: list[MenuItem] = []
        self._restaurants_generation = 0
        self._menu_generation = 0

    async def load_restaurants(self) -> Result[list[Restaurant]]:
        """Fetch a fresh list; faults and empty results keep the current cache."""
        if self.supplier is None:
            return Fault(FaultKind.MISSING_CREDENTIAL, "no data supplier configured")

        self._restaurants_generation += 1
        token = self._restaurants_generation
        result = await self.supplier.list_restaurants()
        if token != self._restaurants_generation:
            logger.info("load_restaurants discarded stale token=%d", token)
            return _stale("restaurants", token)

        if isinstance(result, Ok) and result.value:
            self.restaurants = list(result.value)
            return result
        if isinstance(result, Ok):
            return Fault(FaultKind.SUPPLIER_EMPTY, "no restaurants returned")
        return result

    def select(self, restaurant: Restaurant) -> None:
        """Make ``restaurant`` current and drop any menu cached for another one."""
        self.selected = restaurant
        self.menu = []

    async def load_menu(self, restaurant: Restaurant) -> Result[list[MenuItem]]:
        """Select ``restaurant`` and fetch its menu, clearing the old one first."""
        self.select(restaurant)
        if self.supplier is None:
            return Fault(FaultKind.MISSING_CREDENTIAL, "no data supplier configured")

        self._menu_generation += 1
        token = self._menu_generation
        result = await self.supplier.list_menu(restaurant.name)
        if token != self._menu_generation or self.selected != restaurant:
            logger.info("load_menu discarded stale token=%d restaurant=%r", token, restaurant.name)
            return _stale("menu", token)

        if isinstance(result, Ok) and result.value:
            self.menu = list(result.value)
            return result
        if isinstance(result, Ok):
            return Fault(FaultKind.SUPPLIER_EMPTY, f"no menu for {restaurant.name}")
        return result

    def clear_selection(self) -> None:
        """Forget the selected restaurant and its menu; invalidates in-flight menu loads."""
        self.selected = None
        self.menu = []
        self._menu_generation += 1
