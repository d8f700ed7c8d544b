"""RecordBook class - the aggregate of all records in a data file."""

from datetime import date
from typing import List, Optional

from .category import Category
from .contract import Contract
from .cost_entry import CostEntry
from .errors import NotFoundError
from .purchase import Purchase
from .settings import UserSettings
from .summary import (
    ContractSummary,
    PurchaseSummary,
    contract_summary,
    purchase_summary,
    upcoming_renewals,
)
from .vehicle import Vehicle
from .vehicle_summary import VehicleSummary, compute_vehicle_summary


class RecordBook:
    """Categories, contracts, purchases, vehicles and their cost entries."""

    def __init__(
        self,
        categories: Optional[List[Category]] = None,
        contracts: Optional[List[Contract]] = None,
        purchases: Optional[List[Purchase]] = None,
        vehicles: Optional[List[Vehicle]] = None,
        cost_entries: Optional[List[CostEntry]] = None,
        settings: Optional[UserSettings] = None,
    ):
        self.categories = categories or []
        self.contracts = contracts or []
        self.purchases = purchases or []
        self.vehicles = vehicles or []
        self.cost_entries = cost_entries or []
        self.settings = settings or UserSettings()

    @staticmethod
    def _find(items: list, record_id: str, kind: str):
        for item in items:
            if item.id == record_id:
                return item
        raise NotFoundError(f"{kind} '{record_id}' not found")

    def get_category(self, category_id: str) -> Category:
        return self._find(self.categories, category_id, "category")

    def get_contract(self, contract_id: str) -> Contract:
        return self._find(self.contracts, contract_id, "contract")

    def get_purchase(self, purchase_id: str) -> Purchase:
        return self._find(self.purchases, purchase_id, "purchase")

    def get_vehicle(self, vehicle_id: str) -> Vehicle:
        return self._find(self.vehicles, vehicle_id, "vehicle")

    def get_cost_entry(self, entry_id: str) -> CostEntry:
        return self._find(self.cost_entries, entry_id, "cost entry")

    def get_categories(self, module: Optional[str] = None) -> List[Category]:
        """Categories, optionally limited to one module (contracts/purchases)."""
        if module is None:
            return list(self.categories)
        return [c for c in self.categories if c.module == module]

    def find_category_by_name(self, name: str, module: str) -> Optional[Category]:
        """Case-insensitive category lookup within a module."""
        wanted = name.strip().lower()
        for category in self.get_categories(module):
            if category.name.lower() == wanted:
                return category
        return None

    def get_contracts_for_category(self, category_id: str) -> List[Contract]:
        return [c for c in self.contracts if c.category_id == category_id]

    def get_purchases_for_category(self, category_id: str) -> List[Purchase]:
        return [p for p in self.purchases if p.category_id == category_id]

    def get_cost_entries_for_vehicle(self, vehicle_id: str) -> List[CostEntry]:
        """Cost entries of a vehicle, newest first."""
        entries = [e for e in self.cost_entries if e.vehicle_id == vehicle_id]
        return sorted(entries, key=lambda e: e.date, reverse=True)

    def contract_summary(self) -> ContractSummary:
        return contract_summary(self.get_categories("contracts"), self.contracts)

    def purchase_summary(self) -> PurchaseSummary:
        return purchase_summary(self.get_categories("purchases"), self.purchases)

    def upcoming_renewals(self, today: Optional[date] = None, days: Optional[int] = None):
        """Contracts due for cancellation within days (default: settings)."""
        if days is None:
            days = self.settings.renewal_days
        return upcoming_renewals(self.contracts, today, days)

    def vehicle_summary(
        self, vehicle_id: str, today: Optional[date] = None
    ) -> VehicleSummary:
        vehicle = self.get_vehicle(vehicle_id)
        return compute_vehicle_summary(
            vehicle, self.get_cost_entries_for_vehicle(vehicle_id), today
        )
