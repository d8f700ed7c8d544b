"""Per-category totals for contracts and purchases, and upcoming renewals."""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple

from .calculations import parse_date
from .category import Category
from .contract import Contract
from .errors import ValidationError
from .purchase import Purchase

MAX_RENEWAL_DAYS = 365


@dataclass
class CategoryTotals:
    id: Optional[str]
    name: str
    count: int = 0
    monthly_total: float = 0.0
    yearly_total: float = 0.0
    total_spent: float = 0.0


@dataclass
class ContractSummary:
    total_contracts: int = 0
    total_monthly_amount: float = 0.0
    total_yearly_amount: float = 0.0
    categories: List[CategoryTotals] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalContracts": self.total_contracts,
            "totalMonthlyAmount": self.total_monthly_amount,
            "totalYearlyAmount": self.total_yearly_amount,
            "categories": [
                {
                    "id": c.id,
                    "name": c.name,
                    "contractCount": c.count,
                    "monthlyTotal": c.monthly_total,
                    "yearlyTotal": c.yearly_total,
                }
                for c in self.categories
            ],
        }


@dataclass
class PurchaseSummary:
    total_purchases: int = 0
    total_spent: float = 0.0
    categories: List[CategoryTotals] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalPurchases": self.total_purchases,
            "totalSpent": self.total_spent,
            "categories": [
                {
                    "id": c.id,
                    "name": c.name,
                    "purchaseCount": c.count,
                    "totalSpent": c.total_spent,
                }
                for c in self.categories
            ],
        }


def contract_summary(
    categories: List[Category], contracts: List[Contract]
) -> ContractSummary:
    """Contract counts and normalized monthly/yearly totals per category."""
    by_category = {c.id: CategoryTotals(id=c.id, name=c.name) for c in categories}
    summary = ContractSummary(total_contracts=len(contracts))

    for contract in contracts:
        summary.total_monthly_amount += contract.monthly_price
        summary.total_yearly_amount += contract.yearly_price
        totals = by_category.get(contract.category_id)
        if totals is None:
            continue
        totals.count += 1
        totals.monthly_total += contract.monthly_price
        totals.yearly_total += contract.yearly_price

    summary.categories = [by_category[c.id] for c in categories]
    return summary


def purchase_summary(
    categories: List[Category], purchases: List[Purchase]
) -> PurchaseSummary:
    """Purchase counts and amount spent per category."""
    by_category = {c.id: CategoryTotals(id=c.id, name=c.name) for c in categories}
    summary = PurchaseSummary(total_purchases=len(purchases))

    for purchase in purchases:
        price = purchase.price or 0.0
        summary.total_spent += price
        totals = by_category.get(purchase.category_id)
        if totals is None:
            continue
        totals.count += 1
        totals.total_spent += price

    summary.categories = [by_category[c.id] for c in categories]
    return summary


def parse_renewal_days(value: Any, default: int = 90) -> int:
    """Validate a look-ahead window in days, capped at MAX_RENEWAL_DAYS."""
    if value is None or value == "":
        return default
    try:
        days = int(value)
    except (TypeError, ValueError):
        raise ValidationError("days must be a positive integer")
    if days < 1:
        raise ValidationError("days must be a positive integer")
    return min(days, MAX_RENEWAL_DAYS)


def upcoming_renewals(
    contracts: List[Contract], today: Optional[date] = None, days: int = 90
) -> List[Tuple[Contract, str]]:
    """
    Contracts whose cancellation deadline falls within the next `days` days.

    Returns (contract, cancellation_date) pairs sorted by deadline.
    """
    if today is None:
        today = date.today()
    deadline = today + timedelta(days=days)

    matches = []
    for contract in contracts:
        cancellation = parse_date(contract.cancellation_date(today))
        if cancellation is None:
            continue
        if today <= cancellation <= deadline:
            matches.append((contract, cancellation.isoformat()))

    matches.sort(key=lambda m: m[1])
    return matches
