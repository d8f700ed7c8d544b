"""
Household record keeping models.

This package provides data models and calculations for:
- Category: User-defined groups of contracts or purchases
- Contract: Recurring contracts with renewal and notice terms
- Purchase: One-off purchases
- Vehicle / CostEntry: Vehicle ownership and its running costs
- CancellationInfo: Calculated contract cancellation deadline
- VehicleSummary: Aggregated vehicle costs, rates and projections
- RecordBook: Aggregate of everything in a data file
"""

from .errors import RecordsError, NotFoundError, ValidationError
from .cost_type import CostType, BillingInterval
from .cancellation_info import CancellationInfo
from .calculations import (
    add_months,
    months_between,
    parse_date,
    calc_cancellation_date,
    compute_cancellation_info,
)
from .category import Category
from .contract import Contract
from .purchase import Purchase
from .vehicle import Vehicle
from .cost_entry import CostEntry
from .settings import UserSettings
from .vehicle_summary import (
    VehicleSummary,
    VehicleProjection,
    YearCosts,
    YearMileage,
    MileagePoint,
    compute_vehicle_summary,
)
from .summary import contract_summary, purchase_summary, upcoming_renewals
from .record_book import RecordBook
from .loader import (
    init_records,
    load_records,
    add_record,
    update_record,
    delete_record,
    save_settings,
    record_to_dict,
    record_from_dict,
)

__all__ = [
    "RecordsError",
    "NotFoundError",
    "ValidationError",
    "CostType",
    "BillingInterval",
    "CancellationInfo",
    "add_months",
    "months_between",
    "parse_date",
    "calc_cancellation_date",
    "compute_cancellation_info",
    "Category",
    "Contract",
    "Purchase",
    "Vehicle",
    "CostEntry",
    "UserSettings",
    "VehicleSummary",
    "VehicleProjection",
    "YearCosts",
    "YearMileage",
    "MileagePoint",
    "compute_vehicle_summary",
    "contract_summary",
    "purchase_summary",
    "upcoming_renewals",
    "RecordBook",
    "init_records",
    "load_records",
    "add_record",
    "update_record",
    "delete_record",
    "save_settings",
    "record_to_dict",
    "record_from_dict",
]
