"""Cost entry type and billing interval enums."""

from enum import Enum


class CostType(Enum):
    """Kinds of vehicle cost entries."""

    SERVICE = "service"
    FUEL = "fuel"
    INSURANCE = "insurance"
    TAX = "tax"
    INSPECTION = "inspection"
    TIRES = "tires"
    MILEAGE = "mileage"  # Odometer reading, carries no cost
    MISC = "misc"

    @classmethod
    def values(cls):
        return [t.value for t in cls]


class BillingInterval(Enum):
    """How often a contract price is charged."""

    MONTHLY = "monthly"
    YEARLY = "yearly"


# Cost types that contribute to totals, in display order
COST_COLUMNS = [t.value for t in CostType if t is not CostType.MILEAGE]

# Cost types scaled by a vehicle's maintenance factor when projecting
SERVICE_COST_TYPES = (
    CostType.SERVICE.value,
    CostType.INSPECTION.value,
    CostType.TIRES.value,
)
