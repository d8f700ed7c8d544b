"""CostEntry class for vehicle expenses and odometer readings."""
from typing import Optional

from .calculations import parse_date
from .cost_type import CostType
from .errors import ValidationError
from .validation import check_number


class CostEntry:
    """A vehicle expense or mileage reading."""

    def __init__(
            self,
            type: str,
            date: str,
            amount: Optional[float] = None,
            mileage: Optional[float] = None,
            vehicle_id: Optional[str] = None,
            description: Optional[str] = None,
            vendor: Optional[str] = None,
            comments: Optional[str] = None,
            id: Optional[str] = None,
            created_at: Optional[str] = None,
            updated_at: Optional[str] = None,
    ):
        self.id = id
        self.vehicle_id = vehicle_id
        self.type = type
        self.description = description
        self.vendor = vendor
        self.amount = amount
        self.date = date
        self.mileage = mileage
        self.comments = comments
        self.created_at = created_at
        self.updated_at = updated_at

    @property
    def is_cost(self) -> bool:
        """True if this entry contributes to cost totals."""
        return self.type != CostType.MILEAGE.value and self.amount is not None

    def validate(self) -> None:
        if not self.type:
            raise ValidationError("type is required")
        if self.type not in CostType.values():
            raise ValidationError("invalid cost type")
        if not self.date:
            raise ValidationError("date is required")
        if parse_date(self.date) is None:
            raise ValidationError("date must be in format YYYY-MM-DD")
        if self.type == CostType.MILEAGE.value and self.mileage is None:
            raise ValidationError("mileage is required for mileage entries")
        check_number("amount", self.amount)
        check_number("mileage", self.mileage)
