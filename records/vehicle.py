"""Vehicle class for ownership baseline and projection targets."""
from typing import Optional

from .calculations import parse_date
from .errors import ValidationError
from .validation import check_number


class Vehicle:
    """Vehicle identification, purchase baseline and projection horizon."""

    def __init__(
            self,
            name: str,
            make: Optional[str] = None,
            model: Optional[str] = None,
            year: Optional[int] = None,
            license_plate: Optional[str] = None,
            purchase_date: Optional[str] = None,
            purchase_price: Optional[float] = None,
            purchase_mileage: Optional[float] = None,
            target_mileage: Optional[float] = None,
            target_months: Optional[int] = None,
            annual_insurance: Optional[float] = None,
            annual_tax: Optional[float] = None,
            maintenance_factor: Optional[float] = None,
            comments: Optional[str] = None,
            id: Optional[str] = None,
            created_at: Optional[str] = None,
            updated_at: Optional[str] = None,
    ):
        self.id = id
        self.name = name
        self.make = make
        self.model = model
        self.year = year
        self.license_plate = license_plate
        self.purchase_date = purchase_date
        self.purchase_price = purchase_price
        self.purchase_mileage = purchase_mileage
        self.target_mileage = target_mileage
        self.target_months = target_months
        self.annual_insurance = annual_insurance
        self.annual_tax = annual_tax
        self.maintenance_factor = maintenance_factor
        self.comments = comments
        self.created_at = created_at
        self.updated_at = updated_at

    @property
    def display_name(self) -> str:
        """Human-readable vehicle name."""
        details = " ".join(str(p) for p in (self.year, self.make, self.model) if p)
        return f"{self.name} ({details})" if details else self.name

    @property
    def has_projection_target(self) -> bool:
        return self.target_mileage is not None or self.target_months is not None

    def validate(self) -> None:
        if not self.name or not isinstance(self.name, str):
            raise ValidationError("name is required")
        if self.purchase_date and parse_date(self.purchase_date) is None:
            raise ValidationError("purchaseDate must be in format YYYY-MM-DD")
        check_number("year", self.year, integer=True)
        for field, value in (
            ("purchasePrice", self.purchase_price),
            ("purchaseMileage", self.purchase_mileage),
            ("targetMileage", self.target_mileage),
            ("annualInsurance", self.annual_insurance),
            ("annualTax", self.annual_tax),
            ("maintenanceFactor", self.maintenance_factor),
        ):
            check_number(field, value)
        check_number("targetMonths", self.target_months, integer=True, positive=True)
