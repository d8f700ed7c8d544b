"""Contract class for recurring contracts."""
from datetime import date
from typing import Optional

from .cancellation_info import CancellationInfo
from .calculations import compute_cancellation_info, parse_date
from .cost_type import BillingInterval
from .errors import ValidationError
from .validation import check_number

BILLING_INTERVALS = [b.value for b in BillingInterval]


class Contract:
    """A recurring contract with its commitment, renewal and notice terms."""

    def __init__(
            self,
            name: str,
            start_date: str,
            category_id: Optional[str] = None,
            end_date: Optional[str] = None,
            minimum_duration_months: int = 0,
            extension_duration_months: int = 0,
            notice_period_months: int = 0,
            price: Optional[float] = None,
            billing_interval: str = "monthly",
            product_name: Optional[str] = None,
            company: Optional[str] = None,
            contract_number: Optional[str] = None,
            customer_number: Optional[str] = None,
            customer_portal_url: Optional[str] = None,
            paperless_url: Optional[str] = None,
            comments: Optional[str] = None,
            id: Optional[str] = None,
            created_at: Optional[str] = None,
            updated_at: Optional[str] = None,
    ):
        self.id = id
        self.category_id = category_id
        self.name = name
        self.product_name = product_name
        self.company = company
        self.contract_number = contract_number
        self.customer_number = customer_number
        self.price = price
        self.billing_interval = billing_interval or "monthly"
        self.start_date = start_date
        self.end_date = end_date
        self.minimum_duration_months = minimum_duration_months or 0
        self.extension_duration_months = extension_duration_months or 0
        self.notice_period_months = notice_period_months or 0
        self.customer_portal_url = customer_portal_url
        self.paperless_url = paperless_url
        self.comments = comments
        self.created_at = created_at
        self.updated_at = updated_at

    @property
    def monthly_price(self) -> float:
        """Price normalized to a monthly amount."""
        if self.price is None:
            return 0.0
        if self.billing_interval == BillingInterval.YEARLY.value:
            return self.price / 12
        return self.price

    @property
    def yearly_price(self) -> float:
        """Price normalized to a yearly amount."""
        if self.price is None:
            return 0.0
        if self.billing_interval == BillingInterval.YEARLY.value:
            return self.price
        return self.price * 12

    @property
    def is_fixed_term(self) -> bool:
        return bool(self.end_date)

    def cancellation_info(self, today: Optional[date] = None) -> CancellationInfo:
        return compute_cancellation_info(self, today)

    def cancellation_date(self, today: Optional[date] = None) -> Optional[str]:
        """Next cancellation deadline, or None for fixed-term contracts."""
        return self.cancellation_info(today).cancellation_date

    def is_expired(self, today: Optional[date] = None) -> bool:
        return self.cancellation_info(today).expired

    def validate(self) -> None:
        """Check required fields and term values."""
        if not self.name or not isinstance(self.name, str):
            raise ValidationError("name is required")
        if not self.start_date:
            raise ValidationError("startDate is required")
        if parse_date(self.start_date) is None:
            raise ValidationError("startDate must be in format YYYY-MM-DD")
        if self.end_date and parse_date(self.end_date) is None:
            raise ValidationError("endDate must be in format YYYY-MM-DD")
        if self.billing_interval not in BILLING_INTERVALS:
            raise ValidationError("billingInterval must be 'monthly' or 'yearly'")
        for field, value in (
            ("minimumDurationMonths", self.minimum_duration_months),
            ("extensionDurationMonths", self.extension_duration_months),
            ("noticePeriodMonths", self.notice_period_months),
        ):
            check_number(field, value, integer=True)
        check_number("price", self.price)
