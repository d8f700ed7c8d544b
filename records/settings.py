"""UserSettings class for renewal reminder preferences."""
from typing import Optional

from .errors import ValidationError
from .validation import check_number

REMINDER_FREQUENCIES = ("disabled", "weekly", "biweekly", "monthly")


class UserSettings:
    """How far ahead to look for renewals and how often to send reminders."""

    def __init__(
            self,
            renewal_days: int = 90,
            reminder_frequency: str = "disabled",
            last_reminder_sent: Optional[str] = None,
    ):
        self.renewal_days = renewal_days if renewal_days is not None else 90
        self.reminder_frequency = reminder_frequency or "disabled"
        self.last_reminder_sent = last_reminder_sent

    def validate(self) -> None:
        check_number("renewalDays", self.renewal_days, integer=True, positive=True)
        if self.reminder_frequency not in REMINDER_FREQUENCIES:
            raise ValidationError(
                f"reminderFrequency must be one of: {', '.join(REMINDER_FREQUENCIES)}"
            )
