"""Renewal reminder scheduling and message formatting."""

from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Tuple

from .contract import Contract
from .settings import UserSettings
from .summary import upcoming_renewals

FREQUENCY_INTERVALS = {
    "weekly": timedelta(days=7),
    "biweekly": timedelta(days=14),
    "monthly": timedelta(days=30),
}


def reminder_due(settings: UserSettings, now: Optional[datetime] = None) -> bool:
    """True if a reminder should be sent according to the configured frequency."""
    interval = FREQUENCY_INTERVALS.get(settings.reminder_frequency)
    if interval is None:
        return False
    if not settings.last_reminder_sent:
        return True
    if now is None:
        now = datetime.now(timezone.utc)
    try:
        last_sent = datetime.fromisoformat(settings.last_reminder_sent)
    except ValueError:
        return True
    if last_sent.tzinfo is None:
        last_sent = last_sent.replace(tzinfo=timezone.utc)
    return now - last_sent >= interval


def build_reminder(
    contracts: List[Contract], settings: UserSettings, today: Optional[date] = None
) -> List[Tuple[Contract, str]]:
    """Contracts to mention in a reminder, within the renewal window."""
    return upcoming_renewals(contracts, today, settings.renewal_days)


def format_reminder(matches: List[Tuple[Contract, str]]) -> str:
    """Plain-text reminder body listing each contract and its deadline."""
    lines = ["The following contracts have upcoming renewal deadlines:", ""]
    for contract, cancellation_date in matches:
        line = f"- {contract.name}"
        if contract.company:
            line += f" ({contract.company})"
        line += f": cancellation by {cancellation_date}"
        lines.append(line)
    lines.append("")
    lines.append("Please review these contracts and take action if needed.")
    return "\n".join(lines)
