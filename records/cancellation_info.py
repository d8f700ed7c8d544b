"""CancellationInfo dataclass for calculated contract deadlines."""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class CancellationInfo:
    """Calculated cancellation deadline and expiry for a contract."""

    cancellation_date: Optional[str] = None
    expired: bool = False

    @property
    def has_deadline(self) -> bool:
        return self.cancellation_date is not None

    def to_dict(self) -> Dict[str, Any]:
        return {"cancellationDate": self.cancellation_date, "expired": self.expired}
