"""Category class for grouping contracts and purchases."""
from typing import Optional

from .errors import ValidationError

MODULES = ("contracts", "purchases")


class Category:
    """A user-defined group of contracts or purchases."""

    def __init__(
            self,
            name: str,
            module: str = "contracts",
            id: Optional[str] = None,
            created_at: Optional[str] = None,
            updated_at: Optional[str] = None,
    ):
        self.id = id
        self.name = name
        self.module = module or "contracts"
        self.created_at = created_at
        self.updated_at = updated_at

    def validate(self) -> None:
        if not self.name or not isinstance(self.name, str):
            raise ValidationError("name is required")
        if self.module not in MODULES:
            raise ValidationError(f"module must be one of: {', '.join(MODULES)}")
