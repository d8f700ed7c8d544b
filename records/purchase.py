"""Purchase class for one-off purchase records."""
from typing import Optional

from .calculations import parse_date
from .errors import ValidationError
from .validation import check_number


class Purchase:
    """A single purchased item with its receipts and documentation links."""

    def __init__(
            self,
            item_name: str,
            category_id: Optional[str] = None,
            type: Optional[str] = None,
            brand: Optional[str] = None,
            article_number: Optional[str] = None,
            dealer: Optional[str] = None,
            price: Optional[float] = None,
            purchase_date: Optional[str] = None,
            description_url: Optional[str] = None,
            invoice_url: Optional[str] = None,
            handbook_url: Optional[str] = None,
            consumables: Optional[str] = None,
            comments: Optional[str] = None,
            id: Optional[str] = None,
            created_at: Optional[str] = None,
            updated_at: Optional[str] = None,
    ):
        self.id = id
        self.category_id = category_id
        self.item_name = item_name
        self.type = type
        self.brand = brand
        self.article_number = article_number
        self.dealer = dealer
        self.price = price
        self.purchase_date = purchase_date
        self.description_url = description_url
        self.invoice_url = invoice_url
        self.handbook_url = handbook_url
        self.consumables = consumables
        self.comments = comments
        self.created_at = created_at
        self.updated_at = updated_at

    def validate(self) -> None:
        if not self.item_name or not isinstance(self.item_name, str):
            raise ValidationError("itemName is required")
        if self.purchase_date and parse_date(self.purchase_date) is None:
            raise ValidationError("purchaseDate must be in format YYYY-MM-DD")
        check_number("price", self.price)
