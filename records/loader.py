"""YAML loading and saving utilities for the records data file."""

import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Tuple, Type, Union

import structlog
import yaml

from .category import Category
from .contract import Contract
from .cost_entry import CostEntry
from .errors import NotFoundError, ValidationError
from .purchase import Purchase
from .record_book import RecordBook
from .settings import UserSettings
from .vehicle import Vehicle

logger = structlog.get_logger()

# Section name in the YAML file -> record class and attribute names
SECTIONS: Dict[str, Tuple[Type, Tuple[str, ...]]] = {
    "categories": (Category, ("id", "name", "module", "created_at", "updated_at")),
    "contracts": (
        Contract,
        (
            "id", "category_id", "name", "product_name", "company",
            "contract_number", "customer_number", "price", "billing_interval",
            "start_date", "end_date", "minimum_duration_months",
            "extension_duration_months", "notice_period_months",
            "customer_portal_url", "paperless_url", "comments",
            "created_at", "updated_at",
        ),
    ),
    "purchases": (
        Purchase,
        (
            "id", "category_id", "item_name", "type", "brand", "article_number",
            "dealer", "price", "purchase_date", "description_url", "invoice_url",
            "handbook_url", "consumables", "comments", "created_at", "updated_at",
        ),
    ),
    "vehicles": (
        Vehicle,
        (
            "id", "name", "make", "model", "year", "license_plate",
            "purchase_date", "purchase_price", "purchase_mileage",
            "target_mileage", "target_months", "annual_insurance", "annual_tax",
            "maintenance_factor", "comments", "created_at", "updated_at",
        ),
    ),
    "costEntries": (
        CostEntry,
        (
            "id", "vehicle_id", "type", "description", "vendor", "amount", "date",
            "mileage", "comments", "created_at", "updated_at",
        ),
    ),
}

# Child sections removed along with their parent record
CASCADES = {
    "categories": (("contracts", "category_id"), ("purchases", "category_id")),
    "vehicles": (("costEntries", "vehicle_id"),),
}

SETTINGS_FIELDS = ("renewal_days", "reminder_frequency", "last_reminder_sent")


def to_camel(name: str) -> str:
    """Convert snake_case attribute name to the camelCase key used in YAML."""
    first, *rest = name.split("_")
    return first + "".join(part.capitalize() for part in rest)


def _section_of(record: Any) -> str:
    for section, (cls, _) in SECTIONS.items():
        if isinstance(record, cls):
            return section
    raise TypeError(f"Unsupported record type: {type(record).__name__}")


def record_to_dict(record: Any) -> Dict[str, Any]:
    """Serialize a record to the YAML dict format (camelCase keys, no None values)."""
    _, fields = SECTIONS[_section_of(record)]
    d: Dict[str, Any] = {}
    for name in fields:
        value = getattr(record, name)
        if value is not None and value != "":
            d[to_camel(name)] = value
    return d


def record_from_dict(section: str, dct: Dict[str, Any]) -> Any:
    """Build a record of the given section from a camelCase dict."""
    if section not in SECTIONS:
        raise ValueError(f"Unknown section: {section}")
    if not isinstance(dct, dict):
        raise ValidationError("record must be an object")
    cls, fields = SECTIONS[section]
    return cls(**{name: dct.get(to_camel(name)) for name in fields})


def settings_to_dict(settings: UserSettings) -> Dict[str, Any]:
    d = {to_camel(name): getattr(settings, name) for name in SETTINGS_FIELDS}
    return {k: v for k, v in d.items() if v is not None}


def settings_from_dict(dct: Dict[str, Any]) -> UserSettings:
    return UserSettings(**{name: dct.get(to_camel(name)) for name in SETTINGS_FIELDS})


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _read_raw(filename: Union[str, Path]) -> Dict[str, Any]:
    with open(filename, "r") as fp:
        data = yaml.load(fp, Loader=yaml.SafeLoader)
    return data or {}


def _write_raw(filename: Union[str, Path], data: Dict[str, Any]) -> None:
    with open(filename, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )


def init_records(filename: Union[str, Path]) -> None:
    """Create an empty data file with default settings."""
    path = Path(filename)
    path.parent.mkdir(parents=True, exist_ok=True)
    data: Dict[str, Any] = {section: [] for section in SECTIONS}
    data["settings"] = settings_to_dict(UserSettings())
    _write_raw(path, data)
    logger.info("created data file", path=str(path))


def load_records(filename: Union[str, Path]) -> RecordBook:
    """Load all records from a YAML data file."""
    data = _read_raw(filename)
    parsed = {
        section: [record_from_dict(section, d) for d in (data.get(section) or [])]
        for section in SECTIONS
    }
    return RecordBook(
        categories=parsed["categories"],
        contracts=parsed["contracts"],
        purchases=parsed["purchases"],
        vehicles=parsed["vehicles"],
        cost_entries=parsed["costEntries"],
        settings=settings_from_dict(data.get("settings") or {}),
    )


def _find_index(items: list, record_id: str, section: str) -> int:
    for index, item in enumerate(items):
        if item.get("id") == record_id:
            return index
    raise NotFoundError(f"{section} record '{record_id}' not found")


def add_record(filename: Union[str, Path], record: Any) -> Any:
    """
    Append a record to the data file.

    Validates the record, assigns a new id and timestamps, and writes back
    to the file. Returns the stored record.
    """
    record.validate()
    section = _section_of(record)

    data = _read_raw(filename)
    if data.get(section) is None:
        data[section] = []

    record.id = str(uuid.uuid4())
    record.created_at = record.updated_at = _now()
    data[section].append(record_to_dict(record))

    _write_raw(filename, data)
    logger.info("added record", section=section, id=record.id)
    return record


def update_record(filename: Union[str, Path], record_id: str, record: Any) -> Any:
    """
    Replace the record with the given id.

    Keeps the original id, owner and creation time; refreshes updated_at.
    """
    record.validate()
    section = _section_of(record)

    data = _read_raw(filename)
    items = data.get(section) or []
    index = _find_index(items, record_id, section)
    existing = items[index]

    record.id = record_id
    record.created_at = existing.get("createdAt")
    record.updated_at = _now()
    for owner in ("category_id", "vehicle_id"):
        if hasattr(record, owner) and getattr(record, owner) is None:
            setattr(record, owner, existing.get(to_camel(owner)))
    items[index] = record_to_dict(record)

    _write_raw(filename, data)
    logger.info("updated record", section=section, id=record_id)
    return record


def delete_record(filename: Union[str, Path], section: str, record_id: str) -> None:
    """Remove a record and any records that belong to it."""
    data = _read_raw(filename)
    items = data.get(section) or []
    index = _find_index(items, record_id, section)
    del items[index]

    for child_section, key in CASCADES.get(section, ()):
        children = data.get(child_section) or []
        kept = [c for c in children if c.get(to_camel(key)) != record_id]
        if len(kept) != len(children):
            logger.info(
                "deleted child records",
                section=child_section,
                count=len(children) - len(kept),
            )
        data[child_section] = kept

    _write_raw(filename, data)
    logger.info("deleted record", section=section, id=record_id)


def save_settings(filename: Union[str, Path], settings: UserSettings) -> None:
    """Replace the settings section of the data file."""
    settings.validate()
    data = _read_raw(filename)
    data["settings"] = settings_to_dict(settings)
    _write_raw(filename, data)
    logger.info("saved settings", reminder_frequency=settings.reminder_frequency)
