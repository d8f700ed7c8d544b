"""Bulk import of contracts from a list of JSON objects."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Union

import structlog

from .category import Category
from .errors import RecordsError, ValidationError
from .loader import add_record, load_records, record_from_dict

logger = structlog.get_logger()


@dataclass
class ImportRowError:
    row: int
    error: str


@dataclass
class ImportResult:
    created: int = 0
    errors: List[ImportRowError] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "created": self.created,
            "errors": [{"row": e.row, "error": e.error} for e in self.errors],
        }


def import_contracts(
    filename: Union[str, Path], entries: List[Dict[str, Any]]
) -> ImportResult:
    """
    Create contracts from import entries.

    Each entry holds a "category" name plus contract fields in camelCase.
    Categories are matched by name (case-insensitive) and created when
    missing. Invalid rows are reported with their 1-based row number and
    do not stop the import.
    """
    if not isinstance(entries, list):
        raise ValidationError("import data must be a list of contracts")

    book = load_records(filename)
    result = ImportResult()

    for row, entry in enumerate(entries, start=1):
        if not isinstance(entry, dict):
            result.errors.append(ImportRowError(row, "entry must be an object"))
            continue
        category_name = entry.get("category") or ""
        if not isinstance(category_name, str):
            result.errors.append(ImportRowError(row, "category must be a string"))
            continue
        category_name = category_name.strip()
        if not category_name:
            result.errors.append(ImportRowError(row, "category is required"))
            continue

        contract = record_from_dict("contracts", entry)
        contract.id = None
        try:
            contract.validate()
            category = book.find_category_by_name(category_name, "contracts")
            if category is None:
                category = add_record(filename, Category(category_name, "contracts"))
                book.categories.append(category)
            contract.category_id = category.id
            add_record(filename, contract)
        except RecordsError as e:
            result.errors.append(ImportRowError(row, str(e)))
            continue
        result.created += 1

    logger.info("imported contracts", created=result.created, failed=len(result.errors))
    return result
