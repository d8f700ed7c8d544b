#!/usr/bin/env python3
"""Validate records YAML data files against the schema."""
import os
import sys
from pathlib import Path

import yaml
from jsonschema import validate, ValidationError


def load_schema() -> dict:
    """Load the JSON schema from schema.yaml."""
    schema_path = Path(__file__).parent / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def validate_data_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single records data file. Returns list of errors."""
    errors = []
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
        validate(instance=data, schema=schema)
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    except OSError as e:
        errors.append(f"Error: {e}")
    return errors


def main(argv=None):
    """Validate the given data files, or RECORDS_DATA_FILE when none are given."""
    argv = sys.argv[1:] if argv is None else argv
    schema = load_schema()
    paths = [Path(p) for p in argv] or [
        Path(os.environ.get("RECORDS_DATA_FILE", "data/records.yaml"))
    ]

    all_valid = True
    for filepath in paths:
        if not filepath.exists():
            print(f"FAIL: {filepath} (not found)")
            all_valid = False
            continue
        errors = validate_data_file(filepath, schema)
        if errors:
            print(f"FAIL: {filepath.name}")
            for error in errors:
                print(f"  {error}")
            all_valid = False
        else:
            print(f"OK: {filepath.name}")

    return 0 if all_valid else 1


if __name__ == "__main__":
    sys.exit(main())
