#!/usr/bin/env python3
"""Tests for ledger CLI formatting helpers and commands."""
import json
from datetime import date

import pytest

from ledger import (
    format_cost,
    format_km,
    format_months,
    main,
    make_contracts_table,
    make_year_costs_table,
    truncate,
)
from records import (
    Category,
    Contract,
    CostEntry,
    UserSettings,
    Vehicle,
    add_months,
    add_record,
    compute_vehicle_summary,
    init_records,
    load_records,
    save_settings,
)


class TestFormatKm:
    """Tests for format_km."""

    def test_formats_number(self):
        assert format_km(48210) == "48,210"
        assert format_km(0) == "0"

    def test_none_returns_dash(self):
        assert format_km(None) == "-"


class TestFormatCost:
    """Tests for format_cost."""

    def test_formats_number(self):
        assert format_cost(65.2) == "65.20"
        assert format_cost(1234.5) == "1,234.50"

    def test_none_returns_dash(self):
        assert format_cost(None) == "-"


class TestFormatMonths:

    def test_formats_months(self):
        assert format_months(3) == "3 mo"

    def test_zero_returns_dash(self):
        assert format_months(0) == "-"


class TestTruncate:
    """Tests for truncate."""

    def test_short_text_unchanged(self):
        assert truncate("DSL") == "DSL"

    def test_long_text_truncated(self):
        assert truncate("a" * 40, max_len=10) == "aaaaaaa..."

    def test_none_returns_dash(self):
        assert truncate(None) == "-"


class TestMakeContractsTable:
    """Tests for make_contracts_table."""

    def test_open_ended_contract(self):
        contract = Contract(
            "Mobile plan",
            "2020-01-15",
            category_id="a",
            minimum_duration_months=12,
            extension_duration_months=12,
            notice_period_months=3,
            price=9.99,
        )
        rows = make_contracts_table([contract], {"a": "Internet"}, date(2023, 6, 1))
        assert rows == [
            ["Mobile plan", "Internet", "-", "9.99", "2020-01-15", "3 mo", "2023-10-15"]
        ]

    def test_expired_fixed_term_contract(self):
        contract = Contract("Lease", "2020-01-01", end_date="2022-01-01", company="Bank")
        rows = make_contracts_table([contract], {}, date(2023, 6, 1))
        assert rows[0][1] == "-"
        assert rows[0][2] == "Bank"
        assert rows[0][6] == "ends 2022-01-01 (expired)"


class TestMakeYearCostsTable:
    """Tests for make_year_costs_table."""

    def test_one_row_per_year(self):
        vehicle = Vehicle("Golf", id="v1")
        entries = [
            CostEntry("fuel", "2022-02-01", amount=50),
            CostEntry("tax", "2023-02-01", amount=120),
        ]
        summary = compute_vehicle_summary(vehicle, entries, date(2023, 6, 1))
        rows = make_year_costs_table(summary)
        assert [r[0] for r in rows] == [2022, 2023]
        assert rows[0][2] == "50.00"
        assert rows[1][-1] == "120.00"


class TestCommands:
    """Tests for running CLI commands against a data file."""

    @pytest.fixture
    def data_file(self, tmp_path):
        path = tmp_path / "records.yaml"
        init_records(path)
        return path

    @pytest.fixture
    def vehicle(self, data_file):
        return add_record(data_file, Vehicle("Golf", purchase_date="2022-01-01"))

    def test_missing_data_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.yaml"), "summary"]) == 1
        assert "File not found" in capsys.readouterr().out

    def test_contracts_lists_active(self, data_file, capsys):
        category = add_record(data_file, Category("Internet"))
        add_record(data_file, Contract("DSL", "2023-01-01", category_id=category.id))
        add_record(data_file, Contract("Old", "2020-01-01", end_date="2021-01-01"))

        assert main([str(data_file), "contracts"]) == 0
        out = capsys.readouterr().out
        assert "Contracts: 1" in out
        assert "DSL" in out
        assert "Old" not in out

        assert main([str(data_file), "contracts", "--all"]) == 0
        assert "Contracts: 2" in capsys.readouterr().out

    def test_summary(self, data_file, capsys):
        add_record(data_file, Contract("Gym", "2023-01-01", price=120, billing_interval="yearly"))
        assert main([str(data_file), "summary"]) == 0
        out = capsys.readouterr().out
        assert "Monthly:   10.00" in out
        assert "Yearly:    120.00" in out

    def test_log_cost_dry_run(self, data_file, vehicle, capsys):
        argv = [str(data_file), "log-cost", vehicle.id, "fuel", "--amount", "65.2", "--dry-run"]
        assert main(argv) == 0
        assert "dry run" in capsys.readouterr().out
        assert load_records(data_file).cost_entries == []

    def test_log_cost_saves_entry(self, data_file, vehicle):
        argv = [
            str(data_file), "log-cost", vehicle.id, "fuel",
            "--date", "2023-01-01", "--amount", "65.2", "--mileage", "48210",
        ]
        assert main(argv) == 0
        entries = load_records(data_file).cost_entries
        assert len(entries) == 1
        assert entries[0].vehicle_id == vehicle.id
        assert entries[0].mileage == 48210

    def test_log_cost_unknown_vehicle(self, data_file, capsys):
        assert main([str(data_file), "log-cost", "nope", "fuel", "--amount", "10"]) == 1
        assert "not found" in capsys.readouterr().out

    def test_vehicle_summary(self, data_file, vehicle, capsys):
        add_record(data_file, CostEntry("tax", "2022-05-01", amount=120, vehicle_id=vehicle.id))
        assert main([str(data_file), "vehicle", vehicle.id]) == 0
        out = capsys.readouterr().out
        assert "Vehicle: Golf" in out
        assert "Total cost: 120.00" in out

    def test_import(self, data_file, tmp_path, capsys):
        json_file = tmp_path / "contracts.json"
        json_file.write_text(
            json.dumps(
                [
                    {"category": "Internet", "name": "DSL", "startDate": "2023-01-01"},
                    {"category": "Internet", "startDate": "2023-01-01"},
                ]
            )
        )
        assert main([str(data_file), "import", str(json_file)]) == 1
        out = capsys.readouterr().out
        assert "Created: 1" in out
        assert "row 2: name is required" in out

    def test_remind_not_due(self, data_file, capsys):
        assert main([str(data_file), "remind"]) == 0
        assert "No reminder due" in capsys.readouterr().out

    def test_remind_records_sent_time(self, data_file, capsys):
        start = add_months(date.today(), -11).isoformat()
        add_record(data_file, Contract("DSL", start, minimum_duration_months=12))
        save_settings(data_file, UserSettings(reminder_frequency="weekly"))

        assert main([str(data_file), "remind"]) == 0
        assert "- DSL: cancellation by" in capsys.readouterr().out
        assert load_records(data_file).settings.last_reminder_sent is not None

        # sent just now, so the weekly reminder is not due again
        assert main([str(data_file), "remind"]) == 0
        assert "No reminder due" in capsys.readouterr().out

    def test_remind_dry_run(self, data_file, capsys):
        start = add_months(date.today(), -11).isoformat()
        add_record(data_file, Contract("DSL", start, minimum_duration_months=12))

        assert main([str(data_file), "remind", "--force", "--dry-run"]) == 0
        assert "dry run" in capsys.readouterr().out
        assert load_records(data_file).settings.last_reminder_sent is None
