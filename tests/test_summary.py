#!/usr/bin/env python3
"""Tests for category totals, upcoming renewals and reminders."""
from datetime import date, datetime, timedelta, timezone

import pytest

from records import (
    Category,
    Contract,
    Purchase,
    UserSettings,
    ValidationError,
    contract_summary,
    purchase_summary,
    upcoming_renewals,
)
from records.reminder import build_reminder, format_reminder, reminder_due
from records.summary import parse_renewal_days


@pytest.fixture
def categories():
    return [Category("Internet", id="a"), Category("Insurance", id="b")]


@pytest.fixture
def contracts():
    return [
        Contract(
            "Long running",
            "2020-01-15",
            category_id="a",
            minimum_duration_months=12,
            extension_duration_months=12,
            notice_period_months=3,
            price=10,
        ),
        Contract(
            "DSL",
            "2022-08-01",
            category_id="a",
            minimum_duration_months=12,
            notice_period_months=1,
            price=120,
            billing_interval="yearly",
            company="Telco",
        ),
        Contract("Fixed", "2020-01-01", category_id="b", end_date="2022-01-01"),
    ]


class TestContractSummary:
    """Tests for contract_summary."""

    def test_totals(self, categories, contracts):
        summary = contract_summary(categories, contracts)
        assert summary.total_contracts == 3
        assert summary.total_monthly_amount == pytest.approx(20)
        assert summary.total_yearly_amount == pytest.approx(240)

    def test_per_category(self, categories, contracts):
        summary = contract_summary(categories, contracts)
        internet, insurance = summary.categories
        assert (internet.count, internet.monthly_total, internet.yearly_total) == (
            2, pytest.approx(20), pytest.approx(240)
        )
        assert (insurance.count, insurance.monthly_total) == (1, 0)

    def test_to_dict(self, categories, contracts):
        dct = contract_summary(categories, contracts).to_dict()
        assert dct["totalContracts"] == 3
        assert dct["categories"][0]["contractCount"] == 2


class TestPurchaseSummary:
    """Tests for purchase_summary."""

    def test_totals(self):
        categories = [Category("Electronics", "purchases", id="e")]
        purchases = [
            Purchase("Laptop", category_id="e", price=1200),
            Purchase("Cable", category_id="e"),
            Purchase("Chair", price=300),
        ]
        summary = purchase_summary(categories, purchases)
        assert summary.total_purchases == 3
        assert summary.total_spent == 1500
        assert summary.categories[0].count == 2
        assert summary.categories[0].total_spent == 1200
        assert summary.to_dict()["categories"][0]["totalSpent"] == 1200


class TestUpcomingRenewals:
    """Tests for upcoming_renewals."""

    def test_within_window(self, contracts):
        matches = upcoming_renewals(contracts, date(2023, 6, 1), 90)
        assert [(c.name, d) for c, d in matches] == [("DSL", "2023-07-01")]

    def test_sorted_by_deadline(self, contracts):
        matches = upcoming_renewals(contracts, date(2023, 6, 1), 180)
        assert [d for _, d in matches] == ["2023-07-01", "2023-10-15"]

    def test_fixed_term_excluded(self, contracts):
        matches = upcoming_renewals(contracts, date(2021, 6, 1), 365)
        assert "Fixed" not in [c.name for c, _ in matches]


class TestParseRenewalDays:
    """Tests for parse_renewal_days."""

    def test_default(self):
        assert parse_renewal_days(None) == 90
        assert parse_renewal_days("") == 90

    def test_valid(self):
        assert parse_renewal_days("30") == 30

    def test_capped(self):
        assert parse_renewal_days("1000") == 365

    @pytest.mark.parametrize("value", ["0", "-5", "abc"])
    def test_invalid(self, value):
        with pytest.raises(ValidationError):
            parse_renewal_days(value)


class TestReminder:
    """Tests for reminder scheduling and formatting."""

    NOW = datetime(2023, 6, 1, 8, 0, tzinfo=timezone.utc)

    def test_disabled_never_due(self):
        assert not reminder_due(UserSettings(reminder_frequency="disabled"), self.NOW)

    def test_first_reminder_due(self):
        assert reminder_due(UserSettings(reminder_frequency="weekly"), self.NOW)

    def test_interval_not_elapsed(self):
        last = (self.NOW - timedelta(days=3)).isoformat()
        settings = UserSettings(reminder_frequency="weekly", last_reminder_sent=last)
        assert not reminder_due(settings, self.NOW)

    def test_interval_elapsed(self):
        last = (self.NOW - timedelta(days=8)).isoformat()
        settings = UserSettings(reminder_frequency="weekly", last_reminder_sent=last)
        assert reminder_due(settings, self.NOW)

    def test_monthly_interval(self):
        last = (self.NOW - timedelta(days=20)).isoformat()
        settings = UserSettings(reminder_frequency="monthly", last_reminder_sent=last)
        assert not reminder_due(settings, self.NOW)

    def test_build_uses_renewal_days(self, contracts):
        settings = UserSettings(renewal_days=180)
        matches = build_reminder(contracts, settings, date(2023, 6, 1))
        assert len(matches) == 2

    def test_format(self, contracts):
        matches = build_reminder(contracts, UserSettings(), date(2023, 6, 1))
        body = format_reminder(matches)
        assert body.startswith("The following contracts have upcoming renewal deadlines:")
        assert "- DSL (Telco): cancellation by 2023-07-01" in body
        assert body.endswith("Please review these contracts and take action if needed.")
