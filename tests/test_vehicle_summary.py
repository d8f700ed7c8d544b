#!/usr/bin/env python3
"""Tests for vehicle cost aggregation."""
import json
from datetime import date

import pytest

from records import CostEntry, MileagePoint, Vehicle, YearMileage, compute_vehicle_summary
from records.vehicle_summary import (
    calc_current_mileage,
    distribute_fuel_costs,
    interpolate_mileage,
)


def cost(type, on, amount=None, mileage=None):
    return CostEntry(type=type, date=on, amount=amount, mileage=mileage, vehicle_id="v1")


class TestCurrentMileage:
    """Tests for calc_current_mileage."""

    def test_highest_reading_wins(self):
        entries = [
            cost("mileage", "2022-03-01", mileage=15000),
            cost("fuel", "2022-06-01", amount=60, mileage=12000),
        ]
        assert calc_current_mileage(entries, 10000) == 15000

    def test_falls_back_to_purchase_mileage(self):
        assert calc_current_mileage([cost("tax", "2022-01-01", amount=100)], 10000) == 10000

    def test_no_readings_at_all(self):
        assert calc_current_mileage([], None) == 0.0


class TestFuelDistribution:
    """Tests for distribute_fuel_costs."""

    def test_first_entry_counts_toward_its_year(self):
        entries = [cost("fuel", "2022-05-01", amount=80)]
        assert distribute_fuel_costs(entries, date(2023, 1, 1)) == {2022: 80}

    def test_split_across_year_boundary(self):
        entries = [
            cost("fuel", "2022-12-22", amount=100),
            cost("fuel", "2023-01-11", amount=200),
        ]
        result = distribute_fuel_costs(entries, date(2023, 6, 1))
        assert result[2022] == pytest.approx(200)
        assert result[2023] == pytest.approx(100)

    def test_ignores_other_types(self):
        entries = [cost("service", "2022-05-01", amount=300)]
        assert distribute_fuel_costs(entries, date(2023, 1, 1)) == {}


class TestInterpolateMileage:
    """Tests for interpolate_mileage."""

    def test_linear_between_points(self):
        points = [MileagePoint("2022-01-01", 0), MileagePoint("2022-01-11", 1000)]
        assert interpolate_mileage(points, date(2022, 1, 6)) == pytest.approx(500)

    def test_clamps_outside_range(self):
        points = [MileagePoint("2022-01-01", 100), MileagePoint("2022-01-11", 1000)]
        assert interpolate_mileage(points, date(2021, 6, 1)) == 100
        assert interpolate_mileage(points, date(2023, 1, 1)) == 1000

    def test_no_points(self):
        assert interpolate_mileage([], date(2022, 1, 1)) is None

    def test_malformed_date_uses_fallback(self):
        """A malformed date is placed where the points were sorted, not at target."""
        points = [MileagePoint("2022-01-01", 0), MileagePoint("bad", 1000)]
        result = interpolate_mileage(points, date(2022, 1, 6), date(2022, 1, 11))
        assert result == pytest.approx(500)
        assert interpolate_mileage(points, date(2022, 1, 6)) == 1000


class TestComputeVehicleSummary:
    """Tests for compute_vehicle_summary."""

    @pytest.fixture
    def vehicle(self):
        return Vehicle(
            name="Golf",
            id="v1",
            purchase_date="2022-01-01",
            purchase_price=20000,
            purchase_mileage=10000,
        )

    @pytest.fixture
    def entries(self):
        return [
            cost("service", "2022-03-01", amount=200),
            cost("fuel", "2022-05-01", amount=50),
            cost("fuel", "2023-02-01", amount=70),
            cost("insurance", "2023-01-10", amount=400),
            cost("mileage", "2023-06-01", mileage=19000),
            cost("misc", "2023-03-01"),
        ]

    def test_empty_entries(self, vehicle):
        summary = compute_vehicle_summary(vehicle, [], date(2023, 1, 1))
        assert summary.total_cost == 0
        assert summary.costs_by_type == {}
        assert summary.costs_by_year == []
        assert summary.cost_per_month == 0
        assert summary.cost_per_km == 0
        assert summary.current_mileage == 10000
        assert summary.months_owned == 12.0
        assert summary.mileage_history == [MileagePoint("2022-01-01", 10000)]
        assert summary.mileage_by_year == []
        assert summary.projection is None
        assert summary.entry_count == 0

    def test_current_mileage_is_highest_reading(self, vehicle):
        entries = [
            cost("mileage", "2022-03-01", mileage=12000),
            cost("mileage", "2022-06-01", mileage=15000),
        ]
        summary = compute_vehicle_summary(vehicle, entries, date(2023, 1, 1))
        assert summary.current_mileage == 15000

    def test_totals_by_type(self, vehicle, entries):
        summary = compute_vehicle_summary(vehicle, entries, date(2023, 7, 1))
        assert summary.total_cost == 720
        assert summary.costs_by_type == {"service": 200, "fuel": 120, "insurance": 400}
        assert "mileage" not in summary.costs_by_type

    def test_totals_by_year(self, vehicle, entries):
        summary = compute_vehicle_summary(vehicle, entries, date(2023, 7, 1))
        years = summary.costs_by_year
        assert [y.year for y in years] == [2022, 2023]
        assert (years[0].service, years[0].fuel, years[0].total) == (200, 50, 250)
        assert (years[1].fuel, years[1].insurance, years[1].total) == (70, 400, 470)

    def test_totals_add_up(self, vehicle, entries):
        summary = compute_vehicle_summary(vehicle, entries, date(2023, 7, 1))
        assert sum(summary.costs_by_type.values()) == pytest.approx(summary.total_cost)
        assert sum(y.total for y in summary.costs_by_year) == pytest.approx(
            summary.total_cost
        )

    def test_zero_total_type_is_omitted(self, vehicle):
        entries = [cost("tires", "2022-05-01", amount=0), cost("tax", "2022-05-01", amount=90)]
        summary = compute_vehicle_summary(vehicle, entries, date(2023, 1, 1))
        assert summary.costs_by_type == {"tax": 90}

    def test_rates(self, vehicle, entries):
        summary = compute_vehicle_summary(vehicle, entries, date(2023, 7, 1))
        assert summary.months_owned == 18.0
        assert summary.cost_per_month == pytest.approx(40.0)
        assert summary.cost_per_km == pytest.approx(0.08)
        assert summary.km_per_month == pytest.approx(500.0)

    def test_rates_without_purchase_date(self, entries):
        vehicle = Vehicle(name="Unknown", id="v1")
        summary = compute_vehicle_summary(vehicle, entries, date(2023, 7, 1))
        assert summary.months_owned == 0.0
        assert summary.cost_per_month == 0
        assert summary.km_per_month == 0
        assert summary.cost_per_km == pytest.approx(720 / 19000)

    def test_purchase_price_not_in_total(self, vehicle):
        summary = compute_vehicle_summary(
            vehicle, [cost("tax", "2022-05-01", amount=90)], date(2023, 1, 1)
        )
        assert summary.total_cost == 90

    def test_mileage_history_sorted_with_purchase_point(self, vehicle, entries):
        summary = compute_vehicle_summary(vehicle, entries, date(2023, 7, 1))
        assert summary.mileage_history == [
            MileagePoint("2022-01-01", 10000),
            MileagePoint("2023-06-01", 19000),
        ]

    def test_mileage_by_year(self):
        vehicle = Vehicle(
            name="Golf", id="v1", purchase_date="2021-01-01", purchase_mileage=10000
        )
        entries = [
            cost("mileage", "2022-01-01", mileage=20000),
            cost("fuel", "2022-06-01", amount=600),
            cost("mileage", "2023-01-01", mileage=32000),
        ]
        summary = compute_vehicle_summary(vehicle, entries, date(2023, 6, 1))
        assert summary.mileage_by_year == [
            YearMileage(year=2022, km=12000, fuel_cost_per_km=0.05),
            YearMileage(year=2023, km=0, fuel_cost_per_km=0.0),
        ]

    def test_projection(self):
        vehicle = Vehicle(
            name="Golf",
            id="v1",
            purchase_date="2022-01-01",
            purchase_price=20000,
            purchase_mileage=0,
            target_mileage=60000,
            target_months=36,
            maintenance_factor=1.5,
        )
        entries = [
            cost("service", "2022-06-01", amount=600),
            cost("fuel", "2022-06-01", amount=1200, mileage=10000),
        ]
        summary = compute_vehicle_summary(vehicle, entries, date(2023, 1, 1))
        projection = summary.projection
        assert projection.target_months == 36
        assert projection.target_mileage == 60000
        assert projection.projected_total_cost == pytest.approx(26300)
        assert projection.projected_cost_per_month == pytest.approx(26300 / 36)
        assert projection.projected_cost_per_km == pytest.approx(26300 / 60000)
        assert projection.theoretical_residual_value == pytest.approx(13333.33)
        assert projection.required_sale_price == pytest.approx(0, abs=1e-6)

    def test_projection_without_ownership_time(self):
        vehicle = Vehicle(name="New", id="v1", target_months=48)
        summary = compute_vehicle_summary(vehicle, [], date(2023, 1, 1))
        assert summary.projection.target_months == 48
        assert summary.projection.projected_total_cost == 0

    def test_projection_defaults_target_months_to_owned(self, vehicle, entries):
        vehicle.target_mileage = 40000
        summary = compute_vehicle_summary(vehicle, entries, date(2023, 7, 1))
        # ratio 1, no maintenance factor: purchase price plus costs so far
        assert summary.projection.projected_total_cost == pytest.approx(20720)
        assert summary.projection.projected_cost_per_km == pytest.approx(20720 / 30000)

    def test_to_dict_is_json_serializable(self, vehicle, entries):
        vehicle.target_months = 60
        summary = compute_vehicle_summary(vehicle, entries, date(2023, 7, 1))
        dct = json.loads(json.dumps(summary.to_dict()))
        assert dct["vehicleId"] == "v1"
        assert dct["totalCost"] == 720
        assert dct["costsByYear"][0]["year"] == 2022
        assert dct["projection"]["targetMonths"] == 60
