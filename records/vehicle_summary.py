"""
Vehicle cost aggregation.

Builds a VehicleSummary from a vehicle and its cost entries:
- Current mileage and months owned
- Total cost, grouped by type and by calendar year
- Cost per month, cost per km and km per month
- Mileage history and distance/fuel cost per calendar year
- Projection to the vehicle's target mileage and/or months
"""

from collections import defaultdict
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from .calculations import months_between, parse_date
from .cost_entry import CostEntry
from .cost_type import COST_COLUMNS, SERVICE_COST_TYPES, CostType
from .vehicle import Vehicle


@dataclass
class YearCosts:
    """Costs for one calendar year, one column per cost type."""

    year: int
    service: float = 0.0
    fuel: float = 0.0
    insurance: float = 0.0
    tax: float = 0.0
    inspection: float = 0.0
    tires: float = 0.0
    misc: float = 0.0
    total: float = 0.0

    def add(self, cost_type: str, amount: float) -> None:
        if cost_type in COST_COLUMNS:
            setattr(self, cost_type, getattr(self, cost_type) + amount)
            self.total += amount


@dataclass
class MileagePoint:
    date: str
    mileage: float


@dataclass
class YearMileage:
    """Distance driven in a year and the fuel cost per km of that year."""

    year: int
    km: float
    fuel_cost_per_km: float

    def to_dict(self) -> Dict[str, Any]:
        return {"year": self.year, "km": self.km, "fuelCostPerKm": self.fuel_cost_per_km}


@dataclass
class VehicleProjection:
    target_mileage: Optional[float] = None
    target_months: Optional[int] = None
    projected_total_cost: float = 0.0
    projected_cost_per_month: float = 0.0
    projected_cost_per_km: float = 0.0
    theoretical_residual_value: float = 0.0
    required_sale_price: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "targetMileage": self.target_mileage,
            "targetMonths": self.target_months,
            "projectedTotalCost": self.projected_total_cost,
            "projectedCostPerMonth": self.projected_cost_per_month,
            "projectedCostPerKm": self.projected_cost_per_km,
            "theoreticalResidualValue": self.theoretical_residual_value,
            "requiredSalePrice": self.required_sale_price,
        }


@dataclass
class VehicleSummary:
    """Derived cost and mileage figures for a vehicle."""

    vehicle_id: Optional[str] = None
    current_mileage: float = 0.0
    months_owned: float = 0.0
    km_per_month: float = 0.0
    total_cost: float = 0.0
    cost_per_month: float = 0.0
    cost_per_km: float = 0.0
    costs_by_type: Dict[str, float] = field(default_factory=dict)
    costs_by_year: List[YearCosts] = field(default_factory=list)
    mileage_history: List[MileagePoint] = field(default_factory=list)
    mileage_by_year: List[YearMileage] = field(default_factory=list)
    projection: Optional[VehicleProjection] = None
    entry_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict with camelCase keys, safe to serialize as JSON."""
        return {
            "vehicleId": self.vehicle_id,
            "currentMileage": self.current_mileage,
            "monthsOwned": self.months_owned,
            "kmPerMonth": self.km_per_month,
            "totalCost": self.total_cost,
            "costPerMonth": self.cost_per_month,
            "costPerKm": self.cost_per_km,
            "costsByType": dict(self.costs_by_type),
            "costsByYear": [asdict(y) for y in self.costs_by_year],
            "mileageHistory": [asdict(p) for p in self.mileage_history],
            "mileageByYear": [y.to_dict() for y in self.mileage_by_year],
            "projection": self.projection.to_dict() if self.projection else None,
            "entryCount": self.entry_count,
        }


def calc_current_mileage(
    entries: List[CostEntry], purchase_mileage: Optional[float]
) -> float:
    """Highest odometer reading in the entries, else the purchase mileage."""
    readings = [e.mileage for e in entries if e.mileage is not None]
    if readings:
        return max(readings)
    return purchase_mileage or 0.0


def distribute_fuel_costs(entries: List[CostEntry], today: date) -> Dict[int, float]:
    """
    Spread fuel costs over calendar years.

    The first fuel entry counts entirely toward its own year. Every later
    entry is split across the years between the previous fuel entry and
    itself, in proportion to the days falling in each year.
    """
    fuel = [
        (parse_date(e.date, today), e.amount)
        for e in entries
        if e.type == CostType.FUEL.value and e.amount is not None and e.amount > 0
    ]
    fuel.sort(key=lambda f: f[0])

    by_year: Dict[int, float] = defaultdict(float)
    for i, (entry_date, amount) in enumerate(fuel):
        if i == 0:
            by_year[entry_date.year] += amount
            continue

        prev_date = fuel[i - 1][0]
        total_days = (entry_date - prev_date).days
        if total_days <= 0:
            by_year[entry_date.year] += amount
            continue

        current = prev_date
        while current < entry_date:
            segment_end = min(date(current.year + 1, 1, 1), entry_date)
            fraction = (segment_end - current).days / total_days
            by_year[current.year] += amount * fraction
            current = segment_end
    return dict(by_year)


def interpolate_mileage(
    points: List[MileagePoint], target: date, fallback: Optional[date] = None
) -> Optional[float]:
    """
    Odometer reading at target, linear between the surrounding points.

    Malformed point dates count as fallback (default: target); pass the
    date the points were sorted with.
    """
    if not points:
        return None

    dates = [parse_date(p.date, fallback or target) for p in points]
    if target < dates[0]:
        return points[0].mileage
    if target >= dates[-1]:
        return points[-1].mileage

    for i in range(1, len(points)):
        if target >= dates[i]:
            continue
        total_days = (dates[i] - dates[i - 1]).days
        if total_days <= 0:
            return points[i - 1].mileage
        fraction = (target - dates[i - 1]).days / total_days
        return points[i - 1].mileage + fraction * (
            points[i].mileage - points[i - 1].mileage
        )
    return points[-1].mileage


def calc_mileage_by_year(
    points: List[MileagePoint],
    fuel_by_year: Dict[int, float],
    entry_years: List[int],
    start_year: int,
    end_year: int,
    today: Optional[date] = None,
) -> List[YearMileage]:
    """
    Distance driven per calendar year, from readings interpolated at Jan 1.

    Only years that hold at least one mileage reading from the entries are
    reported.
    """
    if len(points) < 2:
        return []

    boundaries = []
    for year in range(start_year, end_year + 2):
        mileage = interpolate_mileage(points, date(year, 1, 1), today)
        if mileage is not None:
            boundaries.append((year, mileage))

    result = []
    for (year, start_miles), (_, end_miles) in zip(boundaries, boundaries[1:]):
        if year not in entry_years:
            continue
        km = max(end_miles - start_miles, 0.0)
        fuel_per_km = 0.0
        if year in fuel_by_year and km > 0:
            fuel_per_km = fuel_by_year[year] / km
        result.append(
            YearMileage(year=year, km=round(km), fuel_cost_per_km=round(fuel_per_km, 2))
        )
    return result


def calc_projection(
    vehicle: Vehicle, summary: VehicleSummary, purchase_total: float
) -> VehicleProjection:
    """
    Extrapolate costs to the vehicle's target months and mileage.

    Running costs scale linearly with target_months / months_owned; the
    service-related share is additionally multiplied by the maintenance
    factor. The purchase price is added on top.
    """
    projection = VehicleProjection(
        target_mileage=vehicle.target_mileage, target_months=vehicle.target_months
    )
    months_owned = summary.months_owned
    target_months = (
        float(vehicle.target_months) if vehicle.target_months is not None else months_owned
    )
    target_mileage = (
        vehicle.target_mileage
        if vehicle.target_mileage is not None
        else summary.current_mileage
    )
    if target_months <= 0 or months_owned <= 0:
        return projection

    ratio = target_months / months_owned
    factor = vehicle.maintenance_factor if vehicle.maintenance_factor is not None else 1.0

    service_cost = sum(summary.costs_by_type.get(t, 0.0) for t in SERVICE_COST_TYPES)
    other_cost = summary.total_cost - service_cost
    projected_running = other_cost * ratio + service_cost * ratio * factor

    projection.projected_total_cost = purchase_total + projected_running
    projection.projected_cost_per_month = projection.projected_total_cost / target_months

    projected_km = target_mileage - (vehicle.purchase_mileage or 0.0)
    if projected_km > 0:
        projection.projected_cost_per_km = projection.projected_total_cost / projected_km

    # Linear depreciation of the purchase price over the target period
    if purchase_total > 0:
        residual = purchase_total - purchase_total * (months_owned / target_months)
        projection.theoretical_residual_value = round(max(residual, 0.0), 2)

    projection.required_sale_price = max(
        0.0,
        projection.projected_total_cost
        - projection.projected_cost_per_month * target_months,
    )
    return projection


def compute_vehicle_summary(
    vehicle: Vehicle, entries: List[CostEntry], today: Optional[date] = None
) -> VehicleSummary:
    """Aggregate a vehicle's cost entries into a VehicleSummary."""
    if today is None:
        today = date.today()

    entries = sorted(entries, key=lambda e: parse_date(e.date, today))
    summary = VehicleSummary(vehicle_id=vehicle.id, entry_count=len(entries))

    purchase_date = parse_date(vehicle.purchase_date)
    summary.months_owned = months_between(purchase_date, today) if purchase_date else 0.0

    years: Dict[int, YearCosts] = {}
    costs_by_type: Dict[str, float] = defaultdict(float)
    for entry in entries:
        if not entry.is_cost:
            continue
        year = parse_date(entry.date, today).year
        years.setdefault(year, YearCosts(year=year)).add(entry.type, entry.amount)
        costs_by_type[entry.type] += entry.amount
        summary.total_cost += entry.amount

    summary.costs_by_type = {t: v for t, v in costs_by_type.items() if v != 0}
    summary.costs_by_year = [years[y] for y in sorted(years)]

    # Mileage
    summary.current_mileage = calc_current_mileage(entries, vehicle.purchase_mileage)
    km_driven = max(summary.current_mileage - (vehicle.purchase_mileage or 0.0), 0.0)

    if vehicle.purchase_mileage is not None and vehicle.purchase_date:
        summary.mileage_history.append(
            MileagePoint(date=vehicle.purchase_date, mileage=vehicle.purchase_mileage)
        )
    readings = [e for e in entries if e.mileage is not None]
    summary.mileage_history.extend(
        MileagePoint(date=e.date, mileage=e.mileage) for e in readings
    )
    summary.mileage_history.sort(key=lambda p: parse_date(p.date, today))

    entry_years = sorted({parse_date(e.date, today).year for e in readings})
    if entry_years:
        start_year = min(entry_years)
        if purchase_date:
            start_year = min(start_year, purchase_date.year)
        summary.mileage_by_year = calc_mileage_by_year(
            summary.mileage_history,
            distribute_fuel_costs(entries, today),
            entry_years,
            start_year,
            max(today.year, entry_years[-1]),
            today,
        )

    # Rates
    if summary.months_owned > 0:
        summary.cost_per_month = summary.total_cost / summary.months_owned
        summary.km_per_month = km_driven / summary.months_owned
    if km_driven > 0:
        summary.cost_per_km = summary.total_cost / km_driven

    if vehicle.has_projection_target:
        summary.projection = calc_projection(
            vehicle, summary, vehicle.purchase_price or 0.0
        )

    return summary
