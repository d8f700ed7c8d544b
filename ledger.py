#!/usr/bin/env python3
"""
Unified CLI for household record keeping.

Commands:
  contracts - List contracts with their cancellation deadlines
  renewals  - Show contracts whose cancellation deadline is coming up
  summary   - Monthly/yearly contract costs and purchase totals per category
  purchases - List purchases
  vehicles  - List vehicles
  vehicle   - Show the cost summary of a vehicle
  log-cost  - Add a cost entry to a vehicle
  import    - Import contracts from a JSON file
  remind    - Print the renewal reminder if one is due
"""

import argparse
import json
import sys
from datetime import date, datetime, timezone
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from records import (
    Contract,
    CostEntry,
    CostType,
    RecordsError,
    VehicleSummary,
    add_record,
    load_records,
    save_settings,
)
from records.importer import import_contracts
from records.logging_config import configure_logging
from records.reminder import build_reminder, format_reminder, reminder_due

# =============================================================================
# Formatting helpers
# =============================================================================


def format_km(km: Optional[float]) -> str:
    """Format a distance or odometer reading for display."""
    return f"{km:,.0f}" if km is not None else "-"


def format_cost(cost: Optional[float]) -> str:
    """Format an amount for display."""
    return f"{cost:,.2f}" if cost is not None else "-"


def format_months(months: Optional[int]) -> str:
    return f"{months} mo" if months else "-"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


# =============================================================================
# Contracts
# =============================================================================


def make_contracts_table(
    contracts: List[Contract], category_names: dict, today: date
) -> List[List[str]]:
    """Convert contracts to table rows."""
    rows = []
    for contract in contracts:
        info = contract.cancellation_info(today)
        if contract.end_date:
            deadline = f"ends {contract.end_date}"
            if info.expired:
                deadline += " (expired)"
        else:
            deadline = info.cancellation_date or "-"
        rows.append(
            [
                truncate(contract.name),
                category_names.get(contract.category_id, "-"),
                contract.company or "-",
                format_cost(contract.monthly_price),
                contract.start_date,
                format_months(contract.notice_period_months),
                deadline,
            ]
        )
    return rows


def cmd_contracts(args):
    """List contracts with their cancellation deadlines."""
    book = load_records(args.data_file)
    today = date.today()
    names = {c.id: c.name for c in book.categories}

    contracts = book.contracts
    if args.category:
        wanted = args.category.lower()
        contracts = [
            c for c in contracts if wanted in names.get(c.category_id, "").lower()
        ]
    if not args.all:
        contracts = [c for c in contracts if not c.is_expired(today)]

    print(f"Contracts: {len(contracts)}")
    print()
    if not contracts:
        print("No contracts found.")
        return 0

    headers = ["Name", "Category", "Company", "Monthly", "Start", "Notice", "Cancel by"]
    print(
        tabulate(
            make_contracts_table(contracts, names, today),
            headers=headers,
            tablefmt="simple",
        )
    )
    return 0


def cmd_renewals(args):
    """Show contracts whose cancellation deadline is within the window."""
    book = load_records(args.data_file)
    days = args.days or book.settings.renewal_days
    upcoming = book.upcoming_renewals(date.today(), days)

    print(f"Upcoming renewals (next {days} days): {len(upcoming)}")
    print()
    if not upcoming:
        return 0

    rows = [
        [c.name, c.company or "-", format_cost(c.monthly_price), deadline]
        for c, deadline in upcoming
    ]
    headers = ["Name", "Company", "Monthly", "Cancel by"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


def cmd_summary(args):
    """Monthly/yearly contract costs and purchase totals per category."""
    book = load_records(args.data_file)

    contracts = book.contract_summary()
    print(f"Contracts: {contracts.total_contracts}")
    print(f"Monthly:   {format_cost(contracts.total_monthly_amount)}")
    print(f"Yearly:    {format_cost(contracts.total_yearly_amount)}")
    print()
    if contracts.categories:
        rows = [
            [c.name, c.count, format_cost(c.monthly_total), format_cost(c.yearly_total)]
            for c in contracts.categories
        ]
        print(
            tabulate(
                rows, headers=["Category", "Contracts", "Monthly", "Yearly"],
                tablefmt="simple",
            )
        )
        print()

    purchases = book.purchase_summary()
    print(f"Purchases: {purchases.total_purchases}")
    print(f"Spent:     {format_cost(purchases.total_spent)}")
    if purchases.categories:
        print()
        rows = [[c.name, c.count, format_cost(c.total_spent)] for c in purchases.categories]
        print(
            tabulate(rows, headers=["Category", "Purchases", "Spent"], tablefmt="simple")
        )
    return 0


# =============================================================================
# Purchases
# =============================================================================


def cmd_purchases(args):
    """List purchases, newest first."""
    book = load_records(args.data_file)
    names = {c.id: c.name for c in book.categories}
    purchases = sorted(
        book.purchases, key=lambda p: p.purchase_date or "", reverse=True
    )

    print(f"Purchases: {len(purchases)}")
    print()
    if not purchases:
        return 0

    rows = [
        [
            p.purchase_date or "-",
            truncate(p.item_name),
            names.get(p.category_id, "-"),
            p.brand or "-",
            p.dealer or "-",
            format_cost(p.price),
        ]
        for p in purchases
    ]
    headers = ["Date", "Item", "Category", "Brand", "Dealer", "Price"]
    print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Vehicles
# =============================================================================


def cmd_vehicles(args):
    """List vehicles."""
    book = load_records(args.data_file)
    rows = [
        [v.id, v.display_name, v.purchase_date or "-", format_km(v.purchase_mileage)]
        for v in book.vehicles
    ]
    print(f"Vehicles: {len(rows)}")
    print()
    if rows:
        headers = ["Id", "Vehicle", "Purchased", "Purchase km"]
        print(tabulate(rows, headers=headers, tablefmt="simple"))
    return 0


def make_year_costs_table(summary: VehicleSummary) -> List[List[str]]:
    """Convert yearly costs to table rows."""
    return [
        [
            y.year,
            format_cost(y.service),
            format_cost(y.fuel),
            format_cost(y.insurance),
            format_cost(y.tax),
            format_cost(y.inspection),
            format_cost(y.tires),
            format_cost(y.misc),
            format_cost(y.total),
        ]
        for y in summary.costs_by_year
    ]


def cmd_vehicle(args):
    """Show the cost summary of a vehicle."""
    book = load_records(args.data_file)
    vehicle = book.get_vehicle(args.vehicle_id)
    summary = book.vehicle_summary(args.vehicle_id, date.today())

    print(f"Vehicle: {vehicle.display_name}")
    print(f"Current mileage: {format_km(summary.current_mileage)}")
    print(f"Months owned: {summary.months_owned:.1f}")
    print(f"Cost entries: {summary.entry_count}")
    print(f"Total cost: {format_cost(summary.total_cost)}")
    print(f"Cost per month: {format_cost(summary.cost_per_month)}")
    print(f"Cost per km: {format_cost(summary.cost_per_km)}")
    print(f"Km per month: {format_km(summary.km_per_month)}")
    print()

    if summary.costs_by_year:
        headers = ["Year"] + [t.value.capitalize() for t in CostType if t is not CostType.MILEAGE]
        headers.append("Total")
        print(tabulate(make_year_costs_table(summary), headers=headers, tablefmt="simple"))
        print()

    if summary.mileage_by_year:
        rows = [
            [y.year, format_km(y.km), format_cost(y.fuel_cost_per_km)]
            for y in summary.mileage_by_year
        ]
        print(tabulate(rows, headers=["Year", "Km", "Fuel/km"], tablefmt="simple"))
        print()

    projection = summary.projection
    if projection:
        print("Projection:")
        if projection.target_months is not None:
            print(f"  Target months:        {projection.target_months}")
        if projection.target_mileage is not None:
            print(f"  Target mileage:       {format_km(projection.target_mileage)}")
        print(f"  Total cost:           {format_cost(projection.projected_total_cost)}")
        print(f"  Cost per month:       {format_cost(projection.projected_cost_per_month)}")
        print(f"  Cost per km:          {format_cost(projection.projected_cost_per_km)}")
        print(f"  Residual value:       {format_cost(projection.theoretical_residual_value)}")
        print(f"  Required sale price:  {format_cost(projection.required_sale_price)}")
    return 0


def cmd_log_cost(args):
    """Add a cost entry to a vehicle."""
    book = load_records(args.data_file)
    vehicle = book.get_vehicle(args.vehicle_id)

    entry = CostEntry(
        type=args.type,
        date=args.date or date.today().isoformat(),
        amount=args.amount,
        mileage=args.mileage,
        vehicle_id=vehicle.id,
        description=args.description,
        vendor=args.vendor,
    )
    entry.validate()

    print(f"Adding cost entry to {vehicle.display_name}:")
    print(f"  Type:    {entry.type}")
    print(f"  Date:    {entry.date}")
    if entry.amount is not None:
        print(f"  Amount:  {format_cost(entry.amount)}")
    if entry.mileage is not None:
        print(f"  Mileage: {format_km(entry.mileage)}")
    if entry.vendor:
        print(f"  Vendor:  {entry.vendor}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    add_record(args.data_file, entry)
    print("Entry saved.")
    return 0


# =============================================================================
# Import and reminders
# =============================================================================


def cmd_import(args):
    """Import contracts from a JSON file."""
    try:
        with open(args.json_file) as fp:
            entries = json.load(fp)
    except (OSError, ValueError) as e:
        print(f"Error: cannot read {args.json_file}: {e}")
        return 1

    result = import_contracts(args.data_file, entries)
    print(f"Created: {result.created}")
    if result.errors:
        print(f"Errors: {len(result.errors)}")
        for error in result.errors:
            print(f"  row {error.row}: {error.error}")
    return 0 if not result.errors else 1


def cmd_remind(args):
    """Print the renewal reminder if one is due."""
    book = load_records(args.data_file)
    settings = book.settings
    now = datetime.now(timezone.utc)

    if not args.force and not reminder_due(settings, now):
        print(f"No reminder due (frequency: {settings.reminder_frequency}).")
        return 0

    matches = build_reminder(book.contracts, settings, now.date())
    if not matches:
        print("No upcoming renewals.")
        return 0

    print(format_reminder(matches))

    if args.dry_run:
        print()
        print("(dry run - no changes made)")
        return 0

    settings.last_reminder_sent = now.isoformat(timespec="seconds")
    save_settings(args.data_file, settings)
    return 0


# =============================================================================
# Main
# =============================================================================


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Household contracts, purchases and vehicle costs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/records.yaml contracts
  %(prog)s data/records.yaml contracts --category insurance --all
  %(prog)s data/records.yaml renewals --days 30
  %(prog)s data/records.yaml summary
  %(prog)s data/records.yaml vehicle <vehicle-id>
  %(prog)s data/records.yaml log-cost <vehicle-id> fuel --amount 65.20 \\
      --mileage 48210
  %(prog)s data/records.yaml import contracts.json
  %(prog)s data/records.yaml remind --dry-run
""",
    )
    parser.add_argument("data_file", type=Path, help="Path to records YAML file")
    parser.add_argument(
        "--log-level", default="warning", help="Log level (default: warning)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    contracts_parser = subparsers.add_parser(
        "contracts", help="List contracts with their cancellation deadlines"
    )
    contracts_parser.add_argument(
        "--category", type=str, help="Filter to categories containing text"
    )
    contracts_parser.add_argument(
        "--all", action="store_true", help="Include expired fixed-term contracts"
    )

    renewals_parser = subparsers.add_parser(
        "renewals", help="Show contracts with upcoming cancellation deadlines"
    )
    renewals_parser.add_argument(
        "--days", type=int, help="Look-ahead window in days (default: settings)"
    )

    subparsers.add_parser("summary", help="Cost totals per category")
    subparsers.add_parser("purchases", help="List purchases")
    subparsers.add_parser("vehicles", help="List vehicles")

    vehicle_parser = subparsers.add_parser("vehicle", help="Show a vehicle cost summary")
    vehicle_parser.add_argument("vehicle_id", type=str, help="Vehicle id")

    log_parser = subparsers.add_parser("log-cost", help="Add a vehicle cost entry")
    log_parser.add_argument("vehicle_id", type=str, help="Vehicle id")
    log_parser.add_argument("type", choices=CostType.values(), help="Cost type")
    log_parser.add_argument(
        "--date", type=str, help="Date in YYYY-MM-DD format (default: today)"
    )
    log_parser.add_argument("--amount", type=float, help="Amount paid")
    log_parser.add_argument("--mileage", type=float, help="Odometer reading")
    log_parser.add_argument("--description", type=str, help="Description")
    log_parser.add_argument("--vendor", type=str, help="Vendor or workshop")
    log_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be added without saving"
    )

    import_parser = subparsers.add_parser("import", help="Import contracts from JSON")
    import_parser.add_argument("json_file", type=Path, help="JSON list of contracts")

    remind_parser = subparsers.add_parser(
        "remind", help="Print the renewal reminder if one is due"
    )
    remind_parser.add_argument(
        "--force", action="store_true", help="Ignore the reminder frequency"
    )
    remind_parser.add_argument(
        "--dry-run", action="store_true", help="Do not record the reminder as sent"
    )

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if not args.data_file.exists():
        print(f"Error: File not found: {args.data_file}")
        return 1

    commands = {
        "contracts": cmd_contracts,
        "renewals": cmd_renewals,
        "summary": cmd_summary,
        "purchases": cmd_purchases,
        "vehicles": cmd_vehicles,
        "vehicle": cmd_vehicle,
        "log-cost": cmd_log_cost,
        "import": cmd_import,
        "remind": cmd_remind,
    }
    try:
        return commands[args.command](args)
    except RecordsError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
