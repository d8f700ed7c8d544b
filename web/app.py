"""Flask JSON API for contracts, purchases and vehicle costs."""

import json
import os
from datetime import date
from pathlib import Path

import structlog
from flask import Flask, jsonify, request

# Add parent directory to path for records imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from records import (
    Contract,
    NotFoundError,
    ValidationError,
    add_record,
    delete_record,
    init_records,
    load_records,
    record_from_dict,
    record_to_dict,
    save_settings,
    update_record,
)
from records.importer import import_contracts
from records.loader import settings_from_dict, settings_to_dict
from records.logging_config import configure_logging
from records.summary import parse_renewal_days

logger = structlog.get_logger()

# Default data file (relative to project root)
DEFAULT_DATA_FILE = Path(__file__).parent.parent / "data" / "records.yaml"


def contract_view(contract: Contract, today: date) -> dict:
    """Contract dict with its calculated cancellation date and expiry."""
    view = record_to_dict(contract)
    view.update(contract.cancellation_info(today).to_dict())
    return view


def read_json(section: str):
    """Parse the request body into a record of the given section."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("invalid request body")
    return record_from_dict(section, data)


def create_app(data_file=None) -> Flask:
    app = Flask(__name__)
    app.secret_key = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-prod")
    app.config["DATA_FILE"] = Path(
        data_file or os.environ.get("RECORDS_DATA_FILE", DEFAULT_DATA_FILE)
    )

    configure_logging(
        os.environ.get("LOG_LEVEL", "info"), os.environ.get("LOG_FORMAT", "text")
    )

    if not app.config["DATA_FILE"].exists():
        init_records(app.config["DATA_FILE"])

    def data_file_path() -> Path:
        return app.config["DATA_FILE"]

    def load():
        return load_records(data_file_path())

    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(NotFoundError)
    def handle_not_found(e):
        return jsonify({"error": "not found"}), 404

    @app.errorhandler(404)
    def handle_unknown_route(e):
        return jsonify({"error": "not found"}), 404

    @app.errorhandler(500)
    def handle_internal_error(e):
        logger.error("request failed", path=request.path, error=str(e))
        return jsonify({"error": "internal error"}), 500

    @app.get("/healthz")
    def healthz():
        return jsonify({"status": "ok"})

    # --------------------
    # Categories
    # --------------------

    @app.get("/api/categories")
    def list_categories():
        module = request.args.get("module") or None
        return jsonify([record_to_dict(c) for c in load().get_categories(module)])

    @app.post("/api/categories")
    def create_category():
        category = read_json("categories")
        category = add_record(data_file_path(), category)
        return jsonify(record_to_dict(category)), 201

    @app.put("/api/categories/<category_id>")
    def update_category(category_id: str):
        existing = load().get_category(category_id)
        category = read_json("categories")
        category.module = existing.module
        category = update_record(data_file_path(), category_id, category)
        return jsonify(record_to_dict(category))

    @app.delete("/api/categories/<category_id>")
    def delete_category(category_id: str):
        delete_record(data_file_path(), "categories", category_id)
        return "", 204

    # --------------------
    # Contracts
    # --------------------

    @app.get("/api/contracts")
    def list_contracts():
        today = date.today()
        return jsonify([contract_view(c, today) for c in load().contracts])

    @app.get("/api/categories/<category_id>/contracts")
    def list_category_contracts(category_id: str):
        book = load()
        book.get_category(category_id)
        today = date.today()
        return jsonify(
            [contract_view(c, today) for c in book.get_contracts_for_category(category_id)]
        )

    @app.post("/api/categories/<category_id>/contracts")
    def create_contract(category_id: str):
        load().get_category(category_id)
        contract = read_json("contracts")
        contract.category_id = category_id
        contract = add_record(data_file_path(), contract)
        return jsonify(contract_view(contract, date.today())), 201

    @app.get("/api/contracts/<contract_id>")
    def get_contract(contract_id: str):
        return jsonify(contract_view(load().get_contract(contract_id), date.today()))

    @app.put("/api/contracts/<contract_id>")
    def update_contract(contract_id: str):
        contract = read_json("contracts")
        contract = update_record(data_file_path(), contract_id, contract)
        return jsonify(contract_view(contract, date.today()))

    @app.delete("/api/contracts/<contract_id>")
    def delete_contract(contract_id: str):
        delete_record(data_file_path(), "contracts", contract_id)
        return "", 204

    @app.post("/api/contracts/import")
    def import_contract_file():
        upload = request.files.get("file")
        if upload is not None:
            try:
                entries = json.load(upload.stream)
            except ValueError as e:
                raise ValidationError(f"invalid JSON: {e}")
        else:
            entries = request.get_json(silent=True)
        if entries is None:
            raise ValidationError("missing import data")
        result = import_contracts(data_file_path(), entries)
        return jsonify(result.to_dict())

    @app.get("/api/contracts/upcoming-renewals")
    def list_upcoming_renewals():
        days = parse_renewal_days(request.args.get("days"))
        today = date.today()
        upcoming = load().upcoming_renewals(today, days)
        return jsonify([contract_view(c, today) for c, _ in upcoming])

    @app.get("/api/summary")
    def contracts_summary():
        return jsonify(load().contract_summary().to_dict())

    # --------------------
    # Purchases
    # --------------------

    @app.get("/api/purchases")
    def list_purchases():
        return jsonify([record_to_dict(p) for p in load().purchases])

    @app.get("/api/purchases/summary")
    def purchases_summary():
        return jsonify(load().purchase_summary().to_dict())

    @app.get("/api/categories/<category_id>/purchases")
    def list_category_purchases(category_id: str):
        book = load()
        book.get_category(category_id)
        return jsonify(
            [record_to_dict(p) for p in book.get_purchases_for_category(category_id)]
        )

    @app.post("/api/categories/<category_id>/purchases")
    def create_purchase(category_id: str):
        load().get_category(category_id)
        purchase = read_json("purchases")
        purchase.category_id = category_id
        purchase = add_record(data_file_path(), purchase)
        return jsonify(record_to_dict(purchase)), 201

    @app.get("/api/purchases/<purchase_id>")
    def get_purchase(purchase_id: str):
        return jsonify(record_to_dict(load().get_purchase(purchase_id)))

    @app.put("/api/purchases/<purchase_id>")
    def update_purchase(purchase_id: str):
        purchase = update_record(data_file_path(), purchase_id, read_json("purchases"))
        return jsonify(record_to_dict(purchase))

    @app.delete("/api/purchases/<purchase_id>")
    def delete_purchase(purchase_id: str):
        delete_record(data_file_path(), "purchases", purchase_id)
        return "", 204

    # --------------------
    # Vehicles and cost entries
    # --------------------

    @app.get("/api/vehicles")
    def list_vehicles():
        return jsonify([record_to_dict(v) for v in load().vehicles])

    @app.post("/api/vehicles")
    def create_vehicle():
        vehicle = add_record(data_file_path(), read_json("vehicles"))
        return jsonify(record_to_dict(vehicle)), 201

    @app.get("/api/vehicles/<vehicle_id>")
    def get_vehicle(vehicle_id: str):
        return jsonify(record_to_dict(load().get_vehicle(vehicle_id)))

    @app.put("/api/vehicles/<vehicle_id>")
    def update_vehicle(vehicle_id: str):
        vehicle = update_record(data_file_path(), vehicle_id, read_json("vehicles"))
        return jsonify(record_to_dict(vehicle))

    @app.delete("/api/vehicles/<vehicle_id>")
    def delete_vehicle(vehicle_id: str):
        delete_record(data_file_path(), "vehicles", vehicle_id)
        return "", 204

    @app.get("/api/vehicles/<vehicle_id>/summary")
    def vehicle_summary(vehicle_id: str):
        return jsonify(load().vehicle_summary(vehicle_id, date.today()).to_dict())

    @app.get("/api/vehicles/<vehicle_id>/costs")
    def list_costs(vehicle_id: str):
        book = load()
        book.get_vehicle(vehicle_id)
        return jsonify(
            [record_to_dict(e) for e in book.get_cost_entries_for_vehicle(vehicle_id)]
        )

    @app.post("/api/vehicles/<vehicle_id>/costs")
    def create_cost(vehicle_id: str):
        load().get_vehicle(vehicle_id)
        entry = read_json("costEntries")
        entry.vehicle_id = vehicle_id
        entry = add_record(data_file_path(), entry)
        return jsonify(record_to_dict(entry)), 201

    @app.put("/api/vehicles/<vehicle_id>/costs/<entry_id>")
    def update_cost(vehicle_id: str, entry_id: str):
        existing = load().get_cost_entry(entry_id)
        if existing.vehicle_id != vehicle_id:
            raise NotFoundError(f"cost entry '{entry_id}' not found")
        entry = read_json("costEntries")
        entry.vehicle_id = vehicle_id
        entry = update_record(data_file_path(), entry_id, entry)
        return jsonify(record_to_dict(entry))

    @app.delete("/api/vehicles/<vehicle_id>/costs/<entry_id>")
    def delete_cost(vehicle_id: str, entry_id: str):
        existing = load().get_cost_entry(entry_id)
        if existing.vehicle_id != vehicle_id:
            raise NotFoundError(f"cost entry '{entry_id}' not found")
        delete_record(data_file_path(), "costEntries", entry_id)
        return "", 204

    # --------------------
    # Settings
    # --------------------

    @app.get("/api/settings")
    def get_settings():
        settings = settings_to_dict(load().settings)
        settings.pop("lastReminderSent", None)
        return jsonify(settings)

    @app.put("/api/settings")
    def update_settings():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("invalid request body")
        settings = settings_from_dict(data)
        settings.last_reminder_sent = load().settings.last_reminder_sent
        save_settings(data_file_path(), settings)
        result = settings_to_dict(settings)
        result.pop("lastReminderSent", None)
        return jsonify(result)

    return app


if __name__ == "__main__":
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    create_app().run(debug=True, host="0.0.0.0", port=5001)
