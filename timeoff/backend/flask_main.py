"""
Main Flask application - Controller layer.
Handles routes, request validation, and delegates to the ledger and service layers.
"""
import logging
from datetime import date
from flask import Flask, request, jsonify
from flask.json.provider import DefaultJSONProvider
from flask_cors import CORS
from pydantic import BaseModel

# Import our service layers
import config
import db_service
import leave_service
from ledger import LeaveLedger
from planning_service import AdvisorBusyError, PlanningAdvisor, create_planning_advisor_from_env
from utils import parse_date

# Logging (stdlib only)
if not logging.getLogger().handlers:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
logger = logging.getLogger(__name__)


# Custom JSON encoder to handle date objects and pydantic records
class CustomJSONProvider(DefaultJSONProvider):
    def default(self, obj):
        if isinstance(obj, BaseModel):
            return obj.model_dump(mode="json", by_alias=True)
        if isinstance(obj, date):
            return obj.isoformat()
        return super().default(obj)


def _error(message, status=400):
    return jsonify({"error": message}), status


def _body():
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def _field(body, key, default=None):
    """String value from a JSON body; other JSON types are a client error"""
    value = body.get(key, default)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"{key} must be a string")
    return value


def create_app(ledger: LeaveLedger, advisor: PlanningAdvisor = None) -> Flask:
    app = Flask(__name__)
    app.json = CustomJSONProvider(app)
    if advisor is None:
        advisor = PlanningAdvisor(client=None)

    # Enable CORS for the frontend dev server
    CORS(app,
         resources={r"/*": {"origins": config.FRONTEND_ORIGIN}},
         allow_headers=["Content-Type"],
         expose_headers=["Content-Type"])

    # ==================== API ENDPOINTS ====================

    @app.route("/")
    def root():
        return jsonify({"message": "Time Off Tracker API", "advisor_enabled": advisor.enabled})

    # ==================== LEAVE ENDPOINTS ====================

    @app.route("/entries")
    def get_entries():
        """List leave entries, newest first unless ?order=calendar"""
        try:
            entries = leave_service.list_leave_entries(ledger, request.args.get("order", "recent"))
        except ValueError as e:
            return _error(str(e))
        return jsonify(entries)

    @app.route("/entries", methods=["POST"])
    def create_entry():
        """Create a new leave entry"""
        body = _body()
        try:
            entry, preview = leave_service.create_leave_entry(
                ledger,
                _field(body, "type", "VACATION"),
                _field(body, "start_date"),
                _field(body, "end_date"),
                _field(body, "description", ""),
            )
        except ValueError as e:
            return _error(str(e))

        payload = {"entry": entry, "warning": None}
        if preview.over_quota:
            payload["warning"] = (
                f"This request exceeds your remaining {preview.type.value.lower()} quota "
                f"({preview.business_days} requested, {preview.remaining} remaining)"
            )
        return jsonify(payload), 201

    @app.route("/entries/<entry_id>", methods=["DELETE"])
    def delete_entry(entry_id):
        """Delete a leave entry; deleting an unknown id succeeds"""
        removed = leave_service.delete_leave_entry(ledger, entry_id)
        return jsonify({"deleted": removed})

    @app.route("/entries/calculate-days", methods=["POST"])
    def calculate_days():
        """Preview business days and quota impact for a date range"""
        body = _body()
        try:
            preview = leave_service.preview_leave(
                ledger,
                _field(body, "type", "VACATION"),
                _field(body, "start_date"),
                _field(body, "end_date"),
            )
        except ValueError as e:
            return _error(str(e))
        return jsonify(preview)

    @app.route("/quota")
    def get_quota():
        return jsonify(leave_service.get_quota_summary(ledger))

    # ==================== HOLIDAY ENDPOINTS ====================

    @app.route("/holidays")
    def get_holidays():
        return jsonify(leave_service.list_public_holidays(ledger))

    @app.route("/holidays", methods=["POST"])
    def add_holiday():
        body = _body()
        try:
            holiday = leave_service.add_public_holiday(ledger, _field(body, "date"), _field(body, "name"))
        except ValueError as e:
            return _error(str(e))
        return jsonify(holiday), 201

    @app.route("/holidays/<holiday_id>", methods=["DELETE"])
    def remove_holiday(holiday_id):
        if not leave_service.remove_public_holiday(ledger, holiday_id):
            return _error("Holiday not found", 404)
        return jsonify({"message": "Holiday removed successfully"})

    # ==================== CALENDAR ENDPOINTS ====================

    @app.route("/calendar")
    def get_calendar():
        """Month grid; ?month=YYYY-MM plus the current selection as ?start=&end="""
        month = request.args.get("month")
        start = request.args.get("start") or None
        end = request.args.get("end") or None
        try:
            reference = parse_date(f"{month}-01") if month else date.today()
            if start:
                parse_date(start)
            if end:
                parse_date(end)
            calendar = leave_service.build_calendar_month(ledger, reference, start, end)
        except ValueError as e:
            return _error(str(e))
        return jsonify(calendar)

    @app.route("/calendar/select", methods=["POST"])
    def select_date():
        body = _body()
        try:
            clicked = _field(body, "date")
            if not clicked:
                return _error("Missing date")
            start, end = leave_service.select_calendar_date(
                _field(body, "start_date"), _field(body, "end_date"), clicked
            )
        except ValueError as e:
            return _error(str(e))
        return jsonify({"start_date": start, "end_date": end})

    # ==================== PLANNING ADVISOR ====================

    @app.route("/advice", methods=["POST"])
    def get_advice():
        """Ask the planning advisor; null advice means it is unavailable"""
        if advisor.in_flight:
            return _error("A planning request is already in progress", 409)
        try:
            advice = advisor.get_smart_leave_planning(
                ledger.entries, ledger.remaining_quota(), ledger.holidays_by_date()
            )
        except AdvisorBusyError as e:
            return _error(str(e), 409)
        return jsonify({"advice": advice, "enabled": advisor.enabled})

    return app


if __name__ == "__main__":
    db_service.init_db()
    db_service.ensure_schema()
    app = create_app(LeaveLedger.load(db_service), create_planning_advisor_from_env())
    app.run(host="0.0.0.0", port=config.FLASK_MAIN_PORT, debug=True)
