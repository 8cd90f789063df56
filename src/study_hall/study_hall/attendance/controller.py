from __future__ import annotations

import io
import logging

import qrcode
from flask import Flask, jsonify, request, send_file

from ..common.datetime_utils import YearMonth, as_date, parse_year_month
from ..core.constants import STUDY_HOURS_DECIMALS
from ..core.enums import ScanOutcomeKind
from ..core.exceptions import (
    AlreadyCheckedIn,
    AlreadyCheckedOut,
    DomainError,
    InvalidSessionTime,
    RecordNotFound,
    StorageUnavailable,
    ValidationError,
)
from ..container import Container
from .gateway import ScanOutcome
from .model import SeatSnapshot
from .scan_decoder import decode_qr_payload

logger = logging.getLogger(__name__)

_OUTCOME_STATUS = {
    ScanOutcomeKind.CHECKED_IN: 200,
    ScanOutcomeKind.ALREADY_ACTIVE: 200,
    ScanOutcomeKind.INVALID_PAYLOAD: 400,
    ScanOutcomeKind.IGNORED: 202,
}

_ERROR_STATUS = (
    (ValidationError, 400),
    (RecordNotFound, 404),
    (AlreadyCheckedOut, 409),
    (AlreadyCheckedIn, 409),
    (InvalidSessionTime, 409),
    (StorageUnavailable, 503),
)


def _error_status(kind: str | None) -> int:
    for exc_type, status in _ERROR_STATUS:
        if exc_type.kind == kind:
            return status
    return 500


def register(app: Flask, container: Container) -> None:
    tracker = container.session_tracker
    gateway = container.checkin_gateway
    aggregator = container.aggregator

    def _domain_error(e: DomainError):
        status = _error_status(e.kind)
        if status >= 500:
            logger.error("Attendance request failed: %s", e)
        return jsonify({"success": False, "error": e.kind, "message": str(e)}), status

    def _outcome_response(outcome: ScanOutcome):
        status = _OUTCOME_STATUS.get(outcome.kind) or _error_status(outcome.error_kind)
        return jsonify({
            "success": outcome.ok,
            "outcome": outcome.kind.value,
            "error": outcome.error_kind,
            "message": outcome.message,
            "record": outcome.record.to_dict() if outcome.record else None,
        }), status

    def _seat_from(data) -> SeatSnapshot:
        return SeatSnapshot(
            seat_number=(data.get("seat_number") or None),
            shift=(data.get("shift") or None),
        )

    @app.route("/api/attendance/scan", methods=["POST"], endpoint="api_attendance_scan")
    def api_attendance_scan():
        """Check in by the text decoded from the desk QR code."""
        data = request.get_json(silent=True) or {}
        outcome = gateway.handle_scan(data.get("qr_code"), str(data.get("student_id") or ""), seat=_seat_from(data))
        return _outcome_response(outcome)

    @app.route("/api/attendance/scan/image", methods=["POST"], endpoint="api_attendance_scan_image")
    def api_attendance_scan_image():
        """Accept an uploaded camera frame, decode the QR code and check in."""
        file = request.files.get("image")
        if not file:
            return jsonify({"success": False, "error": "validation", "message": "No image uploaded"}), 400

        payload = decode_qr_payload(file.stream)
        outcome = gateway.handle_scan(payload, str(request.form.get("student_id") or ""), seat=_seat_from(request.form))
        return _outcome_response(outcome)

    @app.route("/api/attendance/<record_id>/checkout", methods=["POST"], endpoint="api_attendance_checkout")
    def api_attendance_checkout(record_id: str):
        try:
            record = tracker.check_out(record_id)
        except DomainError as e:
            return _domain_error(e)
        return jsonify({"success": True, "message": "Checked out.", "record": record.to_dict()}), 200

    @app.route("/api/attendance/checkout", methods=["POST"], endpoint="api_attendance_checkout_active")
    def api_attendance_checkout_active():
        data = request.get_json(silent=True) or {}
        try:
            record = tracker.check_out_active(str(data.get("student_id") or ""))
        except DomainError as e:
            return _domain_error(e)
        return jsonify({"success": True, "message": "Checked out.", "record": record.to_dict()}), 200

    @app.route("/api/attendance/active/<student_id>", methods=["GET"], endpoint="api_attendance_active")
    def api_attendance_active(student_id: str):
        try:
            record = tracker.get_active_session(student_id)
        except DomainError as e:
            return _domain_error(e)
        return jsonify({
            "success": True,
            "checked_in": record is not None,
            "record": record.to_dict() if record else None,
        }), 200

    @app.route("/api/attendance/daily", methods=["GET"], endpoint="api_attendance_daily")
    def api_attendance_daily():
        """Attendance for one calendar day; all members unless student_id is given."""
        try:
            raw_date = request.args.get("date")
            day = as_date(raw_date) if raw_date else container.clock.now().date()
            records = aggregator.daily_detail(day, request.args.get("student_id") or None)
        except DomainError as e:
            return _domain_error(e)
        return jsonify({
            "success": True,
            "date": day.isoformat(),
            "records": [r.to_dict() for r in records],
        }), 200

    @app.route("/api/attendance/monthly/<student_id>", methods=["GET"], endpoint="api_attendance_monthly")
    def api_attendance_monthly(student_id: str):
        try:
            raw_month = request.args.get("month")
            ym = parse_year_month(raw_month) if raw_month else YearMonth.of(container.clock.now())
            minutes = aggregator.monthly_study_minutes(student_id, ym)
        except DomainError as e:
            return _domain_error(e)
        return jsonify({
            "success": True,
            "student_id": student_id,
            "month": str(ym),
            "study_minutes": minutes,
            "study_hours": round(minutes / 60, STUDY_HOURS_DECIMALS),
        }), 200

    @app.route("/admin/qr/image", endpoint="admin_qr_image")
    def admin_qr_image():
        """Printable QR code for the library desk, encoding the check-in token."""
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=4,
        )
        qr.add_data(container.checkin_token)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        buf.seek(0)
        return send_file(buf, mimetype="image/png", download_name="checkin_qr.png")
