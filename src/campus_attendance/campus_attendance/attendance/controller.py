from __future__ import annotations

import io
import logging

import qrcode
from flask import Flask, request, send_file, session
from PIL import Image

from ..common.datetime_utils import local_date_string, now_local, parse_iso_date
from ..common.web import account_required, current_account, json_body, ok, roles_required, to_jsonable
from ..core.constants import NOT_AVAILABLE
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from ..container import Container
from ..people.roster import RosterFilter
from .service import ScanResult

logger = logging.getLogger(__name__)


def _scan_json(result: ScanResult) -> dict:
    return {
        "type": result.log.type.value,
        "person": {
            "person_id": result.person.person_id,
            "name": result.person.name,
            "role": result.person.role.value,
            "dept": result.person.dept,
            "roll_number": result.person.roll_number,
            "source": result.person.source,
            "is_blocked": result.person.is_blocked,
        },
        "log": to_jsonable(result.log),
    }


def register(app: Flask, container: Container) -> None:
    def _date_arg() -> str:
        value = request.args.get("date")
        if not value:
            return local_date_string(now_local())
        try:
            return parse_iso_date(value).isoformat()
        except ValueError:
            raise ValidationError("date must be YYYY-MM-DD")

    def _scan(code: str):
        result = container.attendance_service.process_scan(code, recorder_id=str(session["account_id"]))
        return ok(f"{result.log.type.value}: {result.person.name}", **_scan_json(result))

    @app.route("/api/scan", methods=["POST"], endpoint="api_scan")
    @roles_required(Role.SECURITY)
    def api_scan():
        data = json_body()
        code = str(data.get("code") or "").strip()
        if not code:
            raise ValidationError("Scanned code is empty")
        return _scan(code)

    @app.route("/api/scan/image", methods=["POST"], endpoint="api_scan_image")
    @roles_required(Role.SECURITY)
    def api_scan_image():
        """Decode a badge photo (QR or barcode) and run the regular scan."""

        file = request.files.get("image")
        if not file:
            raise ValidationError("No image uploaded")

        try:
            img = Image.open(file.stream).convert("RGB")
        except Exception:
            raise ValidationError("Unreadable image")

        # zbar is a native library; load it only when an image is decoded.
        from pyzbar.pyzbar import decode as pyzbar_decode

        symbols = pyzbar_decode(img)
        if not symbols:
            raise NotFoundError("No QR code or barcode found in image")

        code = symbols[0].data.decode("utf-8", errors="replace").strip()
        return _scan(code)

    @app.route("/api/me/badge.png", methods=["GET"], endpoint="api_me_badge")
    @roles_required(Role.STUDENT, Role.FACULTY)
    def api_me_badge():
        me = current_account()
        profile = container.profile_service.get_for_account(
            role=me["role"], account_id=me["account_id"], email=me.get("email")
        )
        if not profile:
            raise NotFoundError("No profile linked to this account")

        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=2,
        )
        qr.add_data(profile.barcode_id or profile.profile_id)
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white")

        buf = io.BytesIO()
        img.save(buf, format="PNG")
        buf.seek(0)
        return send_file(buf, mimetype="image/png")

    @app.route("/api/me/history", methods=["GET"], endpoint="api_me_history")
    @account_required
    def api_me_history():
        limit = request.args.get("limit", type=int) or 30
        logs = container.attendance_service.history(str(session["account_id"]), limit=limit)
        return ok(logs=to_jsonable(logs))

    @app.route("/api/me/status", methods=["GET"], endpoint="api_me_status")
    @account_required
    def api_me_status():
        status = container.attendance_service.today_status(str(session["account_id"]))
        return ok(status=status.value)

    @app.route("/api/logs", methods=["GET"], endpoint="api_logs")
    @roles_required(Role.SECURITY, Role.HOD)
    def api_logs():
        logs = container.attendance_service.gate_logs(_date_arg(), direction=request.args.get("direction"))
        return ok(logs=to_jsonable(logs))

    @app.route("/api/alerts", methods=["GET"], endpoint="api_alerts")
    @roles_required(Role.SECURITY, Role.HOD)
    def api_alerts():
        alerts = container.attendance_service.alerts_for(_date_arg())
        return ok(alerts=to_jsonable(alerts))

    @app.route("/api/summary", methods=["GET"], endpoint="api_summary")
    @roles_required(Role.SECURITY, Role.HOD)
    def api_summary():
        return ok(summary=to_jsonable(container.attendance_service.daily_summary(_date_arg())))

    @app.route("/api/logs/purge", methods=["POST"], endpoint="api_logs_purge")
    @roles_required(Role.SECURITY, Role.HOD)
    def api_logs_purge():
        deleted = container.attendance_service.purge_all()
        logger.warning("Attendance logs purged by %s", session.get("account_id"))
        return ok("All logs cleared", deleted=deleted)

    @app.route("/api/roster", methods=["GET"], endpoint="api_roster")
    @roles_required(Role.HOD)
    def api_roster():
        me = current_account()
        profile = container.profile_service.get_for_account(
            role=Role.HOD, account_id=me["account_id"], email=me.get("email")
        )
        # An HOD with a department only ever sees that department.
        if profile and profile.dept and profile.dept != NOT_AVAILABLE:
            dept = profile.dept
        else:
            dept = request.args.get("dept") or ""

        flt = RosterFilter(
            dept=dept,
            branch=request.args.get("branch") or None,
            year=request.args.get("year") or None,
            section=request.args.get("section") or None,
            search=request.args.get("q", ""),
        )
        rows = container.attendance_status_service.roster_status(flt)
        return ok(
            rows=[
                {
                    "roll_number": r.student.roll_number,
                    "name": r.student.name,
                    "dept": r.student.dept,
                    "year": r.student.year,
                    "section": r.student.section,
                    "status": r.status.value,
                    "last_seen": to_jsonable(r.last_log.timestamp) if r.last_log else None,
                }
                for r in rows
            ]
        )
