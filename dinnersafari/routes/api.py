from flask import Blueprint, current_app, jsonify, make_response, request, session

from dinnersafari.helpers.envelope_status import build_envelope_status, load_snapshot
from dinnersafari.helpers.event import get_event_couple
from dinnersafari.helpers.time import resolve_now
from dinnersafari.helpers.tokens import access_from_params


api_bp = Blueprint("api", __name__)

@api_bp.route("/api/envelope/status")
def api_envelope_status():
    """
    Current state of every envelope for one couple.

    GET /api/envelope/status?eventId=1&token=<signed>
    Legacy: &coupleId=12[&person=partner] still works during migration.
    Organizers may add &simulateTime=2026-05-16T19:45:00Z to preview.

    The server decides everything; the client only renders what it gets.
    Nothing is stored: state is recomputed from the reveal timestamps on
    every call.
    """
    raw_event_id = (request.args.get("eventId") or "").strip()
    access = access_from_params(
        request.args,
        secret=current_app.config["TOKEN_SECRET"],
        expiry_days=current_app.config["TOKEN_EXPIRY_DAYS"],
    )

    if not raw_event_id or not access:
        return jsonify({"error": "Kunde inte identifiera deltagare. Välj ditt par först."}), 400

    try:
        event_id = int(raw_event_id)
    except ValueError:
        return jsonify({"error": "Invalid eventId"}), 400

    # ---- one "now" for the whole request ----
    simulate_time = request.args.get("simulateTime")
    if simulate_time and not session.get("admin_ok"):
        return jsonify({"error": "simulateTime is only available to organizers"}), 403

    try:
        now = resolve_now(simulate_time)
    except ValueError:
        return jsonify({"error": "Invalid simulateTime"}), 400

    event, couple = get_event_couple(event_id, access["couple_id"])
    if not event or not couple:
        return jsonify({"error": "Couple or event not found"}), 404

    try:
        snapshot = load_snapshot(event, couple.id)
        payload = build_envelope_status(
            snapshot,
            now,
            tz_name=current_app.config["EVENT_TIMEZONE"],
            tease_minutes=current_app.config["AFTERPARTY_TEASE_MINUTES"],
        )
    except Exception:
        current_app.logger.exception(
            "Envelope status failed event_id=%s couple_id=%s", event_id, couple.id
        )
        return jsonify({"error": "Internal server error"}), 500

    if simulate_time:
        current_app.logger.info(
            "Envelope preview event_id=%s couple_id=%s simulate_time=%s", event_id, couple.id, simulate_time
        )

    resp = make_response(jsonify(payload))
    resp.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
    resp.headers["Pragma"] = "no-cache"
    return resp
