from flask import Blueprint, current_app, request, session, jsonify

from dinnersafari.extensions import db
from dinnersafari.models import Couple, Envelope, AFTERPARTY
from dinnersafari.helpers.afterparty import afterparty_state, afterparty_timestamps, afterparty_next_reveal, narrative_label
from dinnersafari.helpers.envelope_state import envelope_state, envelope_timestamps, next_reveal
from dinnersafari.helpers.event import get_event_or_404, organizer_required
from dinnersafari.helpers.time import resolve_now, to_iso, utc_now
from dinnersafari.helpers.tokens import create_token, PERSON_TYPES

admin_bp = Blueprint("admin", __name__)

@admin_bp.route("/admin/api/login", methods=["POST"])
def admin_login():
    data = request.get_json(force=True, silent=True) or {}
    password = data.get("password", "")

    if password != current_app.config["ADMIN_PASSWORD"]:
        return jsonify({"ok": False, "error": "Incorrect admin password."}), 403

    session["admin_ok"] = True
    return jsonify({"ok": True})


@admin_bp.route("/admin/api/logout", methods=["POST"])
def admin_logout():
    session.pop("admin_ok", None)
    return jsonify({"ok": True})


@admin_bp.route("/admin/api/event/<int:event_id>/afterparty", methods=["POST"])
@organizer_required
def admin_afterparty_action(event_id):
    """
    Manually drive the afterparty reveal.

    - tease  -> afterparty_teasing_at = now
    - reveal -> teasing + revealed = now
    - reset  -> clear both, back to the automatic schedule

    This writes event configuration only; envelope state is still derived
    on read.
    """
    event = get_event_or_404(event_id)

    data = request.get_json(force=True, silent=True) or {}
    action = (data.get("action") or "").strip().lower()

    if action not in ("tease", "reveal", "reset"):
        return jsonify({"ok": False, "error": "Ogiltig action. Välj tease, reveal eller reset."}), 400

    now = utc_now()

    if action == "tease":
        event.afterparty_teasing_at = now
    elif action == "reveal":
        event.afterparty_teasing_at = event.afterparty_teasing_at or now
        event.afterparty_revealed_at = now
    else:
        event.afterparty_teasing_at = None
        event.afterparty_revealed_at = None

    db.session.commit()

    current_app.logger.info(
        "Afterparty %s event_id=%s teasing_at=%s revealed_at=%s",
        action, event.id, event.afterparty_teasing_at, event.afterparty_revealed_at,
    )

    return jsonify({
        "ok": True,
        "action": action,
        "afterparty_teasing_at": to_iso(event.afterparty_teasing_at),
        "afterparty_revealed_at": to_iso(event.afterparty_revealed_at),
    })


@admin_bp.route("/admin/api/event/<int:event_id>/envelopes")
@organizer_required
def admin_envelope_overview(event_id):
    """
    Organizer overview: where every envelope of the active plan stands.

    Accepts ?simulateTime= like the guest endpoint, and uses the same state
    calculation so the preview can't drift from what guests see.
    """
    event = get_event_or_404(event_id)

    try:
        now = resolve_now(request.args.get("simulateTime"))
    except ValueError:
        return jsonify({"ok": False, "error": "Invalid simulateTime"}), 400

    if not event.active_match_plan_id:
        return jsonify({"ok": True, "server_time": to_iso(now), "rows": []})

    envelopes = (
        Envelope.query
        .filter(
            Envelope.match_plan_id == event.active_match_plan_id,
            Envelope.cancelled.is_(False),
        )
        .order_by(Envelope.couple_id.asc(), Envelope.id.asc())
        .all()
    )

    tz_name = current_app.config["EVENT_TIMEZONE"]
    tease_minutes = current_app.config["AFTERPARTY_TEASE_MINUTES"]

    rows = []
    for e in envelopes:
        if e.course == AFTERPARTY:
            ts = afterparty_timestamps(event, e, tz_name, tease_minutes)
            state = afterparty_state(ts, now)
            nxt = afterparty_next_reveal(ts, state, now)
            state = narrative_label(state)
        else:
            state = envelope_state(e, now)
            nxt = next_reveal(envelope_timestamps(e), state, now) if e.host_couple_id else None

        rows.append({
            "envelope_id": e.id,
            "couple_id": e.couple_id,
            "course": e.course,
            "host_couple_id": e.host_couple_id,
            "state": state,
            "next_reveal": nxt,
        })

    return jsonify({"ok": True, "server_time": to_iso(now), "rows": rows})


@admin_bp.route("/admin/api/event/<int:event_id>/couple/<int:couple_id>/link")
@organizer_required
def admin_couple_link(event_id, couple_id):
    """Signed token for a couple's live envelope page (for previews / resends)."""
    event = get_event_or_404(event_id)
    couple = Couple.query.filter_by(id=couple_id, event_id=event.id).first_or_404()

    person = request.args.get("person", "invited")
    if person not in PERSON_TYPES:
        return jsonify({"ok": False, "error": "person must be invited or partner"}), 400

    token = create_token(couple.id, person, secret=current_app.config["TOKEN_SECRET"])

    return jsonify({
        "ok": True,
        "couple_id": couple.id,
        "person": person,
        "token": token,
        "status_url": f"/api/envelope/status?eventId={event.id}&token={token}",
    })
