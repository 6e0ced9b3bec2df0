from functools import wraps
from flask import session, jsonify

from dinnersafari.models import Event, Couple

def get_event_or_404(event_id: int) -> Event:
    return Event.query.get_or_404(event_id)

def get_event_couple(event_id: int, couple_id: int):
    """
    Return (event, couple) only if the couple really belongs to that event.
    Either may be None.
    """
    event = Event.query.get(event_id)
    if not event:
        return None, None

    couple = (
        Couple.query
        .filter(
            Couple.id == couple_id,
            Couple.event_id == event.id,
        )
        .first()
    )
    return event, couple

def is_organizer() -> bool:
    """True once the organizer password has been entered this session."""
    return bool(session.get("admin_ok"))

def organizer_required(view):
    """
    JSON-API guard: 403 unless the caller has an organizer session.
    """
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not is_organizer():
            return jsonify({"ok": False, "error": "Not admin"}), 403
        return view(*args, **kwargs)
    return wrapped
