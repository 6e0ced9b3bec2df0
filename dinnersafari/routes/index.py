from flask import Blueprint, jsonify

from dinnersafari.helpers.time import to_iso, utc_now

index_bp = Blueprint("index", __name__)

@index_bp.route("/healthz")
def healthz():
    """Liveness probe; server_time lets ops spot clock drift."""
    return jsonify({"ok": True, "server_time": to_iso(utc_now())})
