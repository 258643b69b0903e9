from __future__ import annotations

from flask import Blueprint, current_app, jsonify

bp = Blueprint("stats", __name__)


@bp.get("/stats/<name>")
def player_stats(name: str):
    accounts = current_app.extensions["impostor"]["accounts"]
    return jsonify(accounts.stats(name.strip()))
