from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from ..game import service

bp = Blueprint("rooms", __name__)


def _registry():
    return current_app.extensions["impostor"]["registry"]


@bp.get("/rooms")
def list_rooms():
    return jsonify({"rooms": _registry().list_open_rooms()})


@bp.get("/rooms/<code>")
def get_room(code: str):
    room = _registry().get_room(code)
    if not room:
        return jsonify({"error": "room_not_found"}), 404
    return jsonify(service.room_view(room))
