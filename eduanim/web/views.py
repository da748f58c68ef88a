from __future__ import annotations

import json
from typing import Callable

from flask import Blueprint, current_app, jsonify, request

from ..gemini_client import GeminiClient
from ..script import OfflineProvider, ScriptProvider
from .sessions import PlayerSession, session_manager


bp = Blueprint("views", __name__)


def _provider_factory() -> Callable[[], ScriptProvider]:
    offline = bool(current_app.config["OFFLINE"])
    api_key = current_app.config["API_KEY"]
    model_name = current_app.config["MODEL_NAME"]

    def factory() -> ScriptProvider:
        if offline:
            return OfflineProvider()
        return GeminiClient(api_key=api_key, model_name=model_name)

    return factory


def _session_or_404(session_id: str):
    session = session_manager.get(session_id)
    if session is None:
        return None, (jsonify({"error": "not found"}), 404)
    return session, None


def _state(session: PlayerSession):
    return jsonify({"id": session.id, **session.studio.state()})


@bp.route("/api/sessions", methods=["POST"])
def create_session():
    session = session_manager.create(_provider_factory(), tick_rate=int(current_app.config["TICK_RATE"]))
    return jsonify({"id": session.id}), 201


@bp.route("/api/sessions/<session_id>", methods=["GET"])
def session_state(session_id: str):
    session, error = _session_or_404(session_id)
    if error:
        return error
    return _state(session)


@bp.route("/api/sessions/<session_id>", methods=["DELETE"])
def delete_session(session_id: str):
    if not session_manager.remove(session_id):
        return jsonify({"error": "not found"}), 404
    return "", 204


@bp.route("/api/sessions/<session_id>/generate", methods=["POST"])
def generate(session_id: str):
    session, error = _session_or_404(session_id)
    if error:
        return error
    payload = request.get_json(silent=True) or {}
    topic = str(payload.get("topic", "")).strip()
    if not topic:
        return jsonify({"error": "topic is required"}), 400
    if not session_manager.run_generation(session, topic):
        return jsonify({"error": "generation already running"}), 409
    return _state(session), 202


@bp.route("/api/sessions/<session_id>/<action>", methods=["POST"])
def transport(session_id: str, action: str):
    session, error = _session_or_404(session_id)
    if error:
        return error
    operations = {
        "play": session.studio.play,
        "pause": session.studio.pause,
        "toggle": session.studio.toggle,
        "restart": session.studio.restart,
    }
    operation = operations.get(action)
    if operation is None:
        return jsonify({"error": f"unknown action: {action}"}), 404
    operation()
    return _state(session)


@bp.route("/api/sessions/<session_id>/seek", methods=["POST"])
def seek(session_id: str):
    session, error = _session_or_404(session_id)
    if error:
        return error
    payload = request.get_json(silent=True) or {}
    try:
        percent = float(payload["progress"])
    except (KeyError, TypeError, ValueError):
        return jsonify({"error": "progress must be a number between 0 and 100"}), 400
    session.studio.seek(percent)
    return _state(session)


@bp.route("/api/sessions/<session_id>/scenes/<int:index>", methods=["POST"])
def jump_to_scene(session_id: str, index: int):
    session, error = _session_or_404(session_id)
    if error:
        return error
    session.studio.jump_to_scene(index)
    return _state(session)


@bp.route("/api/sessions/<session_id>/frame", methods=["GET"])
def frame(session_id: str):
    session, error = _session_or_404(session_id)
    if error:
        return error
    current = session.studio.frame()
    if current is None:
        return jsonify({"error": "no script loaded"}), 404
    return current_app.response_class(current.model_dump_json(), mimetype="application/json")


@bp.route("/api/sessions/<session_id>/script", methods=["GET"])
def script(session_id: str):
    session, error = _session_or_404(session_id)
    if error:
        return error
    loaded = session.studio.script
    if loaded is None:
        return jsonify({"error": "no script loaded"}), 404
    return jsonify(json.loads(loaded.to_json(indent=None)))
