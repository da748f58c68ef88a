from __future__ import annotations

from typing import Any, Dict, Optional

from flask import Flask


def create_app(overrides: Optional[Dict[str, Any]] = None) -> Flask:
    app = Flask(__name__)
    app.config.setdefault("OFFLINE", False)
    app.config.setdefault("API_KEY", None)
    app.config.setdefault("MODEL_NAME", "gemini-2.5-flash")
    app.config.setdefault("TICK_RATE", 24)
    app.config.setdefault("SECRET_KEY", "dev-secret")
    if overrides:
        app.config.update(overrides)

    from .views import bp as views_bp

    app.register_blueprint(views_bp)
    return app
