"""
Development sink for Slack incoming-webhook posts.

Point SLACK_WEBHOOK_URL at ``http://localhost:8000/hook`` to watch the
notifier's output without a real Slack workspace. Accepted posts are answered
with the literal ``ok`` body Slack uses, so the notifier treats them as
delivered.
"""

from __future__ import annotations

import os
from datetime import datetime
from functools import wraps
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify, request

load_dotenv(Path(__file__).resolve().parent / ".env")

MAX_MESSAGES = 500

app = Flask(__name__)
app.config["WEBHOOK_TOKEN"] = os.getenv("WEBHOOK_TOKEN", "")

MESSAGES: list[dict] = []


def _now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


def require_token(fn):
    """Require ``Authorization: Bearer <WEBHOOK_TOKEN>`` when a token is configured."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if not app.config["WEBHOOK_TOKEN"]:
            return fn(*args, **kwargs)

        auth = request.headers.get("Authorization", "")
        if not auth.startswith("Bearer "):
            return "unauthorized", 401
        token = auth.removeprefix("Bearer ").strip()
        if token != app.config["WEBHOOK_TOKEN"]:
            return "invalid_token", 403
        return fn(*args, **kwargs)
    return wrapper


@app.post("/hook")
@require_token
def hook():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        # Slack answers malformed payloads with a plain-text error code
        return "invalid_payload", 400

    MESSAGES.append({"received_at": _now_iso(), "body": data})
    if len(MESSAGES) > MAX_MESSAGES:
        del MESSAGES[:-MAX_MESSAGES]

    app.logger.info("Webhook message received for channel %s", data.get("channel"))
    return "ok", 200, {"Content-Type": "text/plain"}


@app.get("/api/messages/recent")
@require_token
def api_recent():
    recent = list(reversed(MESSAGES[-200:]))
    return jsonify({"count": len(MESSAGES), "messages": recent}), 200


@app.get("/health")
def health():
    return jsonify({"status": "ok"}), 200


if __name__ == "__main__":
    app.run(host="127.0.0.1", port=int(os.getenv("WEBHOOK_PORT", "8000")), debug=False)
