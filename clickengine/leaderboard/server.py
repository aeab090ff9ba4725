"""Flask app serving the shared high-score table."""

from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from clickengine.errors import InvalidScore, StorageError
from clickengine.leaderboard.store import TOP_LIMIT, LeaderboardStore

logger = logging.getLogger(__name__)

MAX_USERNAME_LENGTH = 255


def _error(message: str, status: int):
    return jsonify({"error": message}), status


def create_app(store: LeaderboardStore) -> Flask:
    """Create the leaderboard app around *store*."""
    app = Flask(__name__)
    app.config["LEADERBOARD_STORE"] = store

    @app.after_request
    def _cors(response):
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response

    @app.route("/leaderboard", methods=["GET", "POST", "OPTIONS"])
    def leaderboard():
        if request.method == "OPTIONS":
            return "", 204

        if request.method == "POST":
            data = request.get_json(silent=True)
            if not isinstance(data, dict) or "username" not in data or "score" not in data:
                logger.error("Invalid request data: %r", data)
                return _error("Invalid request", 400)

            username = data["username"]
            if not isinstance(username, str) or not username.strip():
                logger.error("Invalid username: %r", username)
                return _error("Invalid username", 400)
            username = username.strip()
            if len(username) > MAX_USERNAME_LENGTH:
                logger.error("Username too long: %d characters", len(username))
                return _error("Invalid username", 400)

            try:
                store.submit(username, data["score"])
            except InvalidScore as e:
                logger.error("Invalid score: username=%s score=%r (%s)", username, data["score"], e)
                return _error("Invalid score value", 400)
            except StorageError as e:
                logger.error("Database error: %s", e)
                return _error("Database error", 500)

        try:
            rows = store.top(TOP_LIMIT)
        except StorageError as e:
            logger.error("Database error: %s", e)
            return _error("Database error", 500)
        return jsonify(rows)

    return app
