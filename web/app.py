from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from flask import Flask, jsonify, request

from abchess import AIPlayer, Game, SearchConfig


logger = logging.getLogger(__name__)

# Keep each request snappy unless the caller passes its own config
WEB_MAX_DURATION_S = 1.5


def create_app(config: Optional[SearchConfig] = None) -> Flask:
    logging.basicConfig(level=logging.INFO)
    app = Flask(__name__)

    game = Game()
    if config is None:
        loaded = SearchConfig.load()
        config = replace(loaded, max_duration_s=min(loaded.max_duration_s, WEB_MAX_DURATION_S))
    app.config["SEARCH_CONFIG"] = config
    ai = AIPlayer(config)

    def reply() -> Optional[str]:
        ai_move_uci = ai.choose_move(game.board)
        if ai_move_uci:
            game.push_uci(ai_move_uci)
        return ai_move_uci

    @app.get("/api/state")
    def api_state():
        return jsonify(game.snapshot())

    @app.post("/api/new")
    def api_new():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}
        fen = data.get("fen")
        color = data.get("color") or "white"
        if not isinstance(color, str) or color.lower() not in ("white", "black"):
            return jsonify({"error": f"Unknown color: {color!r}"}), 400
        color = color.lower()
        if fen is not None and not isinstance(fen, str):
            return jsonify({"error": f"Invalid FEN: {fen!r}"}), 400

        try:
            game.reset(fen)
        except ValueError as exc:
            return jsonify({"error": f"Invalid FEN: {exc}"}), 400

        ai_move_uci = None
        pre_fen: Optional[str] = None
        # The agent moves first whenever it is not the human's turn
        if game.turn() != color and not game.is_game_over():
            pre_fen = game.board.fen()
            ai_move_uci = reply()

        snap = game.snapshot()
        snap["ai_move"] = ai_move_uci
        if pre_fen is not None:
            snap["pre_fen"] = pre_fen
        return jsonify(snap)

    @app.post("/api/move")
    def api_move():
        payload = request.get_json(silent=True)
        uci = payload.get("move") if isinstance(payload, dict) else None
        if not uci:
            return jsonify({"error": "Missing move"}), 400
        if not isinstance(uci, str):
            return jsonify({"error": f"Illegal move: {uci!r}"}), 400
        if game.is_game_over():
            return jsonify({"error": "Game is over"}), 400

        try:
            game.push_uci(uci)
        except ValueError as exc:
            return jsonify({"error": str(exc)}), 400

        ai_move_uci = None
        if not game.is_game_over():
            ai_move_uci = reply()

        snap = game.snapshot()
        snap["ai_move"] = ai_move_uci
        if ai.last_decision is not None and ai_move_uci:
            snap["search"] = {
                "value": ai.last_decision.value,
                "depth": ai.last_decision.depth,
                "nodes": ai.last_decision.nodes,
                "fallback": ai.last_decision.fallback,
            }
        return jsonify(snap)

    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
