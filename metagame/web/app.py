"""
Flask JSON API for metagame reports.
"""
from dataclasses import asdict

from flask import Flask, jsonify, request

from ..analyzer.attribution import agreement_rate
from ..analyzer.matchups import MatrixOptions
from ..analyzer.splitter import SPLIT_MODES
from ..data.archetypes import validate_archetype_yaml
from ..exceptions import MetagameError
from ..utils.format import pct
from .data_manager import DataManager


app = Flask(__name__)

data_manager = DataManager()


def _bool_arg(name: str, default: bool) -> bool:
    value = request.args.get(name)
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes", "on")


@app.errorhandler(MetagameError)
def handle_metagame_error(error: MetagameError):
    return jsonify({"error": error.message, "code": error.code}), 500


@app.errorhandler(ValueError)
def handle_bad_request(error: ValueError):
    return jsonify({"error": str(error)}), 400


@app.route("/api/tournaments")
def api_tournaments():
    """List loaded tournaments."""
    tournaments = data_manager.get_tournaments()
    return jsonify({
        "tournaments": [asdict(t.meta) for t in tournaments],
        "total_tournaments": len(tournaments),
        "total_decklists": sum(len(t.decklists) for t in tournaments),
    })


@app.route("/api/classifications")
def api_classifications():
    """Classification results per tournament, with method counts."""
    results = data_manager.get_classifications()
    method_counts = {"signature": 0, "knn": 0, "unknown": 0}
    for batch in results.values():
        for r in batch:
            method_counts[r.method] = method_counts.get(r.method, 0) + 1

    return jsonify({
        "results": {str(tid): [asdict(r) for r in batch] for tid, batch in results.items()},
        "methods": method_counts,
    })


@app.route("/api/matchups")
def api_matchups():
    """Matchup matrix and archetype stats."""
    options = MatrixOptions(
        exclude_mirrors=not _bool_arg("mirrors", False),
        min_metagame_share=float(request.args.get("min_share", 0)),
        top_n=int(request.args.get("top_n", 0)),
        exclude_playoffs=not _bool_arg("playoffs", True),
    )
    report = data_manager.matchup_report(options)
    return jsonify({
        "archetypes": report.matrix.archetypes,
        "cells": [[asdict(c) for c in row] for row in report.matrix.cells],
        "stats": [asdict(s) for s in report.stats],
    })


@app.route("/api/archetype/<path:name>/aggregate")
def api_archetype_aggregate(name: str):
    """Consensus decklist for an archetype."""
    order = int(request.args.get("order", 1))
    deck = data_manager.aggregate(name, order=order)
    if deck.deck_count == 0:
        return jsonify({"error": "Archetype not found", "name": name}), 404

    return jsonify({"name": name, "order": order, **asdict(deck)})


@app.route("/api/archetype/<path:name>/composition")
def api_archetype_composition(name: str):
    """Card play rates for an archetype."""
    composition = data_manager.composition(name)
    if composition.deck_count == 0:
        return jsonify({"error": "Archetype not found", "name": name}), 404
    return jsonify({"name": name, **asdict(composition)})


@app.route("/api/archetype/<path:name>/split")
def api_archetype_split(name: str):
    """Matchup rows split by copies of a card."""
    card = request.args.get("card")
    if not card:
        return jsonify({"error": 'Missing "card" parameter'}), 400
    mode = request.args.get("mode", "binary")
    if mode not in SPLIT_MODES:
        return jsonify({"error": f"Unknown mode: {mode}"}), 400

    result = data_manager.split(
        name, card, mode=mode,
        threshold=int(request.args.get("threshold", 4)),
        top_n=int(request.args.get("top_n", 0)),
        min_metagame_share=float(request.args.get("min_share", 0)),
    )
    return jsonify(asdict(result))


@app.route("/api/attribution")
def api_attribution():
    """Classified versus self-reported archetypes."""
    matrix = data_manager.attribution()
    if matrix is None:
        return jsonify({"matrix": None, "agreement": None})
    return jsonify({"matrix": asdict(matrix), "agreement": pct(agreement_rate(matrix))})


@app.route("/api/archetypes/validate", methods=["POST"])
def api_validate_archetypes():
    """Validate an archetype YAML document sent as the request body."""
    result = validate_archetype_yaml(request.get_data(as_text=True))
    return jsonify(asdict(result)), 200 if result.ok else 422


def run(host: str = "127.0.0.1", port: int = 5000, debug: bool = True):
    """Run the Flask application."""
    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    run()
