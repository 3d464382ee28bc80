# stonecrafter/routes.py
from flask import Blueprint, jsonify, request

from .content.balance import DEFAULTS
from .engine.prng import seed_from_string
from .engine.stones import calculate_power, derive_stone, generate_opponent_queue

stones_bp = Blueprint("stones", __name__)


def stone_payload(stone):
    data = stone.to_dict()
    data["power"] = calculate_power(stone)
    data["display_name"] = stone.display_name
    return data


@stones_bp.route("/stones/<int:seed>")
def stone_from_seed(seed):
    return jsonify(stone_payload(derive_stone(seed)))


@stones_bp.route("/stones/text/<text>")
def stone_from_text(text):
    seed = seed_from_string(text)
    return jsonify({"text": text, "seed": seed, "stone": stone_payload(derive_stone(seed))})


@stones_bp.route("/opponents/<int:seed>")
def opponent_ladder(seed):
    cap = DEFAULTS["opponent_queue_size"]
    count = request.args.get("count", default=10, type=int)
    count = max(0, min(cap, count))
    queue = generate_opponent_queue(seed, count)
    return jsonify({"seed": seed, "count": count, "opponents": [stone_payload(s) for s in queue]})
