"""
Shared pytest fixtures for the stonecrafter test suite.

Provides:
- hand-built stones with readable power (power = weight / 2)
- a GameState with a small unshuffled deck
- a started fight session
- a Flask app + Socket.IO test client with the adapter registered
"""

import os
import sys

import pytest

_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _project_root)

from flask import Flask
from flask_socketio import SocketIO

from stonecrafter import init_stonecrafter, state
from stonecrafter.content.cards import build_deck
from stonecrafter.engine import resolver
from stonecrafter.engine.game import GameState
from stonecrafter.engine.models import StoneQualities


def _stone(seed, weight=20, rarity=0, magic=0, created_at=0):
    return StoneQualities(
        seed=seed, color="Blue", shape="Sphere", weight=weight,
        rarity=rarity, hardness=0.25, magic=magic, created_at=created_at,
    )


@pytest.fixture
def make_stone():
    return _stone


@pytest.fixture
def game():
    g = GameState(game_seed=11, opponents_seed=12)
    g.deck = build_deck(1)
    return g


@pytest.fixture
def player_stone(game):
    stone = _stone(1001, weight=40)
    game.add_stone(stone)
    return stone


@pytest.fixture
def opponent_stone():
    return _stone(2002, weight=20)


@pytest.fixture
def fight(game, player_stone, opponent_stone):
    return resolver.start_fight(player_stone, opponent_stone, game)


@pytest.fixture
def app():
    flask_app = Flask(__name__)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def socketio(app):
    sio = SocketIO(app)
    init_stonecrafter(app, sio)
    yield sio
    state.games.clear()
    state.fights.clear()


@pytest.fixture
def sio_client(app, socketio):
    client = socketio.test_client(app)
    client.get_received()
    yield client
    if client.is_connected():
        client.disconnect()
