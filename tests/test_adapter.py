"""HTTP routes and Socket.IO handlers, driven through Flask's test clients."""

from stonecrafter import state
from stonecrafter.engine.stones import calculate_power, derive_stone


def _events(client, name):
    return [msg["args"][0] for msg in client.get_received() if msg["name"] == name]


def _drain(client):
    received = client.get_received()
    out = {}
    for msg in received:
        out.setdefault(msg["name"], []).append(msg["args"][0])
    return out


class TestRoutes:
    def test_stone_by_seed(self, app, socketio):
        resp = app.test_client().get("/stones/42")
        assert resp.status_code == 200
        data = resp.get_json()
        stone = derive_stone(42)
        assert data["seed"] == 42
        assert data["color"] == stone.color
        assert data["power"] == calculate_power(stone)

    def test_stone_by_text(self, app, socketio):
        data = app.test_client().get("/stones/text/ab").get_json()
        assert data["seed"] == 97 * 31 + 98
        assert data["stone"]["seed"] == data["seed"]

    def test_opponents(self, app, socketio):
        data = app.test_client().get("/opponents/7?count=5").get_json()
        assert data["count"] == 5
        assert len(data["opponents"]) == 5

    def test_opponents_capped(self, app, socketio):
        data = app.test_client().get("/opponents/7?count=5000").get_json()
        assert data["count"] == 100


class TestSockets:
    def test_new_game(self, sio_client):
        sio_client.emit("stones_new_game", {"seed": 1234, "name": "Ada"})
        got = _drain(sio_client)
        snapshot = got["stones_state"][-1]
        assert snapshot["game_seed"] == 1234
        assert snapshot["player_name"] == "Ada"
        assert len(snapshot["stones"]) == 1
        assert snapshot["equipped"] == snapshot["stones"][0]["seed"]
        assert snapshot["opponent"] is not None
        assert len(state.games) == 1

    def test_actions_need_a_game(self, sio_client):
        sio_client.emit("fight_start")
        assert "No game loaded" in _events(sio_client, "stones_system")[-1]

    def test_fight_flow(self, sio_client):
        sio_client.emit("stones_new_game", {"seed": 99})
        sio_client.get_received()

        sio_client.emit("fight_start")
        got = _drain(sio_client)
        round_info = got["fight_round"][-1]
        assert round_info["round"] == 1
        assert len(round_info["choices"]) == 3
        assert got["fight_snapshot"][-1]["phase"] == "choosing"

        pick = round_info["choices"][0]["id"]
        sio_client.emit("fight_select", {"card_id": pick})
        snap = _events(sio_client, "fight_snapshot")[-1]
        assert [c["id"] for c in snap["hand"]] == [pick]

        sio_client.emit("fight_play", {"card_id": pick, "target": "player"})
        snap = _events(sio_client, "fight_snapshot")[-1]
        assert snap["hand"] == []

        for _ in range(200):
            sio_client.emit("fight_resolve")
            got = _drain(sio_client)
            if "fight_outcome" in got:
                break
        outcome = got["fight_outcome"][-1]
        assert outcome["winner"] in ("player", "opponent", "tie")
        assert got["stones_state"][-1]["opponent_index"] == 1
        assert not state.fights

    def test_bad_select_reports(self, sio_client):
        sio_client.emit("stones_new_game", {"seed": 5})
        sio_client.emit("fight_start")
        sio_client.get_received()
        sio_client.emit("fight_select", {"card_id": "nonexistent"})
        assert "not among" in _events(sio_client, "stones_system")[-1]

    def test_concede(self, sio_client):
        sio_client.emit("stones_new_game", {"seed": 5})
        sio_client.emit("fight_start")
        sio_client.get_received()
        sio_client.emit("fight_concede")
        outcome = _events(sio_client, "fight_outcome")[-1]
        assert outcome["winner"] == "tie"
        assert outcome["currency_change"] == 0

    def test_restart_concedes_running_fight(self, sio_client):
        sio_client.emit("stones_new_game", {"seed": 5})
        sio_client.emit("fight_start")
        first = _events(sio_client, "fight_snapshot")[-1]["session_id"]

        sio_client.emit("fight_start")
        got = _drain(sio_client)
        assert "Previous fight conceded." in got["stones_system"]
        assert got["fight_outcome"][-1]["winner"] == "tie"
        assert got["stones_state"][-1]["opponent_index"] == 1
        assert got["fight_round"][-1]["round"] == 1
        assert len(state.fights) == 1
        assert next(iter(state.fights.values())).session_id != first

    def test_no_inventory_changes_mid_fight(self, sio_client):
        sio_client.emit("stones_new_game", {"seed": 5})
        sio_client.emit("fight_start")
        sio_client.get_received()
        sio_client.emit("stones_salvage")
        assert "mid-fight" in _events(sio_client, "stones_system")[-1]

    def test_salvage_then_fight_needs_stone(self, sio_client):
        sio_client.emit("stones_new_game", {"seed": 5})
        sio_client.emit("stones_salvage")
        sio_client.get_received()
        sio_client.emit("fight_start")
        assert "No stone equipped" in _events(sio_client, "stones_system")[-1]

    def test_crack(self, sio_client):
        sio_client.emit("stones_new_game", {"seed": 5})
        sio_client.get_received()
        sio_client.emit("stones_crack")
        got = _drain(sio_client)
        assert got["stones_system"][-1].startswith("Cracked open")
        assert 1 <= len(got["stones_state"][-1]["stones"]) <= 3

    def test_equip_unknown(self, sio_client):
        sio_client.emit("stones_new_game", {"seed": 5})
        sio_client.get_received()
        sio_client.emit("stones_equip", {"seed": 1})
        assert "No stone 1" in _events(sio_client, "stones_system")[-1]

    def test_disconnect_cleans_up(self, sio_client):
        sio_client.emit("stones_new_game", {"seed": 5})
        sio_client.emit("fight_start")
        sio_client.disconnect()
        assert not state.games and not state.fights
