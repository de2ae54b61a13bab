import pytest

from main import create_app, default_opponent, parse_dt


@pytest.fixture
def app():
    return create_app({"SEED": 3, "ARRAY_SIZE": 8, "TASK_COUNT": 4, "TESTING": True})


@pytest.fixture
def client(app):
    return app.test_client()


def test_index_renders(client):
    res = client.get("/")
    assert res.status_code == 200
    body = res.get_data(as_text=True)
    assert "<svg" in body
    assert "Merge Sort" in body


def test_state(client):
    data = client.get("/api/state").get_json()
    assert data["mode"] == "merge"
    assert len(data["bars"]) == 8
    assert data["cursor"] == 0
    assert data["svg"].startswith("<svg")


def test_step_advances_cursor(client):
    data = client.post("/api/step").get_json()
    assert data["applied"] is True
    assert data["cursor"] == 1
    assert data["last_kind"] == "compare"


def test_tick_is_gated(client):
    small = client.post("/api/tick", json={"dt": 0.01}).get_json()
    assert small["applied"] is False
    big = client.post("/api/tick", json={"dt": 1.0}).get_json()
    assert big["applied"] is True
    assert big["cursor"] == 1


@pytest.mark.parametrize("dt", [-1, "soon", float("nan"), float("inf"), "-inf", "nan"])
def test_tick_rejects_bad_dt(client, dt):
    res = client.post("/api/tick", json={"dt": dt})
    assert res.status_code == 400
    assert "error" in res.get_json()
    state = client.get("/api/state").get_json()
    assert state["cursor"] == 0
    assert state["counters"]["elapsed_time"] == 0.0


def test_play_toggles(client):
    assert client.post("/api/play").get_json()["paused"] is True
    assert client.post("/api/tick", json={"dt": 5.0}).get_json()["applied"] is False
    assert client.post("/api/play").get_json()["paused"] is False


def test_mode_switch(client, app):
    values = list(app.config["CONTROLLER"].initial_values)
    data = client.post("/api/mode", json={"mode": "bubble"}).get_json()
    assert data["changed"] is True
    assert data["mode"] == "bubble"
    assert [b["value"] for b in data["bars"]] == values
    again = client.post("/api/mode", json={"mode": "bubble"}).get_json()
    assert again["changed"] is False


@pytest.mark.parametrize("body", [{}, {"mode": "heap"}])
def test_mode_rejects_bad_input(client, body):
    assert client.post("/api/mode", json=body).status_code == 400


def test_reset_keeps_size(client):
    before = client.get("/api/state").get_json()
    after = client.post("/api/reset").get_json()
    assert len(after["bars"]) == len(before["bars"])
    assert after["cursor"] == 0


def test_task_count(client):
    client.post("/api/mode", json={"mode": "parallel_merge"})
    data = client.post("/api/tasks", json={"count": 2}).get_json()
    assert data["changed"] is True
    assert data["task_count"] == 2
    assert len(data["temp_regions"]) == 2
    assert client.post("/api/tasks", json={"count": 0}).status_code == 400


def test_speed(client):
    data = client.post("/api/speed", json={"speed": "slow"}).get_json()
    assert data == {"speed": "slow", "step_interval": 0.5}


def test_compare(client):
    data = client.get("/api/compare?left=bubble&right=merge").get_json()
    assert data["left"]["mode"] == "bubble"
    assert data["right"]["mode"] == "merge"
    assert data["left"]["sorted_ok"] and data["right"]["sorted_ok"]
    assert data["winner_memory"] == "Bubble Sort"
    assert "html" in data


def test_compare_unknown_mode(client):
    assert client.get("/api/compare?left=bogo&right=merge").status_code == 400


def test_env_override(monkeypatch):
    monkeypatch.setenv("SORTVIZ_ARRAY_SIZE", "5")
    app = create_app({"SEED": 1})
    assert app.config["CONTROLLER"].size == 5


def test_parse_dt_accepts_finite_numbers():
    assert parse_dt(0) == 0.0
    assert parse_dt("0.25") == 0.25


def test_compare_default_opponent_differs_from_left(client):
    data = client.get("/api/compare?left=merge").get_json()
    assert data["left"]["mode"] == "merge"
    assert data["right"]["mode"] != "merge"


def test_default_opponent():
    assert default_opponent("bubble", "merge") == "merge"
    assert default_opponent("merge", "merge") == "bubble"
    assert default_opponent("bubble", "bubble") == "merge"
