GRID = {"left": 0, "top": 0, "right": 600, "bottom": 760}
# Wednesday, slots 4-5 as laid out by the grid endpoint.
WEDNESDAY_4_5 = {"left": 280, "top": 130, "right": 359, "bottom": 189}


def _seed(client):
    response = client.post("/api/tables/schedule-1/entries", json={"lecture_id": "502001"})
    assert response.status_code == 201


def test_drag_lifecycle_commits_on_drop(client):
    _seed(client)

    response = client.post("/api/drags/schedule-1/1")
    assert response.status_code == 201
    assert response.json() == {"key": "schedule-1:1", "table_id": "schedule-1", "entry_index": 1, "start_day": "수"}
    assert client.get("/api/drags").json() == ["schedule-1:1"]

    response = client.post(
        "/api/drags/schedule-1/1/move",
        json={"dx": 95, "dy": 40, "element": WEDNESDAY_4_5, "container": GRID},
    )
    assert response.status_code == 200
    assert response.json() == {"x": 80, "y": 30}

    # Moves never write to the store.
    entries = client.get("/api/tables/schedule-1").json()["entries"]
    assert entries[1]["day"] == "수"

    response = client.post("/api/drags/schedule-1/1/end")
    assert response.status_code == 200
    assert response.json() == {
        "table_id": "schedule-1",
        "entry_index": 1,
        "committed": True,
        "day": "목",
        "time_offset": 1,
        "reason": None,
    }

    entry = client.get("/api/tables/schedule-1").json()["entries"][1]
    assert (entry["day"], entry["range"]) == ("목", [5, 6])
    assert client.get("/api/drags").json() == []


def test_drop_outside_days_is_discarded(client):
    _seed(client)
    client.post("/api/drags/schedule-1/0")
    response = client.post("/api/drags/schedule-1/0/end", json={"dx": -80, "dy": 0})
    assert response.status_code == 200
    assert response.json()["committed"] is False
    assert response.json()["reason"] == "out_of_range"

    entry = client.get("/api/tables/schedule-1").json()["entries"][0]
    assert (entry["day"], entry["range"]) == ("월", [1, 2, 3])


def test_cancel_drag(client):
    _seed(client)
    client.post("/api/drags/schedule-1/0")
    assert client.delete("/api/drags/schedule-1/0").status_code == 204
    assert client.delete("/api/drags/schedule-1/0").status_code == 404
    assert client.post("/api/drags/schedule-1/0/end").status_code == 404


def test_drag_errors(client):
    _seed(client)
    assert client.post("/api/drags/missing/0").status_code == 404
    assert client.post("/api/drags/schedule-1/9").status_code == 404

    client.post("/api/drags/schedule-1/0")
    assert client.post("/api/drags/schedule-1/0").status_code == 409

    response = client.post(
        "/api/drags/schedule-1/1/move",
        json={"dx": 0, "dy": 0, "element": WEDNESDAY_4_5, "container": GRID},
    )
    assert response.status_code == 404


def test_move_rejects_inverted_rect(client):
    _seed(client)
    client.post("/api/drags/schedule-1/1")
    bad = {"left": 10, "top": 10, "right": 0, "bottom": 0}
    response = client.post(
        "/api/drags/schedule-1/1/move",
        json={"dx": 0, "dy": 0, "element": bad, "container": GRID},
    )
    assert response.status_code == 422
