def test_timer_flow_saves_activity(logged_in_client, fake_store):
    logged_in_client.post("/timer/draft", data={"title": "Focus", "category": "Work"}, follow_redirects=False)
    response = logged_in_client.post("/timer/start", follow_redirects=False)
    assert response.status_code == 303

    state = logged_in_client.get("/timer/").json()
    assert state["is_running"] is True
    assert state["title"] == "Focus"

    response = logged_in_client.post("/timer/stop", follow_redirects=False)

    assert response.status_code == 303
    assert [a.title for a in fake_store.activities] == ["Focus"]
    assert fake_store.activities[0].category == "Work"
    assert logged_in_client.get("/timer/").json()["title"] == ""


def test_timer_state_survives_between_requests(logged_in_client):
    logged_in_client.post("/timer/draft", data={"title": "Draft only"}, follow_redirects=False)
    logged_in_client.post("/timer/start", follow_redirects=False)
    logged_in_client.post("/timer/pause", follow_redirects=False)

    state = logged_in_client.get("/timer/").json()

    assert state["title"] == "Draft only"
    assert state["is_running"] is False


def test_stop_without_start_is_rejected(logged_in_client, fake_store):
    logged_in_client.post("/timer/draft", data={"title": "Never started"}, follow_redirects=False)

    response = logged_in_client.post("/timer/stop", follow_redirects=False)

    assert response.status_code == 400
    assert fake_store.activities == []


def test_stop_without_title_is_rejected(logged_in_client, fake_store):
    logged_in_client.post("/timer/start", follow_redirects=False)

    response = logged_in_client.post("/timer/stop", follow_redirects=False)

    assert response.status_code == 400
    assert "title" in response.json()["detail"]


def test_reset_clears_draft(logged_in_client):
    logged_in_client.post("/timer/draft", data={"title": "Scrap"}, follow_redirects=False)
    logged_in_client.post("/timer/reset", follow_redirects=False)

    assert logged_in_client.get("/timer/").json()["title"] == ""
