def test_saved_search_crud(app, make_user):
    client = app.test_client(user=make_user("employer"))
    resp = client.post("/api/saved-searches", json={"name": "Cebu cooks", "paramsJson": {"city": "Cebu City"}})
    assert resp.status_code == 201
    saved_id = resp.get_json()["id"]

    assert client.post("/api/saved-searches", json={"name": "Cebu cooks", "paramsJson": {}}).status_code == 409

    resp = client.put(f"/api/saved-searches/{saved_id}", json={"paramsJson": {"city": "Cebu City", "skills": "Cooking"}})
    assert resp.get_json()["paramsJson"]["skills"] == "Cooking"

    assert [s["name"] for s in client.get("/api/saved-searches").get_json()["savedSearches"]] == ["Cebu cooks"]
    assert client.delete(f"/api/saved-searches/{saved_id}").status_code == 200
    assert client.get(f"/api/saved-searches/{saved_id}").status_code == 404


def test_saved_searches_are_private(app, make_user):
    owner = app.test_client(user=make_user("employee"))
    saved_id = owner.post("/api/saved-searches", json={"name": "Mine", "paramsJson": {}}).get_json()["id"]
    stranger = app.test_client(user=make_user("employee"))
    assert stranger.get(f"/api/saved-searches/{saved_id}").status_code == 404
    # names only need to be unique per user
    assert stranger.post("/api/saved-searches", json={"name": "Mine", "paramsJson": {}}).status_code == 201


def test_saved_search_validation(app, make_user, client):
    assert client.get("/api/saved-searches").status_code == 401
    auth = app.test_client(user=make_user("employee"))
    assert auth.post("/api/saved-searches", json={"name": "", "paramsJson": {}}).status_code == 400
    assert auth.post("/api/saved-searches", json={"name": "x", "paramsJson": []}).status_code == 400


def test_employer_filter_default_is_exclusive(app, make_employer):
    client = app.test_client(user=make_employer())
    first = client.post("/api/employer-profile/saved-searches",
                        json={"name": "Live-in", "filters": {"employmentType": "LIVE_IN"}, "isDefault": True})
    assert first.status_code == 201
    second = client.post("/api/employer-profile/saved-searches", json={"name": "Cooks", "isDefault": True})
    assert second.get_json()["isDefault"] is True

    rows = client.get("/api/employer-profile/saved-searches").get_json()["savedSearches"]
    assert [(r["name"], r["isDefault"]) for r in rows] == [("Cooks", True), ("Live-in", False)]

    client.put(f"/api/employer-profile/saved-searches/{first.get_json()['id']}", json={"isDefault": True})
    rows = client.get("/api/employer-profile/saved-searches").get_json()["savedSearches"]
    assert [r["name"] for r in rows if r["isDefault"]] == ["Live-in"]


def test_empty_search_params_are_accepted(app, make_user):
    client = app.test_client(user=make_user("employee"))
    resp = client.post("/api/saved-searches", json={"name": "Everything", "paramsJson": {}})
    assert resp.status_code == 201
    assert resp.get_json()["paramsJson"] == {}

    resp = client.post("/api/saved-searches", json={"name": "Nothing"})
    assert resp.status_code == 400
    assert resp.get_json()["details"] == [{"field": "paramsJson", "message": "Search parameters are required"}]
