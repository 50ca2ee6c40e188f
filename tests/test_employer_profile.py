PROFILE = {
    "companyName": "Dela Cruz Family",
    "contactPerson": "Liza Dela Cruz",
    "city": "Pasig",
    "province": "Metro Manila",
    "householdSize": "MEDIUM",
    "budgetMin": 8000,
    "budgetMax": 12000,
    "workSchedule": {"days": ["Mon", "Tue"]},
}


def test_employer_profile_crud(app, make_user):
    client = app.test_client(user=make_user("employer"))
    assert client.get("/api/employer-profile").status_code == 404

    resp = client.post("/api/employer-profile", json=PROFILE)
    assert resp.status_code == 201
    assert resp.get_json()["workSchedule"] == {"days": ["Mon", "Tue"]}
    assert client.post("/api/employer-profile", json=PROFILE).status_code == 409

    body = client.get("/api/employer-profile").get_json()
    assert body["subscription"]["hasSubscription"] is False
    assert body["paywall"]["title"] == "Subscription Required"
    assert body["subscriptions"] == [] and body["billingHistory"] == []

    assert client.put("/api/employer-profile", json={"budgetMin": 20000}).status_code == 400
    resp = client.put("/api/employer-profile", json={"aboutText": "Family of four"})
    assert resp.get_json()["aboutText"] == "Family of four"
    assert resp.get_json()["budgetMax"] == 12000

    assert client.delete("/api/employer-profile").status_code == 200
    assert client.get("/api/employer-profile").status_code == 404


def test_employer_profile_validation(app, make_user):
    client = app.test_client(user=make_user("employer"))
    resp = client.post("/api/employer-profile", json=dict(PROFILE, contactPhone="555-1234", householdSize="HUGE"))
    fields = {d["field"] for d in resp.get_json()["details"]}
    assert fields == {"contactPhone", "householdSize"}
    assert client.post("/api/employer-profile", data="nope", content_type="text/plain").status_code == 400
