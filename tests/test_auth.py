def test_signup_login_logout(client):
    resp = client.post("/auth/signup", json={"email": "Ana@Example.com", "password": "secret123", "role": "employer"})
    assert resp.status_code == 201
    assert resp.get_json()["user"]["email"] == "ana@example.com"
    assert client.get("/auth/me").get_json()["user"]["role"] == "employer"

    assert client.post("/auth/logout").status_code == 200
    assert client.get("/auth/me").status_code == 401

    assert client.post("/auth/login", json={"email": "ana@example.com", "password": "wrong-pass"}).status_code == 401
    assert client.post("/auth/login", json={"email": "ana@example.com", "password": "secret123"}).status_code == 200


def test_signup_rules(app, client, make_user):
    assert client.post("/auth/signup", json={"email": "x@example.com", "password": "short", "role": "employee"}) \
        .status_code == 400
    assert client.post("/auth/signup", json={"email": "x@example.com", "password": "secret123", "role": "admin"}) \
        .status_code == 403

    make_user("employee", email="taken@example.com")
    assert client.post("/auth/signup", json={"email": "taken@example.com", "password": "secret123",
                                             "role": "employee"}).status_code == 409

    admin = app.test_client(user=make_user("admin"))
    assert admin.post("/auth/signup", json={"email": "boss@example.com", "password": "secret123",
                                            "role": "admin"}).status_code == 201


def test_each_client_sees_its_own_user(app, make_user):
    employer = app.test_client(user=make_user("employer"))
    admin = app.test_client(user=make_user("admin"))
    assert employer.get("/auth/me").get_json()["user"]["role"] == "employer"
    assert admin.get("/auth/me").get_json()["user"]["role"] == "admin"
    assert employer.get("/auth/me").get_json()["user"]["role"] == "employer"
