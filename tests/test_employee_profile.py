import copy

from helpermatch.extensions import db
from helpermatch.models import Document, EmployeeProfile

from .test_forms import PAYLOAD


def test_create_profile_scores_and_indexes(app, make_user, search_index):
    user = make_user("employee")
    client = app.test_client(user=user)
    resp = client.post("/api/employee-profile", json=PAYLOAD)
    assert resp.status_code == 201, resp.get_json()
    body = resp.get_json()
    assert 0 < body["profileScore"] < 100
    assert body["phone"] == "+639171234567"
    assert body["references"][0]["name"] == "Ana Cruz"
    assert body["visibility"] is False
    # hidden profiles are kept out of the index
    assert search_index.documents == {}

    assert client.post("/api/employee-profile", json=PAYLOAD).status_code == 409


def test_create_profile_validation_details(app, make_user):
    client = app.test_client(user=make_user("employee"))
    resp = client.post("/api/employee-profile", json=dict(PAYLOAD, salaryMin=20000, salaryMax=9000))
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["error"] == "Validation failed"
    assert {"field": "salaryMax",
            "message": "Minimum salary must be less than or equal to maximum salary"} in body["details"]


def test_update_profile_and_visibility_sync(app, make_user, search_index):
    user = make_user("employee")
    client = app.test_client(user=user)
    client.post("/api/employee-profile", json=PAYLOAD)

    resp = client.put("/api/employee-profile", json={"visibility": True, "headline": "Cook and nanny for 5 years"})
    assert resp.status_code == 200
    assert search_index.documents[user.id]["headline"] == "Cook and nanny for 5 years"

    assert client.put("/api/employee-profile", json={"salaryMax": 5000}).status_code == 400
    client.put("/api/employee-profile", json={"visibility": False})
    assert user.id not in search_index.documents


def test_delete_profile(app, make_employee, search_index):
    profile = make_employee()
    search_index.documents[profile.user_id] = {"id": profile.user_id}
    client = app.test_client(user=profile.user)
    assert client.delete("/api/employee-profile").status_code == 200
    assert EmployeeProfile.query.count() == 0
    assert search_index.documents == {}
    assert client.get("/api/employee-profile").status_code == 404


def test_public_view_hides_private_fields(app, client, make_employee, make_employer, make_user):
    profile = make_employee()
    profile.documents = [
        Document(type="NBI_CLEARANCE", file_name="nbi.pdf", file_url="https://cdn.example.com/nbi.pdf",
                 file_size=100, mime_type="application/pdf", status="VERIFIED"),
        Document(type="PASSPORT", file_name="pp.pdf", file_url="https://cdn.example.com/pp.pdf",
                 file_size=100, mime_type="application/pdf", status="PENDING"),
    ]
    db.session.commit()
    url = f"/api/employee-profile/{profile.user_id}"

    anonymous = client.get(url).get_json()
    assert anonymous["hasExtendedAccess"] is False
    assert "phone" not in anonymous and "lastName" not in anonymous

    subscribed = app.test_client(user=make_employer("ACTIVE")).get(url).get_json()
    assert subscribed["hasExtendedAccess"] is True
    assert subscribed["phone"] == "+639171234567"
    assert [d["type"] for d in subscribed["documents"]] == ["NBI_CLEARANCE"]

    admin = app.test_client(user=make_user("admin")).get(url).get_json()
    assert len(admin["documents"]) == 2


def test_hidden_profile_is_404_for_others(app, client, make_employee):
    profile = make_employee(visibility=False)
    assert client.get(f"/api/employee-profile/{profile.user_id}").status_code == 404
    assert app.test_client(user=profile.user).get(f"/api/employee-profile/{profile.user_id}").status_code == 200


def test_database_search(client, make_employee):
    make_employee(first_name="Maria", city="Quezon City", salary_min=8000, salary_max=12000)
    make_employee(first_name="Rosa", city="Davao City", province="Davao del Sur", salary_min=15000,
                  salary_max=20000, employment_type="LIVE_OUT", skills=["Driving", "Gardening", "Cleaning"])
    make_employee(first_name="Hidden", visibility=False)

    names = lambda resp: sorted(p["firstName"] for p in resp.get_json()["profiles"])  # noqa: E731
    assert names(client.get("/api/employee-profile/search")) == ["Maria", "Rosa"]
    assert names(client.get("/api/employee-profile/search?location=davao")) == ["Rosa"]
    assert names(client.get("/api/employee-profile/search?skills=Driving")) == ["Rosa"]
    assert names(client.get("/api/employee-profile/search?employmentType=LIVE_IN")) == ["Maria"]
    # salary bounds match overlapping ranges
    assert names(client.get("/api/employee-profile/search?salaryMin=11000&salaryMax=16000")) == ["Maria", "Rosa"]
    assert names(client.get("/api/employee-profile/search?salaryMin=13000")) == ["Rosa"]

    page = client.get("/api/employee-profile/search?limit=1&sortBy=salaryMin&sortOrder=asc").get_json()
    assert [p["firstName"] for p in page["profiles"]] == ["Maria"]
    assert page["pagination"]["hasNextPage"] is True
    assert "phone" not in page["profiles"][0]


def test_documents_lifecycle(app, make_employee, make_user, monkeypatch):
    deleted = []
    monkeypatch.setattr("helpermatch.services.storage.delete_object", deleted.append)
    profile = make_employee()
    client = app.test_client(user=profile.user)

    resp = client.post("/api/employee-profile/documents", json={
        "type": "NBI_CLEARANCE", "fileName": "nbi.pdf", "fileUrl": "https://cdn.example.com/documents/1/nbi.pdf",
        "storageKey": "documents/1/nbi.pdf", "fileSize": 2048, "mimeType": "application/pdf",
    })
    assert resp.status_code == 201
    document_id = resp.get_json()["id"]
    assert resp.get_json()["status"] == "PENDING"
    score_before = db.session.get(EmployeeProfile, profile.id).profile_score

    admin = app.test_client(user=make_user("admin"))
    assert admin.put(f"/api/employee-profile/documents/{document_id}/verify",
                     json={"status": "REJECTED"}).status_code == 400
    resp = admin.put(f"/api/employee-profile/documents/{document_id}/verify", json={"status": "VERIFIED"})
    assert resp.get_json()["status"] == "VERIFIED"
    assert db.session.get(EmployeeProfile, profile.id).profile_score == score_before + 5

    assert client.put(f"/api/employee-profile/documents/{document_id}/verify",
                      json={"status": "VERIFIED"}).status_code == 403
    assert client.delete(f"/api/employee-profile/documents/{document_id}").status_code == 200
    assert deleted == ["documents/1/nbi.pdf"]


def test_profile_routes_require_employee(app, make_employer):
    payload = copy.deepcopy(PAYLOAD)
    assert app.test_client(user=make_employer()).post("/api/employee-profile", json=payload).status_code == 403
