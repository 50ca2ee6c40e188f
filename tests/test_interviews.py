from datetime import timedelta

from helpermatch.utils.time import isoformat, utcnow


def _payload(employee_id, days=3, **extra):
    return dict(employeeId=employee_id, startsAt=isoformat(utcnow() + timedelta(days=days)), **extra)


def test_schedule_interview(app, make_employer, make_employee):
    employer = make_employer("ACTIVE")
    profile = make_employee()
    resp = app.test_client(user=employer).post("/api/interviews", json=_payload(
        profile.user_id, durationMinutes=45, location="Makati office"))
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["status"] == "SCHEDULED"
    assert body["durationMinutes"] == 45

    listing = app.test_client(user=profile.user).get("/api/interviews?upcoming=true").get_json()
    assert [i["id"] for i in listing["interviews"]] == [body["id"]]


def test_past_start_is_rejected_before_the_paywall(app, make_employer, make_employee):
    resp = app.test_client(user=make_employer()).post("/api/interviews",
                                                       json=_payload(make_employee().user_id, days=-1))
    assert resp.status_code == 400
    assert resp.get_json()["details"][0]["field"] == "startsAt"


def test_scheduling_requires_subscription(app, make_employer, make_employee):
    resp = app.test_client(user=make_employer()).post("/api/interviews", json=_payload(make_employee().user_id))
    assert resp.status_code == 403
    assert resp.get_json()["code"] == "SUBSCRIPTION_REQUIRED"


def test_duration_bounds(app, make_employer, make_employee):
    client = app.test_client(user=make_employer("ACTIVE"))
    employee_id = make_employee().user_id
    assert client.post("/api/interviews", json=_payload(employee_id, durationMinutes=5)).status_code == 400
    assert client.post("/api/interviews", json=_payload(employee_id, durationMinutes=600)).status_code == 400


def test_update_and_calendar(app, make_employer, make_employee, make_user):
    employer = make_employer("ACTIVE")
    profile = make_employee()
    client = app.test_client(user=employer)
    interview_id = client.post("/api/interviews", json=_payload(profile.user_id)).get_json()["id"]

    resp = client.put(f"/api/interviews/{interview_id}", json={"status": "COMPLETED", "notes": "Went well"})
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "COMPLETED"
    assert client.put(f"/api/interviews/{interview_id}", json={"status": "DONE"}).status_code == 400

    other = app.test_client(user=make_employer("ACTIVE"))
    assert other.put(f"/api/interviews/{interview_id}", json={"status": "CANCELED"}).status_code == 403

    ics = app.test_client(user=profile.user).get(f"/api/interviews/{interview_id}/ics")
    assert ics.status_code == 200
    assert ics.mimetype == "text/calendar"
    text = ics.get_data(as_text=True)
    assert f"UID:interview-{interview_id}@helpermatch.local" in text
    assert "SUMMARY:Interview with Reyes Household" in text
    assert text.endswith("END:VCALENDAR\r\n")

    assert app.test_client(user=make_user("employee")).get(f"/api/interviews/{interview_id}/ics").status_code == 403


def test_invite_mail_is_sent_when_configured(app, make_employer, make_employee, monkeypatch):
    sent = []
    monkeypatch.setattr("helpermatch.jobs.notify.send_mail",
                        lambda to, subject, html, attachments=None: sent.append((to, attachments)) or (202, "m1"))
    app.config["SENDGRID_API_KEY"] = "SG.test"
    profile = make_employee()
    app.test_client(user=make_employer("ACTIVE")).post("/api/interviews", json=_payload(profile.user_id))

    assert len(sent) == 1
    to, attachments = sent[0]
    assert to == profile.user.email
    filename, content, mime = attachments[0]
    assert (filename, mime) == ("interview.ics", "text/calendar")
    assert "BEGIN:VEVENT" in content
