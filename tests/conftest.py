import os
import sys
from datetime import timedelta

import pytest
from flask import g
from flask_login import FlaskLoginClient

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from helpermatch import create_app
from helpermatch.extensions import db
from helpermatch.models import EmployeeProfile, EmployerProfile, Reference, Subscription, User
from helpermatch.services.search_index import SearchIndex
from helpermatch.utils.time import utcnow


class FakeSearchIndex(SearchIndex):
    """In-memory stand-in for the hosted index; records every search call."""

    def __init__(self):
        self.documents = {}
        self.searches = []
        self.settings = None
        self.healthy = True

    def add_documents(self, documents):
        for doc in documents:
            self.documents[doc["id"]] = dict(doc)

    def delete_documents(self, ids):
        for i in ids:
            self.documents.pop(i, None)

    def delete_all_documents(self):
        self.documents.clear()

    def search(self, query="", filter=None, sort=None, facets=None, page=1, hits_per_page=20,
               attributes_to_retrieve=None):
        self.searches.append({"query": query, "filter": filter, "sort": sort, "facets": facets,
                              "page": page, "hits_per_page": hits_per_page})
        needle = (query or "").lower()
        hits = []
        for doc in self.documents.values():
            haystack = " ".join([doc.get("first_name") or "", doc.get("city") or "", doc.get("province") or "",
                                 doc.get("headline") or "", " ".join(doc.get("skills") or [])]).lower()
            if needle in haystack:
                hits.append(doc)

        distribution = {}
        for name in facets or []:
            counts = {}
            for doc in hits:
                values = doc.get(name)
                for value in values if isinstance(values, list) else [values]:
                    if value is not None:
                        counts[value] = counts.get(value, 0) + 1
            distribution[name] = counts

        start = (page - 1) * hits_per_page
        selected = hits[start:start + hits_per_page]
        if attributes_to_retrieve:
            selected = [{k: d.get(k) for k in attributes_to_retrieve} for d in selected]
        return {
            "hits": selected,
            "totalHits": len(hits),
            "page": page,
            "facetDistribution": distribution,
            "processingTimeMs": 1,
        }

    def stats(self):
        return {"numberOfDocuments": len(self.documents), "isIndexing": False, "fieldDistribution": {}}

    def configure(self, settings=None):
        self.settings = settings
        return {"taskUid": 1}

    def is_healthy(self):
        return self.healthy


@pytest.fixture
def app():
    app = create_app("config.TestConfig")
    app.test_client_class = FlaskLoginClient

    # requests reuse the test's app context, so drop the user Flask-Login
    # cached on g by the previous request
    @app.teardown_request
    def forget_login_user(exc):
        g.pop("_login_user", None)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def search_index(app):
    index = FakeSearchIndex()
    app.extensions["search_index"] = index
    return index


@pytest.fixture
def make_user(app):
    counter = {"n": 0}

    def _make(role="employee", email=None, name=None):
        counter["n"] += 1
        user = User(email=email or f"{role}{counter['n']}@example.com", role=role, name=name)
        user.set_password("password123")
        db.session.add(user)
        db.session.commit()
        return user

    return _make


@pytest.fixture
def make_employee(make_user):
    def _make(first_name="Maria", city="Quezon City", province="Metro Manila", visibility=True, **fields):
        user = make_user("employee")
        values = dict(
            first_name=first_name,
            last_name="Santos",
            age=30,
            civil_status="SINGLE",
            city=city,
            province=province,
            exact_address="123 Mabini Street, Barangay Central",
            phone="+639171234567",
            email=user.email,
            skills=["Cooking", "Cleaning", "Laundry"],
            experience=5,
            headline="Experienced housekeeper and cook",
            salary_min=8000,
            salary_max=12000,
            employment_type="LIVE_IN",
            days_off=["Sunday"],
            visibility=visibility,
        )
        values.update(fields)
        profile = EmployeeProfile(user_id=user.id, **values)
        profile.references = [Reference(name="Ana Cruz", relationship="Former employer", phone="09171234567")]
        db.session.add(profile)
        db.session.commit()
        return profile

    return _make


@pytest.fixture
def make_employer(make_user):
    """Employer user with a profile and, optionally, a subscription row.

    ``subscription`` is one of None, "ACTIVE", "LAPSED" (ACTIVE but past its
    expiry), or any other status stored as-is with a future expiry.
    """
    def _make(subscription=None, provider_subscription_id=None):
        user = make_user("employer")
        profile = EmployerProfile(user_id=user.id, company_name="Reyes Household", contact_person="Jose Reyes",
                                  city="Makati", province="Metro Manila")
        db.session.add(profile)
        db.session.flush()
        if subscription:
            now = utcnow()
            lapsed = subscription == "LAPSED"
            db.session.add(Subscription(
                employer_id=profile.id,
                status="ACTIVE" if lapsed else subscription,
                expires_at=now - timedelta(days=1) if lapsed else now + timedelta(days=30),
                provider="STRIPE",
                provider_subscription_id=provider_subscription_id,
                amount=600,
                currency="PHP",
            ))
        db.session.commit()
        return user

    return _make
