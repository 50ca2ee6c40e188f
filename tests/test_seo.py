from helpermatch.services import seo


def test_person_jsonld(app, make_employee):
    card = seo.profile_card(make_employee(first_name="Rosa", city="Cebu City", province="Cebu"))
    data = seo.person_jsonld(card)
    assert data["@type"] == "Person"
    assert data["url"] == f"https://helpermatch.example.com/workers/rosa-cebu-city-{card['id']}"
    assert data["address"]["addressLocality"] == "Cebu City"
    assert data["knowsAbout"] == ["Cooking", "Cleaning", "Laundry"]
    assert "image" not in data
    names = [p["name"] for p in data["additionalProperty"]]
    assert "Salary Range" in names and "Years of Experience" in names


def test_item_list_and_breadcrumbs(app, make_employee):
    cards = [seo.profile_card(make_employee()), seo.profile_card(make_employee(first_name="Ana"))]
    listing = seo.item_list_jsonld(cards)
    assert listing["numberOfItems"] == 2
    assert [i["position"] for i in listing["itemListElement"]] == [1, 2]

    crumbs = seo.breadcrumb_jsonld("Metro Manila", "Quezon City", cards[1])
    assert [c["name"] for c in crumbs["itemListElement"]] == ["Home", "Workers", "Metro Manila", "Quezon City", "Ana"]


def test_text_helpers(app):
    assert seo.page_title("Housekeepers") == "Housekeepers | HelperMatch"
    long_text = "x" * 200
    assert len(seo.meta_description(long_text)) == 160
    assert seo.meta_description(long_text).endswith("...")
    assert seo.meta_description("short") == "short"
    assert seo.keywords(["a", "b"], ["b", None, "c"]) == ["a", "b", "c"]
    assert seo.canonical_url("/workers", {"city": "Cebu City"}) == \
        "https://helpermatch.example.com/workers?city=Cebu+City"
    assert seo.search_page_title(city="Makati", skills=["cooking"]) == "Cooking Housekeepers in Makati | HelperMatch"
    assert "Browse 12 verified" in seo.search_page_description(12)


def test_robots(client):
    resp = client.get("/robots.txt")
    assert resp.status_code == 200
    assert resp.mimetype == "text/plain"
    assert resp.headers["Cache-Control"] == "public, max-age=86400"
    text = resp.get_data(as_text=True)
    assert "Disallow: /api" in text
    assert "Sitemap: https://helpermatch.example.com/sitemap.xml" in text


def test_sitemap_lists_visible_workers(client, make_employee):
    shown = make_employee(first_name="Rosa", city="Iloilo")
    make_employee(first_name="Hidden", visibility=False)
    xml = client.get("/sitemap.xml").get_data(as_text=True)
    assert f"<loc>https://helpermatch.example.com/workers/rosa-iloilo-{shown.user_id}</loc>" in xml
    assert "hidden" not in xml


def test_worker_page(client, make_employee):
    profile = make_employee(first_name="Rosa", city="Iloilo", province="Iloilo")
    slug = f"rosa-iloilo-{profile.user_id}"
    resp = client.get(f"/workers/{slug}")
    assert resp.status_code == 200
    html = resp.get_data(as_text=True)
    assert '<script type="application/ld+json">' in html
    assert f'<link rel="canonical" href="https://helpermatch.example.com/workers/{slug}">' in html
    assert "Santos" not in html and "+639171234567" not in html


def test_worker_page_redirects_to_canonical_slug(client, make_employee):
    profile = make_employee(first_name="Rosa", city="Iloilo")
    resp = client.get(f"/workers/old-name-somewhere-{profile.user_id}")
    assert resp.status_code == 301
    assert resp.headers["Location"].endswith(f"/workers/rosa-iloilo-{profile.user_id}")


def test_worker_page_404s(client, make_employee):
    hidden = make_employee(first_name="Rosa", city="Iloilo", visibility=False)
    assert client.get(f"/workers/rosa-iloilo-{hidden.user_id}").status_code == 404
    assert client.get("/workers/rosa-iloilo-99999").status_code == 404
    assert client.get("/workers/rosa").status_code == 404
    assert client.get("/workers/rosa-iloilo-abc").status_code == 404


def test_site_wide_structured_data(app):
    org = seo.organization_jsonld()
    assert org["@type"] == "Organization"
    assert org["url"] == "https://helpermatch.example.com"
    assert org["name"] == "HelperMatch"

    faq = seo.faq_jsonld()
    assert faq["@type"] == "FAQPage"
    assert len(faq["mainEntity"]) == len(seo.FAQ)
    assert all(q["acceptedAnswer"]["text"] for q in faq["mainEntity"])
