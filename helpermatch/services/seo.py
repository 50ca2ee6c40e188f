"""Structured data and meta tags for the public worker pages.

Functions take a "card": the flat snake_case dict produced by
``profile_card`` (or a search hit, which has the same keys).
"""
from urllib.parse import urlencode

from flask import current_app

from .search_sync import to_search_document

SCHEMA_CONTEXT = "https://schema.org"
JOB_TITLE = "Housekeeper"
DESCRIPTION_LIMIT = 160

BASE_KEYWORDS = ["housekeeper", "kasambahay", "domestic helper", "yaya", "Philippines"]

FAQ = [
    ("How do I find a housekeeper?",
     "You can search for housekeepers by location, skills, experience, and salary range. "
     "Browse profiles and contact those who match your requirements."),
    ("Are all housekeepers verified?",
     "Profiles show which identity documents and clearances have been verified by our team."),
    ("How much does it cost to hire a housekeeper?",
     "Housekeeper salaries vary based on experience, skills, and location. "
     "You can filter by salary range to find candidates within your budget."),
    ("Can I hire both live-in and live-out housekeepers?",
     "Yes, you can filter by employment type to find live-in, live-out, or both types of "
     "housekeepers based on your needs."),
]


def base_url():
    return current_app.config.get("APP_BASE_URL", "").rstrip("/")


def site_name():
    return current_app.config.get("SITE_NAME", "HelperMatch")


def profile_card(profile):
    card = to_search_document(profile)
    card.update({
        "photo_url": profile.photo_url,
        "age": profile.age,
        "civil_status": profile.civil_status,
        "profile_score": profile.profile_score,
    })
    return card


def worker_url(card):
    return f"{base_url()}/workers/{card['slug']}"


def _image(photo_url):
    if not photo_url:
        return None
    if photo_url.startswith(("http://", "https://")):
        return photo_url
    return f"{base_url()}{photo_url}"


def _work_hours(live_in_out):
    return {"LIVE_IN": "Live-in", "LIVE_OUT": "Live-out", "BOTH": "Live-in or live-out"}.get(live_in_out)


def _address(card):
    return {
        "@type": "PostalAddress",
        "addressLocality": card.get("city"),
        "addressRegion": card.get("province"),
        "addressCountry": "PH",
    }


def _peso(amount):
    return f"₱{amount:,}" if amount is not None else "?"


def _drop_empty(data):
    return {k: v for k, v in data.items() if v is not None}


def person_jsonld(card):
    properties = [
        ("Years of Experience", card.get("years_of_experience")),
        ("Age", card.get("age")),
        ("Civil Status", card.get("civil_status")),
        ("Salary Range", f"{_peso(card.get('salary_min'))} - {_peso(card.get('salary_max'))}"),
        ("Profile Score", f"{card.get('profile_score') or 0}%"),
    ]
    return _drop_empty({
        "@context": SCHEMA_CONTEXT,
        "@type": "Person",
        "name": card.get("first_name"),
        "jobTitle": JOB_TITLE,
        "description": card.get("headline")
        or f"Experienced housekeeper in {card.get('city')}, {card.get('province')}",
        "address": _address(card),
        "url": worker_url(card),
        "image": _image(card.get("photo_url")),
        "knowsAbout": list(card.get("skills") or []),
        "workHours": _work_hours(card.get("live_in_out")),
        "additionalProperty": [
            {"@type": "PropertyValue", "name": name, "value": value}
            for name, value in properties if value is not None
        ],
        "offers": {
            "@type": "Offer",
            "description": "Housekeeping services",
            "price": card.get("salary_min"),
            "priceCurrency": "PHP",
            "availability": "https://schema.org/InStock" if card.get("availability_date")
            else "https://schema.org/OutOfStock",
        },
    })


def item_list_jsonld(cards):
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "ItemList",
        "name": "Housekeepers and Domestic Helpers",
        "description": "Find verified housekeepers, nannies, and domestic helpers in the Philippines",
        "url": f"{base_url()}/workers",
        "numberOfItems": len(cards),
        "itemListElement": [
            {
                "@type": "ListItem",
                "position": position,
                "item": _drop_empty({
                    "@type": "Person",
                    "name": card.get("first_name"),
                    "jobTitle": JOB_TITLE,
                    "address": _address(card),
                    "url": worker_url(card),
                    "image": _image(card.get("photo_url")),
                    "knowsAbout": list(card.get("skills") or []),
                    "workHours": _work_hours(card.get("live_in_out")),
                }),
            }
            for position, card in enumerate(cards, start=1)
        ],
    }


def breadcrumb_jsonld(province=None, city=None, worker=None):
    root = base_url()
    crumbs = [("Home", root), ("Workers", f"{root}/workers")]
    if province:
        crumbs.append((province, f"{root}/workers?{urlencode({'province': province})}"))
    if city:
        crumbs.append((city, f"{root}/workers?{urlencode({'city': city, 'province': province or ''})}"))
    if worker:
        crumbs.append((worker.get("first_name"), worker_url(worker)))
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "BreadcrumbList",
        "itemListElement": [
            {"@type": "ListItem", "position": i, "name": name, "item": url}
            for i, (name, url) in enumerate(crumbs, start=1)
        ],
    }


def organization_jsonld():
    root = base_url()
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "Organization",
        "name": site_name(),
        "description": "Find your perfect housekeeper in the Philippines. Connect employers with verified "
                       "domestic helpers, nannies, and housekeepers.",
        "url": root,
        "logo": f"{root}/static/logo.png",
        "address": {"@type": "PostalAddress", "addressCountry": "PH"},
        "serviceType": "Domestic Services",
        "areaServed": {"@type": "Country", "name": "Philippines"},
    }


def faq_jsonld():
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "FAQPage",
        "mainEntity": [
            {"@type": "Question", "name": q, "acceptedAnswer": {"@type": "Answer", "text": a}}
            for q, a in FAQ
        ],
    }


def social_meta_tags(card):
    title = f"{card.get('first_name')} - {JOB_TITLE} in {card.get('city')}, {card.get('province')}"
    skills = ", ".join((card.get("skills") or [])[:3])
    description = (f"{card.get('first_name')} is a {card.get('years_of_experience') or 0}-year experienced "
                   f"housekeeper specializing in {skills}.")
    image = _image(card.get("photo_url")) or f"{base_url()}/static/og-default.jpg"
    return {
        "og:title": title,
        "og:description": description,
        "og:image": image,
        "og:url": worker_url(card),
        "og:type": "profile",
        "og:site_name": site_name(),
        "og:locale": "en_PH",
        "twitter:card": "summary_large_image",
        "twitter:title": title,
        "twitter:description": description,
        "twitter:image": image,
    }


def canonical_url(path, query=None):
    url = f"{base_url()}{path}"
    if query:
        url += "?" + urlencode(query)
    return url


def page_title(title, name=None):
    return f"{title} | {name or site_name()}"


def meta_description(text, max_length=DESCRIPTION_LIMIT):
    if len(text) <= max_length:
        return text
    return text[:max_length - 3] + "..."


def keywords(base, additional=()):
    """Merge keyword lists, keeping first occurrences and dropping blanks."""
    seen = []
    for word in list(base) + list(additional):
        if word and word not in seen:
            seen.append(word)
    return seen


def search_page_title(city=None, province=None, skills=None):
    subject = f"{skills[0].title()} Housekeepers" if skills else "Housekeepers"
    place = ", ".join(p for p in (city, province) if p) or "the Philippines"
    return page_title(f"{subject} in {place}")


def search_page_description(total, city=None, province=None, skills=None):
    place = ", ".join(p for p in (city, province) if p) or "the Philippines"
    text = f"Browse {total} verified housekeepers and domestic helpers in {place}."
    if skills:
        text += f" Skilled in {', '.join(skills)}."
    return meta_description(text)


def robots_txt():
    root = base_url()
    return "\n".join([
        "User-agent: *",
        "Allow: /",
        "Allow: /workers",
        "Allow: /workers/*",
        "",
        "Disallow: /api",
        "Disallow: /auth",
        "Disallow: /admin",
        "Disallow: /dashboard",
        "Disallow: /static",
        "",
        "Disallow: /workers?*",
        "Disallow: /workers/*?*",
        "",
        f"Sitemap: {root}/sitemap.xml",
        "",
        "Crawl-delay: 1",
        "",
    ])


def sitemap_entries(cards, now_iso):
    root = base_url()
    entries = [
        {"loc": f"{root}/", "lastmod": now_iso, "changefreq": "daily", "priority": "1.0"},
        {"loc": f"{root}/workers", "lastmod": now_iso, "changefreq": "daily", "priority": "0.9"},
    ]
    for card in cards:
        entries.append({
            "loc": worker_url(card),
            "lastmod": card.get("updated_at") or now_iso,
            "changefreq": "weekly",
            "priority": "0.8",
        })
    return entries
