from flask import abort, make_response, redirect, render_template, url_for

from . import bp
from ...models.employee_profile import EmployeeProfile
from ...services import seo
from ...services.slugs import generate_slug, parse_slug
from ...utils.time import isoformat, utcnow

DAY = 86400


def _live_in_keyword(employment_type):
    return {"LIVE_IN": "live-in", "LIVE_OUT": "live-out", "BOTH": "live-in"}.get(employment_type)


@bp.get("/robots.txt")
def robots():
    response = make_response(seo.robots_txt())
    response.mimetype = "text/plain"
    response.headers["Cache-Control"] = f"public, max-age={DAY}"
    return response


@bp.get("/sitemap.xml")
def sitemap():
    profiles = EmployeeProfile.query.filter_by(visibility=True).order_by(EmployeeProfile.user_id).all()
    entries = seo.sitemap_entries([seo.profile_card(p) for p in profiles], isoformat(utcnow()))
    response = make_response(render_template("public/sitemap.xml", entries=entries))
    response.mimetype = "application/xml"
    response.headers["Cache-Control"] = f"public, max-age={DAY // 24}"
    return response


@bp.get("/workers/<slug>")
def worker(slug):
    parsed = parse_slug(slug)
    if parsed is None or not parsed["user_id"].isdigit():
        abort(404, "Worker not found")

    profile = EmployeeProfile.query.filter_by(user_id=int(parsed["user_id"]), visibility=True).first()
    if profile is None:
        abort(404, "Worker not found")

    canonical = generate_slug(profile.first_name, profile.city, profile.user_id)
    if slug != canonical:
        return redirect(url_for("public.worker", slug=canonical), code=301)

    card = seo.profile_card(profile)
    skills = card["skills"]
    description = seo.meta_description(
        f"{card['first_name']} is a {card['years_of_experience']}-year experienced housekeeper in "
        f"{card['city']}, {card['province']}. Specializes in {', '.join(skills[:3])}. "
        f"{card.get('headline') or 'Available for live-in and live-out work.'}"
    )
    return render_template(
        "public/worker.html",
        card=card,
        title=seo.page_title(f"{card['first_name']} - Housekeeper in {card['city']}, {card['province']}"),
        description=description,
        keywords=seo.keywords(seo.BASE_KEYWORDS, [card["first_name"], card["city"], card["province"], *skills,
                                                  _live_in_keyword(card["live_in_out"])]),
        canonical=seo.canonical_url(f"/workers/{canonical}"),
        social=seo.social_meta_tags(card),
        structured_data=[
            seo.person_jsonld(card),
            seo.breadcrumb_jsonld(card["province"], card["city"], card),
        ],
    )
