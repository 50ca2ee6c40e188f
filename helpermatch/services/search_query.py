import calendar

PAGE_SIZE = 24
FACETS = ["city", "province", "skills", "live_in_out", "experience_band"]

SORTS = {
    "relevance": [],
    "newest": ["updated_at:desc"],
    "salary_high": ["salary_max:desc"],
    "salary_low": ["salary_min:asc"],
    "experience_high": ["years_of_experience:desc"],
    "experience_low": ["years_of_experience:asc"],
}

# a candidate open to both arrangements matches either request
_ARRANGEMENT_MATCHES = {
    "LIVE_IN": ("LIVE_IN", "BOTH"),
    "LIVE_OUT": ("LIVE_OUT", "BOTH"),
}


def quote(value):
    text = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{text}"'


def build_filter(city=None, province=None, skills=None, live_in_out=None, experience_band=None,
                 salary_min=None, salary_max=None, available_from=None):
    """Meilisearch filter expression for the search page, or None.

    Skills are OR'd together; everything else is AND'd. Salary bounds match
    overlapping ranges: a candidate qualifies when their range intersects
    the requested one.
    """
    parts = []
    if city:
        parts.append(f"city = {quote(city)}")
    if province:
        parts.append(f"province = {quote(province)}")
    if skills:
        parts.append("(" + " OR ".join(f"skills = {quote(s)}" for s in skills) + ")")
    if live_in_out in _ARRANGEMENT_MATCHES:
        parts.append("live_in_out IN [" + ", ".join(quote(v) for v in _ARRANGEMENT_MATCHES[live_in_out]) + "]")
    if experience_band:
        parts.append(f"experience_band = {quote(experience_band)}")
    if salary_min is not None:
        parts.append(f"salary_max >= {int(salary_min)}")
    if salary_max is not None:
        parts.append(f"salary_min <= {int(salary_max)}")
    if available_from is not None:
        parts.append(f"availability_ts >= {calendar.timegm(available_from.timetuple())}")
    return " AND ".join(parts) or None


def sort_for(key):
    return list(SORTS.get(key or "relevance", []))


def total_pages(total_hits, page_size=PAGE_SIZE):
    return (total_hits + page_size - 1) // page_size if total_hits else 0
