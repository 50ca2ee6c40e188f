import re
import unicodedata

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_DASHES = re.compile(r"-+")


def slugify(text):
    """Lowercase ASCII slug: accents folded, punctuation dropped, spaces to dashes."""
    folded = unicodedata.normalize("NFKD", str(text or "")).encode("ascii", "ignore").decode("ascii")
    slug = _DISALLOWED.sub("", folded.lower())
    slug = _WHITESPACE.sub("-", slug.strip())
    return _DASHES.sub("-", slug).strip("-")


def generate_slug(first_name, city, user_id):
    return slugify(f"{first_name} {city} {user_id}")


def parse_slug(slug):
    """Split ``{name}-{city}-{userId}`` back into its parts.

    The user id is the last segment and the city the one before it, so
    multi-word cities fold into the name. Returns None when the slug has
    fewer than three segments.
    """
    parts = [p for p in (slug or "").split("-") if p]
    if len(parts) < 3:
        return None
    return {
        "first_name": "-".join(parts[:-2]),
        "city": parts[-2],
        "user_id": parts[-1],
    }
