"""Featured content records and display-field derivation.

A FeaturedContent snapshot is a plain JSON-serializable dict:

    {
        "featured_item": <item or None>,
        "categories": [{"id": ..., "title": ..., "items": [<item>, ...]}, ...],
        "source": "live" | "mock",
    }

Items carry the raw indexer fields, an optional "tmdb_info" block and the
derived "display_*" fields that the UI renders.
"""
from __future__ import annotations

PLACEHOLDER_OVERVIEW = "No overview available."
PLACEHOLDER_POSTER = "/api/placeholder/500/750"
PLACEHOLDER_BACKDROP = "/api/placeholder/1920/1080"
DEFAULT_IMAGE_BASE_URL = "https://image.tmdb.org/t/p"

MEDIA_MOVIE = "movie"
MEDIA_TV = "tv"
MEDIA_TYPES = (MEDIA_MOVIE, MEDIA_TV)

# TMDb's fixed genre list (movie + tv)
GENRE_NAMES = {
    12: "Adventure", 14: "Fantasy", 16: "Animation", 18: "Drama", 27: "Horror",
    28: "Action", 35: "Comedy", 36: "History", 37: "Western", 53: "Thriller",
    80: "Crime", 99: "Documentary", 878: "Science Fiction", 9648: "Mystery",
    10402: "Music", 10749: "Romance", 10751: "Family", 10752: "War",
    10759: "Action & Adventure", 10762: "Kids", 10763: "News", 10764: "Reality",
    10765: "Sci-Fi & Fantasy", 10766: "Soap", 10767: "Talk", 10768: "War & Politics",
    10770: "TV Movie",
}


def make_category(category_id, title, items=None):
    return {"id": category_id, "title": title, "items": list(items or [])}


def iter_items(content):
    """Yield hero + category items in display order (duplicates included)."""
    hero = content.get("featured_item")
    if hero:
        yield hero
    for category in content.get("categories") or []:
        for item in category.get("items") or []:
            yield item


def dedupe_items(items):
    seen = set()
    unique = []
    for item in items:
        guid = item.get("guid")
        if guid in seen:
            continue
        seen.add(guid)
        unique.append(item)
    return unique


def image_url(path, size, image_base_url=DEFAULT_IMAGE_BASE_URL):
    if not path:
        return None
    if path.startswith(("http://", "https://", "/api/")):
        return path
    return f"{image_base_url}/{size}{path}"


def year_from_date(value):
    if value and len(value) >= 4 and value[:4].isdigit():
        return int(value[:4])
    return None


def apply_display_fields(item, image_base_url=DEFAULT_IMAGE_BASE_URL):
    """Populate display_* fields from tmdb_info, falling back to raw fields.

    Works on items without enrichment, so display fields are never missing.
    """
    info = item.get("tmdb_info") or {}
    item["display_title"] = info.get("title") or item.get("title") or ""
    item["display_overview"] = info.get("overview") or PLACEHOLDER_OVERVIEW
    item["display_year"] = (
        info.get("year")
        or year_from_date(info.get("release_date"))
        or year_from_date(info.get("first_air_date"))
        or item.get("year")
    )
    item["display_rating"] = info.get("vote_average") or 0
    item["display_genres"] = [GENRE_NAMES[g] for g in info.get("genre_ids") or [] if g in GENRE_NAMES]
    item["full_poster_path"] = image_url(info.get("poster_path"), "w500", image_base_url) or PLACEHOLDER_POSTER
    item["full_backdrop_path"] = (
        image_url(info.get("backdrop_path"), "original", image_base_url) or PLACEHOLDER_BACKDROP
    )
    item.setdefault("in_library", False)
    item.setdefault("is_downloading", False)
    item.setdefault("is_processing", False)
    return item

