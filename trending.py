"""Category fetch strategies: how each featured row is searched on Prowlarr.

Every strategy takes the Prowlarr client and an item limit, plus the
options stored in the category's `source_params`, and returns FeaturedItem
dicts. Provider errors propagate so the caller can record the failure.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from featured import MEDIA_MOVIE, MEDIA_TV
from media_utils import is_adult_content
from prowlarr_client import convert_to_featured_item, is_tv_result

NEW_RELEASES_QUERY = "1080p OR 720p"
FOUR_K_QUERY = '4K OR 2160p OR UHD OR "Ultra HD"'
DOCUMENTARY_QUERY = (
    'documentary OR "BBC Documentary" OR "National Geographic" '
    'OR "Discovery Channel" OR "History Channel"'
)


def _filter_adult(items, exclude_adult):
    if not exclude_adult:
        return items
    return [item for item in items if not is_adult_content(item["title"])]


def _parse_date(value):
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def trending_movies(client, limit, min_seeders=5, exclude_adult=False, **_):
    results = client.search("*", media_type=MEDIA_MOVIE, limit=limit, min_seeders=min_seeders)
    return _filter_adult([convert_to_featured_item(r) for r in results], exclude_adult)


def popular_tv(client, limit, min_seeders=5, exclude_adult=False, **_):
    results = client.search("*", media_type=MEDIA_TV, limit=limit, min_seeders=min_seeders)
    items = []
    for result in results:
        item = convert_to_featured_item(result)
        item["media_type"] = MEDIA_TV
        items.append(item)
    return _filter_adult(items, exclude_adult)


def new_releases(client, limit, min_seeders=3, days_since_release=60, exclude_adult=False, now=None, **_):
    results = client.search(NEW_RELEASES_QUERY, media_type=MEDIA_MOVIE, limit=limit, min_seeders=min_seeders)
    cutoff = (now or datetime.now(timezone.utc)) - timedelta(days=int(days_since_release))
    items = []
    for result in results:
        published = _parse_date(result.get("publishDate"))
        if published is None or published < cutoff:
            continue
        items.append(convert_to_featured_item(result))
    return _filter_adult(items, exclude_adult)


def top_4k_content(client, limit, min_seeders=3, exclude_adult=False, **_):
    results = client.search(FOUR_K_QUERY, limit=limit, min_seeders=min_seeders)
    return _filter_adult([convert_to_featured_item(r) for r in results], exclude_adult)


def documentaries(client, limit, min_seeders=2, exclude_adult=False, **_):
    results = client.search(DOCUMENTARY_QUERY, limit=limit, min_seeders=min_seeders)
    items = []
    for result in results:
        item = convert_to_featured_item(result)
        item["media_type"] = MEDIA_TV if is_tv_result(result) else MEDIA_MOVIE
        items.append(item)
    return _filter_adult(items, exclude_adult)


STRATEGIES = {
    "trendingMovies": trending_movies,
    "popularTV": popular_tv,
    "newReleases": new_releases,
    "top4KContent": top_4k_content,
    "fourKContent": top_4k_content,
    "documentaries": documentaries,
}


def get_strategy(source):
    return STRATEGIES.get(source)
