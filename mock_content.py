"""Static placeholder featured content.

Served when the live pipeline cannot produce anything (no Prowlarr
credentials, every tier failing) and in dry-run mode. Deterministic so the
page renders the same placeholder rows every time.
"""
from __future__ import annotations

import copy

from featured import MEDIA_MOVIE, MEDIA_TV, apply_display_fields, make_category

CONTENT_CATEGORIES = (
    ("trending-movies", "Trending Movies", MEDIA_MOVIE),
    ("popular-tv", "Popular TV Shows", MEDIA_TV),
    ("new-releases", "New Releases", MEDIA_MOVIE),
    ("4k-content", "4K Content", MEDIA_MOVIE),
    ("documentaries", "Documentaries", MEDIA_MOVIE),
)

_MOVIES = [
    ("The Batman", 2022, 7.8),
    ("Spider-Man: No Way Home", 2021, 8.2),
    ("Top Gun: Maverick", 2022, 8.3),
    ("Everything Everywhere All at Once", 2022, 8.0),
    ("Oppenheimer", 2023, 8.4),
    ("Barbie", 2023, 7.1),
    ("Poor Things", 2023, 7.9),
    ("Past Lives", 2023, 7.9),
    ("Killers of the Flower Moon", 2023, 7.7),
    ("The Holdovers", 2023, 7.9),
]

_SHOWS = [
    ("The Last of Us", 2023, 8.8),
    ("Succession", 2018, 8.9),
    ("The Bear", 2022, 8.6),
    ("Severance", 2022, 8.7),
    ("Andor", 2022, 8.4),
    ("Shogun", 2024, 8.7),
    ("Slow Horses", 2022, 8.2),
    ("Fargo", 2014, 8.9),
    ("Reservation Dogs", 2021, 8.2),
    ("Arcane", 2021, 9.0),
]

_DOCUMENTARIES = [
    ("Planet Earth III", 2023, 9.0),
    ("Free Solo", 2018, 8.1),
    ("My Octopus Teacher", 2020, 8.1),
    ("Apollo 11", 2019, 8.1),
    ("The Last Dance", 2020, 9.1),
    ("Icarus", 2017, 7.9),
    ("Jiro Dreams of Sushi", 2011, 7.9),
    ("Honeyland", 2019, 8.0),
    ("Fire of Love", 2022, 7.7),
    ("Navalny", 2022, 7.7),
]


def _mock_item(prefix, index, title, year, rating, media_type, quality="1080p"):
    item = {
        "guid": f"mock-{prefix}-{index}",
        "indexer_id": "mock",
        "title": f"{title} ({year}) {quality}",
        "clean_title": title,
        "year": year,
        "quality": quality,
        "size": 2_500_000_000 + index * 100_000_000,
        "protocol": "torrent",
        "media_type": media_type,
        "seeders": 100 - index * 5,
        "leechers": 10,
        "tmdb_info": {
            "title": title,
            "overview": f"Placeholder entry for {title}.",
            "year": year,
            "vote_average": rating,
            "genre_ids": [],
        },
    }
    return apply_display_fields(item)


def _rows(prefix, entries, media_type, quality="1080p"):
    return [
        _mock_item(prefix, i, title, year, rating, media_type, quality)
        for i, (title, year, rating) in enumerate(entries)
    ]


def _build():
    hero = _mock_item("featured", 0, "Dune: Part Two", 2024, 8.5, MEDIA_MOVIE, quality="2160p")
    hero["tmdb_info"].update({
        "tmdb_id": 693134,
        "overview": (
            "Paul Atreides unites with Chani and the Fremen while seeking revenge "
            "against the conspirators who destroyed his family."
        ),
        "release_date": "2024-03-01",
        "runtime": 166,
    })
    apply_display_fields(hero)
    rows = {
        "trending-movies": _rows("trending", _MOVIES, MEDIA_MOVIE),
        "popular-tv": _rows("popular", _SHOWS, MEDIA_TV),
        "new-releases": _rows("new", list(reversed(_MOVIES)), MEDIA_MOVIE),
        "4k-content": _rows("4k", _MOVIES, MEDIA_MOVIE, quality="2160p"),
        "documentaries": _rows("doc", _DOCUMENTARIES, MEDIA_MOVIE),
    }
    return {
        "featured_item": hero,
        "categories": [make_category(cid, title, rows[cid]) for cid, title, _ in CONTENT_CATEGORIES],
        "source": "mock",
    }


_MOCK_CONTENT = _build()


def get_mock_featured_content():
    """Return a fresh copy of the static placeholder snapshot."""
    return copy.deepcopy(_MOCK_CONTENT)
