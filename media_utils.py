from __future__ import annotations

import re

_YEAR_RE = re.compile(r"\b(19|20)\d{2}\b")
_QUALITY_RE = re.compile(r"\b(720p|1080p|2160p|4K)\b", re.IGNORECASE)
_TMDB_ID_RE = re.compile(r"\bTMDB[:\s-]*(\d+)\b", re.IGNORECASE)
_RELEASE_TAGS_RE = re.compile(
    r"\b(720p|1080p|2160p|4K|HDTV|WEB-DL|WEBRip|BRRip|BluRay|x264|x265|HEVC|AAC|AC3|REMUX)\b",
    re.IGNORECASE,
)
_GROUP_TAGS_RE = re.compile(
    r"\b(XviD|DTS|DD5\.1|FLAC|YIFY|RARBG|SPARKS|DRONES|AMIABLE|FGT|VYNDROS)\b",
    re.IGNORECASE,
)
_BRACKETS_RE = re.compile(r"\[.*?\]|\(.*?\)|\{.*?\}")

ADULT_KEYWORDS = (
    "xxx", "porn", "adult", "sex", "erotic", "nude", "naked",
    "hentai", "brazzers", "playboy", "penthouse",
)


def human_size(size_bytes):
    if not size_bytes:
        return "?"
    for unit in ("B", "KB", "MB", "GB"):
        if abs(size_bytes) < 1024:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.1f} TB"


def extract_year(title):
    match = _YEAR_RE.search(title or "")
    return int(match.group(0)) if match else None


def extract_quality(title):
    match = _QUALITY_RE.search(title or "")
    return match.group(0).lower() if match else None


def extract_tmdb_id(title):
    """Return the TMDb id embedded in a release title (e.g. "TMDB:603"), if any."""
    match = _TMDB_ID_RE.search(title or "")
    return int(match.group(1)) if match else None


def clean_title(title):
    """Strip release-group noise from a torrent title for display and lookups."""
    cleaned = _RELEASE_TAGS_RE.sub("", title or "")
    cleaned = _GROUP_TAGS_RE.sub("", cleaned)
    cleaned = _BRACKETS_RE.sub("", cleaned)
    cleaned = re.sub(r"\.(mkv|mp4|avi|m4v|wmv|ts)$", "", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"[._-]", " ", cleaned)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    # drop everything from the release year on ("Blade Runner 2049 2017 GRP")
    years = list(_YEAR_RE.finditer(cleaned))
    if years and years[-1].start() > 0:
        cleaned = cleaned[:years[-1].start()].strip()
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), cleaned)


def is_adult_content(title):
    lowered = (title or "").lower()
    return any(keyword in lowered for keyword in ADULT_KEYWORDS)
