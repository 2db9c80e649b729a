# app/services/presentation.py
#
# Presentation Helpers
# Small formatting functions used by the Jinja2 templates
# (registered as filters in app/deps.py).

import re
from typing import List, Optional
from urllib.parse import parse_qs, urlparse

DIFFICULTIES = ("easy", "medium", "hard")
DEFAULT_DIFFICULTY = "medium"

_TAG_RE = re.compile(r"<[^>]+>")
_SPACE_RE = re.compile(r"\s+")


def strip_html(text: Optional[str]) -> str:
    # Card descriptions come from a rich-text editor
    if not text:
        return ""
    return _SPACE_RE.sub(" ", _TAG_RE.sub(" ", text)).strip()


def split_tags(tags: Optional[str]) -> List[str]:
    if not tags:
        return []
    return [t.strip() for t in tags.split(",") if t.strip()]


def difficulty_label(difficulty: Optional[str]) -> str:
    return difficulty if difficulty in DIFFICULTIES else DEFAULT_DIFFICULTY


def format_file_size(size: Optional[int]) -> str:
    size = size or 0
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def format_amount(value: Optional[float]) -> str:
    if value is None:
        return ""
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def rating_stars(rating: Optional[int]) -> str:
    rating = max(0, min(5, rating or 0))
    return "★" * rating + "☆" * (5 - rating)


def youtube_embed_url(url: Optional[str]) -> Optional[str]:
    """
    Turn youtu.be / youtube.com watch, shorts or embed links into an embed URL.
    Anything else returns None.
    """
    if not url:
        return None
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return None

    host = (parsed.hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    parts = [p for p in parsed.path.split("/") if p]

    video_id = None
    if host == "youtu.be":
        video_id = parts[0] if parts else None
    elif host in ("youtube.com", "m.youtube.com"):
        if parsed.path == "/watch":
            video_id = (parse_qs(parsed.query).get("v") or [None])[0]
        elif parsed.path.startswith(("/shorts/", "/embed/")) and len(parts) > 1:
            video_id = parts[1]

    return f"https://www.youtube.com/embed/{video_id}" if video_id else None
