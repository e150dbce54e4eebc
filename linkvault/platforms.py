import re
from enum import Enum
from typing import NamedTuple, Tuple
from urllib.parse import parse_qs, quote_plus, urlparse


class Platform(str, Enum):
    TIKTOK = "tiktok"
    YOUTUBE = "youtube"
    INSTAGRAM = "instagram"
    FACEBOOK = "facebook"
    VIMEO = "vimeo"
    TWITTER = "twitter"
    LINKEDIN = "linkedin"
    REDDIT = "reddit"
    MEDIUM = "medium"
    SUBSTACK = "substack"
    GITHUB = "github"
    ARTICLE = "article"
    DOCUMENT = "document"
    WEBPAGE = "webpage"


DEFAULT_PLATFORM = Platform.WEBPAGE

VIDEO_PLATFORMS = {
    Platform.YOUTUBE,
    Platform.TIKTOK,
    Platform.INSTAGRAM,
    Platform.FACEBOOK,
    Platform.VIMEO,
}
READING_PLATFORMS = {
    Platform.MEDIUM,
    Platform.SUBSTACK,
    Platform.ARTICLE,
    Platform.DOCUMENT,
    Platform.WEBPAGE,
    Platform.GITHUB,
    Platform.REDDIT,
    Platform.LINKEDIN,
}
KNOWN_PLATFORMS = frozenset(p.value for p in Platform)

# scope selectors; never valid as a platform id
ALL_SCOPE = "all"
TAB_SCOPE_PREFIX = "tab:"


class HostRule(NamedTuple):
    platform: Platform
    hosts: Tuple[str, ...]


# First match wins.
HOST_RULES: Tuple[HostRule, ...] = (
    HostRule(Platform.TIKTOK, ("tiktok.com",)),
    HostRule(Platform.YOUTUBE, ("youtube.com", "youtu.be", "youtube-nocookie.com")),
    HostRule(Platform.INSTAGRAM, ("instagram.com", "instagr.am")),
    HostRule(Platform.FACEBOOK, ("facebook.com", "fb.watch", "fb.com")),
    HostRule(Platform.VIMEO, ("vimeo.com",)),
    HostRule(Platform.TWITTER, ("twitter.com", "x.com", "t.co")),
    HostRule(Platform.LINKEDIN, ("linkedin.com", "lnkd.in")),
    HostRule(Platform.REDDIT, ("reddit.com", "redd.it")),
    HostRule(Platform.MEDIUM, ("medium.com",)),
    HostRule(Platform.SUBSTACK, ("substack.com",)),
    HostRule(Platform.GITHUB, ("github.com", "gist.github.com")),
)

DOCUMENT_EXTENSIONS = (".pdf", ".doc", ".docx", ".ppt", ".pptx", ".xls", ".xlsx", ".odt", ".epub")
ARTICLE_SEGMENTS = {"article", "articles", "blog", "blogs", "news", "post", "posts", "story"}


def _parse(url: str):
    text = url.strip()
    if "://" not in text:
        text = "//" + text
    return urlparse(text)


def _host_matches(host: str, domain: str) -> bool:
    return host == domain or host.endswith("." + domain)


def classify(url: str) -> Platform:
    """Map a URL to a platform; never raises, falls back to ``webpage``."""
    if not isinstance(url, str) or not url.strip():
        return DEFAULT_PLATFORM
    try:
        parsed = _parse(url)
        host = (parsed.hostname or "").lower()
    except ValueError:
        return DEFAULT_PLATFORM

    for rule in HOST_RULES:
        if any(_host_matches(host, domain) for domain in rule.hosts):
            return rule.platform

    path = parsed.path.lower()
    if path.endswith(DOCUMENT_EXTENSIONS):
        return Platform.DOCUMENT
    segments = {segment for segment in path.split("/") if segment}
    if segments & ARTICLE_SEGMENTS:
        return Platform.ARTICLE
    return DEFAULT_PLATFORM


def normalize_platform(value: str) -> str:
    return str.strip(value).lower()


def is_reserved_platform(value: str) -> bool:
    text = normalize_platform(value or "")
    return not text or text == ALL_SCOPE or text.startswith(TAB_SCOPE_PREFIX)


def is_video_platform(platform: str) -> bool:
    return normalize_platform(platform) in {p.value for p in VIDEO_PLATFORMS}


def is_reading_platform(platform: str) -> bool:
    return normalize_platform(platform) in {p.value for p in READING_PLATFORMS}


def _first_segment_after(path: str, marker: str) -> str | None:
    parts = [p for p in path.split("/") if p]
    if marker in parts:
        idx = parts.index(marker)
        if idx + 1 < len(parts):
            return parts[idx + 1]
    return None


def default_title_for_url(url: str) -> str:
    """
    Human-friendly fallback title when no metadata title is available:
    - youtube.com/shorts/ID -> "YouTube Short #ID"
    - youtu.be/ID or watch?v=ID -> "YouTube Video #ID"
    - tiktok.com/@user/video/ID -> "TikTok by @user" (or "TikTok #ID")
    - instagram.com/reel/ID -> "Instagram Reel #ID"
    - otherwise "<host> content", or "Untitled Content"
    """
    try:
        parsed = _parse(url)
        host = (parsed.hostname or "").lower()
    except ValueError:
        return "Untitled Content"

    if _host_matches(host, "youtube.com"):
        short_id = _first_segment_after(parsed.path, "shorts")
        if short_id:
            return f"YouTube Short #{short_id}"
        vals = parse_qs(parsed.query).get("v")
        if vals:
            return f"YouTube Video #{vals[0]}"
    if _host_matches(host, "youtu.be"):
        video_id = parsed.path.strip("/").split("/")[0]
        if video_id:
            return f"YouTube Video #{video_id}"
    if _host_matches(host, "tiktok.com"):
        user = re.search(r"/@([^/]+)", parsed.path)
        video = re.search(r"/video/(\d+)", parsed.path)
        if user and video:
            return f"TikTok by @{user.group(1)}"
        if video:
            return f"TikTok #{video.group(1)}"
    if _host_matches(host, "instagram.com"):
        reel_id = _first_segment_after(parsed.path, "reel")
        if reel_id:
            return f"Instagram Reel #{reel_id}"

    if host:
        return f"{host} content"
    return "Untitled Content"


def placeholder_thumbnail(platform: str, template: str) -> str:
    return template.format(platform=quote_plus(normalize_platform(platform)))
