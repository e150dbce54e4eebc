import pytest

from linkvault.platforms import (
    Platform,
    classify,
    default_title_for_url,
    is_reading_platform,
    is_video_platform,
    placeholder_thumbnail,
)


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://www.tiktok.com/@chef/video/7301", Platform.TIKTOK),
        ("https://vm.tiktok.com/ZM123/", Platform.TIKTOK),
        ("https://youtube.com/shorts/abc123", Platform.YOUTUBE),
        ("https://youtu.be/abc123", Platform.YOUTUBE),
        ("https://M.YouTube.com/watch?v=abc", Platform.YOUTUBE),
        ("https://www.instagram.com/reel/Cx9/", Platform.INSTAGRAM),
        ("https://fb.watch/abc/", Platform.FACEBOOK),
        ("https://vimeo.com/12345", Platform.VIMEO),
        ("https://x.com/someone/status/1", Platform.TWITTER),
        ("https://www.linkedin.com/posts/abc", Platform.LINKEDIN),
        ("https://old.reddit.com/r/python/", Platform.REDDIT),
        ("https://medium.com/@a/post-1", Platform.MEDIUM),
        ("https://writer.substack.com/p/hello", Platform.SUBSTACK),
        ("https://github.com/psf/requests", Platform.GITHUB),
        ("https://example.com/files/Report.PDF", Platform.DOCUMENT),
        ("https://example.com/blog/my-post", Platform.ARTICLE),
        ("https://example.com/", Platform.WEBPAGE),
        ("tiktok.com/@chef/video/1", Platform.TIKTOK),
    ],
)
def test_classify_rules(url, expected):
    assert classify(url) == expected


def test_classify_host_is_matched_not_substring_of_other_domains():
    assert classify("https://notyoutube.com/watch?v=1") == Platform.WEBPAGE
    assert classify("https://example.com/?ref=tiktok.com") == Platform.WEBPAGE


@pytest.mark.parametrize("url", ["", "   ", "not a url", "http://[::1", "://"])
def test_classify_never_raises_on_malformed_input(url):
    assert classify(url) == Platform.WEBPAGE


def test_platform_groups():
    assert is_video_platform("youtube")
    assert is_video_platform(Platform.VIMEO)
    assert not is_video_platform("medium")
    assert is_reading_platform("substack")
    assert not is_reading_platform("tiktok")


@pytest.mark.parametrize(
    "url, title",
    [
        ("https://youtube.com/shorts/abc123?feature=share", "YouTube Short #abc123"),
        ("https://youtu.be/xyz789?t=10", "YouTube Video #xyz789"),
        ("https://www.youtube.com/watch?v=qwe&list=1", "YouTube Video #qwe"),
        ("https://www.tiktok.com/@chef/video/7301", "TikTok by @chef"),
        ("https://www.tiktok.com/video/7301", "TikTok #7301"),
        ("https://www.instagram.com/reel/Cx9/", "Instagram Reel #Cx9"),
        ("https://example.com/a/b", "example.com content"),
        ("http://[::1", "Untitled Content"),
    ],
)
def test_default_title_for_url(url, title):
    assert default_title_for_url(url) == title


def test_placeholder_thumbnail_keyed_by_platform():
    url = placeholder_thumbnail(Platform.YOUTUBE, "https://img.test/{platform}.png")
    assert url == "https://img.test/youtube.png"
