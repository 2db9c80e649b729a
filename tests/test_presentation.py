"""
Tests for the template helpers and the attachment list helpers.
"""

import json

import pytest

from models import StudyCard
from app.services.attachments import (
    make_attachment,
    parse_attachments,
    split_card_attachments,
    stored_keys,
)
from app.services.presentation import (
    difficulty_label,
    format_amount,
    format_file_size,
    rating_stars,
    split_tags,
    strip_html,
    youtube_embed_url,
)


class TestYoutubeEmbed:

    @pytest.mark.parametrize("url", [
        "https://www.youtube.com/watch?v=abc123",
        "https://youtube.com/watch?v=abc123&t=30s",
        "https://youtu.be/abc123",
        "https://www.youtube.com/shorts/abc123",
        "https://www.youtube.com/embed/abc123",
        "https://m.youtube.com/watch?v=abc123",
    ])
    def test_known_forms(self, url):
        assert youtube_embed_url(url) == "https://www.youtube.com/embed/abc123"

    @pytest.mark.parametrize("url", [None, "", "https://vimeo.com/123", "https://www.youtube.com/watch", "not a url"])
    def test_other_links(self, url):
        assert youtube_embed_url(url) is None


class TestFormatting:

    @pytest.mark.parametrize("size, expected", [
        (None, "0 B"),
        (512, "512 B"),
        (1536, "1.5 KB"),
        (5 * 1024 * 1024, "5.0 MB"),
    ])
    def test_file_size(self, size, expected):
        assert format_file_size(size) == expected

    def test_amount(self):
        assert format_amount(None) == ""
        assert format_amount(1500.0) == "1,500"
        assert format_amount(12.5) == "12.50"

    def test_strip_html(self):
        assert strip_html("<p>Hello<br>world</p>") == "Hello world"
        assert strip_html(None) == ""

    def test_tags(self):
        assert split_tags(" a, b ,,c ") == ["a", "b", "c"]
        assert split_tags(None) == []

    def test_difficulty_defaults_to_medium(self):
        assert difficulty_label("hard") == "hard"
        assert difficulty_label(None) == "medium"
        assert difficulty_label("extreme") == "medium"

    def test_stars_are_clamped(self):
        assert rating_stars(3) == "★★★☆☆"
        assert rating_stars(None) == "☆☆☆☆☆"
        assert rating_stars(9) == "★★★★★"


class TestAttachments:

    def test_malformed_json_is_empty(self):
        assert parse_attachments("{oops") == []
        assert parse_attachments('{"kind": "attachment"}') == []
        assert parse_attachments(None) == []

    def test_non_dict_items_are_dropped(self):
        assert parse_attachments('[1, "x", {"s3Key": "a"}]') == [{"s3Key": "a"}]

    def test_make_attachment_picks_subfolder(self):
        image = make_attachment("k", "u", "a.png", "image/png", 3, kind="card-image")
        file = make_attachment("k", "u", "a.pdf", "application/pdf", 3)

        assert image["subfolder"] == "study-cards/images"
        assert file["subfolder"] == "study-cards/attachments"
        assert file["kind"] == "attachment"

    def test_split_keeps_original_indexes(self):
        card = StudyCard(attachments=json.dumps([
            {"kind": "attachment", "s3Key": "f0"},
            {"kind": "card-image", "s3Key": "i1", "url": "https://x/i1"},
            {"s3Key": "f2"},
        ]))

        gallery, files = split_card_attachments(card)

        assert [(g["s3Key"], g["index"]) for g in gallery] == [("i1", 1)]
        assert [(f["s3Key"], f["index"]) for f in files] == [("f0", 0), ("f2", 2)]

    def test_legacy_image_is_shown_first(self):
        card = StudyCard(
            image_url="https://x/cover.jpg",
            image_s3_key="cover-key",
            attachments=json.dumps([{"kind": "card-image", "s3Key": "i1", "url": "https://x/i1"}]),
        )

        gallery, _ = split_card_attachments(card)

        assert [g["url"] for g in gallery] == ["https://x/cover.jpg", "https://x/i1"]
        assert gallery[0]["index"] is None

    def test_legacy_image_not_duplicated(self):
        card = StudyCard(
            image_url="https://x/i1",
            image_s3_key="i1",
            attachments=json.dumps([{"kind": "card-image", "s3Key": "i1", "url": "https://x/i1"}]),
        )

        gallery, _ = split_card_attachments(card)

        assert len(gallery) == 1

    def test_stored_keys(self):
        card = StudyCard(
            image_s3_key="cover",
            attachments=json.dumps([{"s3Key": "a"}, {"url": "no-key"}, {"s3Key": "cover"}]),
        )

        assert stored_keys(card) == ["a", "cover"]
