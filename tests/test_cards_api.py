"""
Tests for the read-only study cards API (/api/study-cards).
"""

from datetime import datetime

from models import StudyCard


def make_card(title, description="", category=None, created=datetime(2024, 3, 1)):
    return StudyCard(title=title, description=description, category=category, created_at=created)


class TestStudyCardsApi:

    def test_requires_key(self, client):
        assert client.get("/api/study-cards").status_code == 401

    def test_lists_newest_first(self, client, auth_headers, add_cards):
        add_cards(
            make_card("Old", created=datetime(2023, 1, 1)),
            make_card("New", created=datetime(2024, 5, 1)),
        )

        data = client.get("/api/study-cards", headers=auth_headers).json()

        assert [c["title"] for c in data["cards"]] == ["New", "Old"]
        assert data["total"] == 2
        assert data["cards"][0]["createdAt"] == "2024-05-01T00:00:00"
        assert data["cards"][0]["isCompleted"] is False

    def test_category_filter_and_category_list(self, client, auth_headers, add_cards):
        add_cards(
            make_card("A", category="Stocks"),
            make_card("B", category="Books"),
            make_card("C", category="Stocks"),
            make_card("D"),
        )

        data = client.get(
            "/api/study-cards",
            params={"category": "Stocks"},
            headers=auth_headers,
        ).json()

        assert sorted(c["title"] for c in data["cards"]) == ["A", "C"]
        assert data["categories"] == ["Books", "Stocks"]
        assert data["total"] == 4

    def test_search_is_case_insensitive_on_title_and_description(self, client, auth_headers, add_cards):
        add_cards(
            make_card("Intro to BONDS"),
            make_card("Something", description="all about bonds and yields"),
            make_card("Unrelated"),
        )

        data = client.get(
            "/api/study-cards",
            params={"search": "bonds"},
            headers=auth_headers,
        ).json()

        assert sorted(c["title"] for c in data["cards"]) == ["Intro to BONDS", "Something"]

    def test_limit_is_capped(self, client, auth_headers, add_cards):
        add_cards(*[make_card(f"Card {i}") for i in range(3)])

        limited = client.get("/api/study-cards", params={"limit": 2}, headers=auth_headers).json()
        defaulted = client.get("/api/study-cards", params={"limit": "many"}, headers=auth_headers).json()

        assert len(limited["cards"]) == 2
        assert len(defaulted["cards"]) == 3
