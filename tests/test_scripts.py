"""
Tests for the diagnostics scripts that can run without real credentials.
"""

import json
from unittest.mock import MagicMock

from sqlalchemy import inspect

from db import Base, make_engine, make_session_factory
from models import StudyCard
from scripts.check_db import check_database
from scripts.check_db import main as check_db_main
from scripts.check_storage import check_storage
from scripts.debug_attachments import describe_card
from tests.conftest import make_settings


def test_describe_card_counts_only_file_attachments():
    card = StudyCard(
        id=3,
        title="Card",
        attachments=json.dumps([
            {"kind": "card-image", "s3Key": "i", "originalName": "cover.png"},
            {"kind": "attachment", "s3Key": "f", "originalName": "a.pdf", "mimeType": "application/pdf"},
            {"s3Key": "g", "originalName": "b.txt"},
        ]),
    )

    described = describe_card(card)

    assert described["attachmentCount"] == 2
    assert described["totalItemsInJson"] == 3
    assert [d["kind"] for d in described["details"]] == ["card-image", "attachment", "attachment"]


def test_check_storage_round_trip():
    uploaded = {}
    storage = MagicMock()
    storage.root_folder = "vlholdings"
    storage.list.return_value = []

    def put(key, body, content_type=None):
        uploaded["body"] = body
        return f"vlholdings/{key}"

    storage.put.side_effect = put
    storage.get.side_effect = lambda key: uploaded["body"]

    check_storage(storage)

    key = storage.put.call_args.args[0]
    storage.presign.assert_called_once_with(f"vlholdings/{key}", expires_in=3600)


class TestCheckDb:

    def test_missing_table_fails_without_creating_it(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'empty.db'}"

        assert check_database(url) == 1

        engine = make_engine(url)
        try:
            assert not inspect(engine).has_table(StudyCard.__tablename__)
        finally:
            engine.dispose()

    def test_existing_table_passes(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'cards.db'}"
        engine = make_engine(url)
        Base.metadata.create_all(bind=engine)
        db = make_session_factory(engine)()
        db.add(StudyCard(title="Card", description=""))
        db.commit()
        db.close()
        engine.dispose()

        assert check_database(url) == 0

    def test_unreachable_database_fails(self, monkeypatch):
        def broken_engine(url):
            raise RuntimeError("could not connect to server")

        monkeypatch.setattr("scripts.check_db.make_engine", broken_engine)

        assert check_database("postgresql://nobody@nowhere/cards") == 1

    def test_main_reads_database_url(self, monkeypatch, tmp_path):
        seen = []
        monkeypatch.setattr(
            "scripts.check_db.load_settings",
            lambda: make_settings(database_url=f"sqlite:///{tmp_path / 'x.db'}"),
        )
        monkeypatch.setattr("scripts.check_db.check_database", lambda url: seen.append(url) or 0)

        assert check_db_main() == 0
        assert seen == [f"sqlite:///{tmp_path / 'x.db'}"]
