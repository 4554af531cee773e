"""Notes service tests."""

import json
from datetime import UTC, datetime

import pytest

from notesearch.notes.schemas import NoteStats, NoteUpsert
from notesearch.notes.service import NotesService, extract_tags, note_from_export


@pytest.fixture
def notes_service(temp_db):
    return NotesService(temp_db)


def export(note_id, title="悉尼买手店", content="精品店推荐 #买手店 #Sydney", **detail):
    return {
        "noteId": note_id,
        "originalInput": f"https://www.xiaohongshu.com/explore/{note_id}",
        "timestamp": "2024-05-01T08:00:00.000Z",
        "detail": {
            "title": title,
            "content": content,
            "author": "小红薯",
            "stats": {"likes": "1.2万", "comments": 35, "collects": "800"},
            "images": ["https://img/1.jpg"],
            **detail,
        },
    }


class TestExtractTags:
    """Tests for hashtag extraction."""

    def test_extracts_cjk_and_ascii_tags(self):
        assert extract_tags("好店 #买手店 #Sydney2024 推荐") == ["买手店", "Sydney2024"]

    def test_deduplicates_keeping_order(self):
        assert extract_tags("#咖啡 #拉花 #咖啡") == ["咖啡", "拉花"]

    def test_stops_at_punctuation(self):
        assert extract_tags("#精品店！#时尚,") == ["精品店", "时尚"]

    def test_no_tags(self):
        assert extract_tags("没有标签") == []
        assert extract_tags("") == []


class TestCrud:
    """Tests for note storage."""

    def test_upsert_and_get(self, notes_service):
        note = notes_service.upsert(
            NoteUpsert(note_id="n1", title="标题", content="正文 #标签", author="作者", url="u")
        )

        assert note.note_id == "n1"
        assert note.tags == ["标签"]
        assert notes_service.get("n1") == note

    def test_defaults_for_missing_title_and_author(self, notes_service):
        note = notes_service.upsert(NoteUpsert(note_id="n1", title="", author=""))

        assert note.title == "无标题"
        assert note.author == "匿名用户"

    def test_upsert_replaces_and_keeps_created_at(self, notes_service):
        created = datetime(2024, 1, 1, tzinfo=UTC)
        first = notes_service.upsert(NoteUpsert(note_id="n1", title="旧"), created_at=created)
        second = notes_service.upsert(NoteUpsert(note_id="n1", title="新", content="#新标签"))

        assert second.id == first.id
        assert second.title == "新"
        assert second.tags == ["新标签"]
        assert second.created_at == created
        assert notes_service.count() == 1

    def test_stats_and_images_round_trip(self, notes_service):
        notes_service.upsert(
            NoteUpsert(
                note_id="n1",
                images=["a.jpg", "b.jpg"],
                stats=NoteStats(likes="1.2万", comments="3", collects="4"),
            )
        )

        note = notes_service.get("n1")
        assert note.images == ["a.jpg", "b.jpg"]
        assert note.stats.likes == "1.2万"

    def test_get_missing_returns_none(self, notes_service):
        assert notes_service.get("missing") is None

    def test_delete(self, notes_service):
        notes_service.upsert(NoteUpsert(note_id="n1"))

        assert notes_service.delete("n1") is True
        assert notes_service.get("n1") is None
        assert notes_service.delete("n1") is False

    def test_list_filters_by_author_and_paginates(self, notes_service):
        for i in range(5):
            notes_service.upsert(
                NoteUpsert(note_id=f"n{i}", author="Alice" if i % 2 == 0 else "Bob"),
                created_at=datetime(2024, 1, i + 1, tzinfo=UTC),
            )

        alice = notes_service.list(author="alice")
        assert [n.note_id for n in alice] == ["n4", "n2", "n0"]
        assert notes_service.count(author="alice") == 3

        page = notes_service.list(limit=2, offset=1)
        assert [n.note_id for n in page] == ["n3", "n2"]
        assert notes_service.count() == 5

    def test_search_keyword_is_case_insensitive(self, notes_service):
        notes_service.upsert(NoteUpsert(note_id="n1", title="Sydney Boutique", content="x"))
        notes_service.upsert(NoteUpsert(note_id="n2", title="餐厅", content="意面 boutique"))
        notes_service.upsert(NoteUpsert(note_id="n3", title="咖啡", content="手冲"))

        assert {n.note_id for n in notes_service.search_keyword("BOUTIQUE")} == {"n1", "n2"}
        assert [n.note_id for n in notes_service.search_keyword("手冲")] == ["n3"]
        assert notes_service.search_keyword("  ") == []

    def test_iter_all_pages_through_every_note(self, notes_service):
        for i in range(7):
            notes_service.upsert(NoteUpsert(note_id=f"n{i}"))

        assert len(list(notes_service.iter_all(page_size=3))) == 7


class TestImport:
    """Tests for importing crawler exports."""

    def test_note_from_export_maps_fields(self):
        note, created = note_from_export(export("abc"))

        assert note.note_id == "abc"
        assert note.url == "https://www.xiaohongshu.com/explore/abc"
        assert note.stats.likes == "1.2万"
        assert note.stats.comments == "35"
        assert created == datetime(2024, 5, 1, 8, 0, tzinfo=UTC)

    def test_note_from_export_requires_note_id(self):
        with pytest.raises(ValueError):
            note_from_export({"detail": {"title": "x"}})

    def test_epoch_millisecond_timestamp(self):
        data = export("abc")
        data["timestamp"] = 1714550400000

        _, created = note_from_export(data)

        assert created == datetime(2024, 5, 1, 8, 0, tzinfo=UTC)

    def test_import_directory(self, notes_service, tmp_path):
        (tmp_path / "a.json").write_text(json.dumps(export("a")), encoding="utf-8")
        (tmp_path / "b.json").write_text(
            json.dumps(export("b", title="", content="")), encoding="utf-8"
        )
        (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
        (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

        imported = notes_service.import_directory(tmp_path)

        assert imported == 2
        note_a = notes_service.get("a")
        assert note_a.tags == ["买手店", "Sydney"]
        assert note_a.created_at == datetime(2024, 5, 1, 8, 0, tzinfo=UTC)
        assert notes_service.get("b").title == "无标题"

    def test_import_skips_existing_unless_overwrite(self, notes_service, tmp_path):
        notes_service.upsert(NoteUpsert(note_id="a", title="本地修改"))
        (tmp_path / "a.json").write_text(json.dumps(export("a")), encoding="utf-8")

        assert notes_service.import_directory(tmp_path) == 0
        assert notes_service.get("a").title == "本地修改"

        assert notes_service.import_directory(tmp_path, overwrite=True) == 1
        assert notes_service.get("a").title == "悉尼买手店"

    def test_import_missing_directory_raises(self, notes_service, tmp_path):
        with pytest.raises(FileNotFoundError):
            notes_service.import_directory(tmp_path / "missing")
