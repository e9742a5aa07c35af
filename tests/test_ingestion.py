import asyncio
from unittest.mock import AsyncMock, patch

import pytest
from pymongo.errors import OperationFailure

from conftest import FakeCollection
from recruitops.services.ingestion import (
    candidate_from_record, draft_from_document, ingest_records, ingest_upload, placeholder_name,
)
from recruitops.utils.exceptions import DatabaseError, ValidationError

RESUME = b"Mona Adel\nGraphic Designer\nCairo, Egypt\nmona@example.com\nPhotoshop, Illustrator\n"


@pytest.fixture
def stored_document():
    with patch("recruitops.services.ingestion.store_document",
               AsyncMock(return_value=("f1", "/api/documents/f1"))) as store:
        yield store


@pytest.fixture
def tables(staging, pool):
    with patch("recruitops.services.ingestion.unvetted_coll", staging), \
            patch("recruitops.services.ingestion.candidates_coll", pool):
        yield staging, pool


class TestUpload:
    """Uploads are stored, parsed and staged with the fixed review score"""

    def test_staged_with_placeholder_score(self, stored_document, tables):
        staging, _ = tables
        result = asyncio.run(ingest_upload(RESUME, "mona_adel.txt", "text/plain"))

        row = result["candidate"]
        assert result["table"] == "unvetted"
        assert result["duplicate"] is False
        assert row["full_name"] == "Mona Adel"
        assert row["source"] == "PDF Upload"
        assert row["match_score"] == 10
        assert row["status"] == "New"
        assert row["resume_url"] == "/api/documents/f1"
        assert row["resume_file_id"] == "f1"
        assert row["identity_key"] == "mona@example.com"
        assert len(staging.rows) == 1

    def test_duplicate_returns_existing_row(self, stored_document, tables):
        staging, _ = tables
        staging.rows.append({"candidate_id": "c0", "identity_key": "mona@example.com", "full_name": "Mona"})
        result = asyncio.run(ingest_upload(RESUME, "mona.txt"))

        assert result["duplicate"] is True
        assert result["candidate"]["candidate_id"] == "c0"
        assert len(staging.rows) == 1

    def test_staging_failure_falls_back_to_pool(self, stored_document, tables):
        staging, pool = tables
        staging.insert_one = AsyncMock(side_effect=OperationFailure("not primary"))
        result = asyncio.run(ingest_upload(RESUME, "mona.txt"))

        assert result["table"] == "candidates"
        assert pool.rows[0]["status"] == "Unvetted"

    def test_both_writes_failing_is_fatal(self, stored_document, tables):
        staging, pool = tables
        staging.insert_one = AsyncMock(side_effect=OperationFailure("not primary"))
        pool.insert_one = AsyncMock(side_effect=OperationFailure("not primary"))
        with pytest.raises(DatabaseError):
            asyncio.run(ingest_upload(RESUME, "mona.txt"))

    def test_missing_or_unsupported_file(self, stored_document, tables):
        with pytest.raises(ValidationError):
            asyncio.run(ingest_upload(b"", "cv.pdf"))
        with pytest.raises(ValidationError):
            asyncio.run(ingest_upload(b"MZ", "setup.exe"))
        stored_document.assert_not_awaited()

    @patch("recruitops.helpers.parsing.read_pdf", side_effect=ValueError("broken xref"))
    def test_unreadable_pdf_still_stages(self, _read_pdf, stored_document, tables):
        row = asyncio.run(ingest_upload(b"%PDF-garbage", "jane_doe_cv.pdf"))["candidate"]
        assert row["full_name"] == "jane doe cv"
        assert row["location"] == "Remote"
        assert row["resume_text"] is None


def test_placeholder_name():
    assert placeholder_name("jane-doe_cv.pdf") == "jane doe cv"
    assert placeholder_name("") == "Unknown Candidate"


def test_draft_from_document_defaults():
    draft = draft_from_document("", "x.pdf")
    assert draft.full_name == "x"
    assert draft.title == "Candidate"
    assert draft.match_reason.startswith("Parsed from PDF")


class TestBatchImport:

    def test_record_mapping(self):
        draft = candidate_from_record({"name": "Ali", "skills": "React, Python", "linkedin": "https://www.linkedin.com/in/ali"})
        assert draft.full_name == "Ali"
        assert [s.name for s in draft.technologies] == ["React", "Python"]
        assert draft.source == "JSON Import"

    def test_record_lists_are_capped(self):
        record = {
            "full_name": "Nour Hassan",
            "skills": [f"Skill {i}" for i in range(10)],
            "tools": ["Figma", "Sketch", "Jira", "Slack", "Notion", "Miro", "Trello", "Asana"],
            "work_history": [{"company": f"Studio {i}", "title": "Designer", "years": 1} for i in range(5)],
        }
        draft = candidate_from_record(record)

        assert [s.name for s in draft.technologies] == [f"Skill {i}" for i in range(6)]
        assert len(draft.tools) == 6
        assert [w.company for w in draft.work_history] == ["Studio 0", "Studio 1", "Studio 2"]

    def test_upsert_by_identity_key(self, tables):
        _, pool = tables
        records = [
            {"name": "Ali", "email": "ali@example.com"},
            {"full_name": "", "email": "ghost@example.com"},
            {"name": "Ali Hassan", "email": "ali@example.com", "source": "Referral"},
        ]
        result = asyncio.run(ingest_records(records))

        assert result["count"] == 2
        assert result["errors"][0]["index"] == 1
        assert len(pool.rows) == 1
        assert pool.rows[0]["full_name"] == "Ali Hassan"
        assert pool.rows[0]["source"] == "Referral"
        assert pool.rows[0]["candidate_id"]

    def test_records_without_key_are_inserted(self, tables):
        _, pool = tables
        asyncio.run(ingest_records([{"name": "Anon"}, {"name": "Anon"}]))
        assert len(pool.rows) == 2

    def test_empty_batch_rejected(self, tables):
        with pytest.raises(ValidationError):
            asyncio.run(ingest_records([]))
