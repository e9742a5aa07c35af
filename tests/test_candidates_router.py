import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock, patch

from conftest import FakeCollection


@pytest.fixture
def test_app():
    from fastapi import FastAPI
    from recruitops.middleware.error_handlers import ExceptionHandlerMiddleware
    from recruitops.routers import candidates

    app = FastAPI()
    app.add_middleware(ExceptionHandlerMiddleware)
    app.include_router(candidates.router, prefix="/api/candidates")
    return app


@pytest.fixture
def client(test_app):
    return TestClient(test_app)


def _row(candidate_id="c-1", **fields):
    row = {"candidate_id": candidate_id, "full_name": "Jane Doe", "source": "PDF Upload"}
    row.update(fields)
    return row


class TestCandidatesRouter:
    """Test cases for the main candidate pool endpoints"""

    @patch('recruitops.routers.candidates.candidates_coll')
    def test_list_candidates_with_status(self, mock_coll, client):
        """Status filter is passed through and résumé text is projected out"""
        mock_coll.find = MagicMock()
        mock_coll.find.return_value.sort.return_value.to_list = AsyncMock(
            return_value=[_row(status="Vetted"), _row("c-2", status="Vetted")]
        )

        response = client.get("/api/candidates?status=Vetted")

        assert response.status_code == 200
        assert [c["candidate_id"] for c in response.json()] == ["c-1", "c-2"]
        query, projection = mock_coll.find.call_args[0]
        assert query == {"status": "Vetted"}
        assert projection["resume_text"] == 0
        mock_coll.find.return_value.sort.assert_called_once_with("uploaded_at", -1)

    @patch('recruitops.routers.candidates.ingest_upload', new_callable=AsyncMock)
    def test_upload_success(self, mock_ingest, client):
        mock_ingest.return_value = {"candidate": _row(status="New", match_score=10), "table": "unvetted", "duplicate": False}

        response = client.post(
            "/api/candidates/upload",
            files={"file": ("Jane_Doe.pdf", b"%PDF-1.4 fake", "application/pdf")},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["table"] == "unvetted"
        assert data["candidate"]["match_score"] == 10
        data_arg, filename, content_type = mock_ingest.call_args[0]
        assert data_arg == b"%PDF-1.4 fake"
        assert filename == "Jane_Doe.pdf"
        assert content_type == "application/pdf"

    @patch('recruitops.routers.candidates.ingest_upload', new_callable=AsyncMock)
    def test_upload_without_file(self, mock_ingest, client):
        response = client.post("/api/candidates/upload")

        assert response.status_code == 400
        assert response.json()["message"] == "No file provided"
        mock_ingest.assert_not_called()

    def test_upload_unsupported_type(self, client):
        """Files the parser cannot read are refused before anything is stored"""
        with patch('recruitops.services.ingestion.store_document', new_callable=AsyncMock) as store:
            response = client.post(
                "/api/candidates/upload",
                files={"file": ("photo.png", b"\x89PNG", "image/png")},
            )

        assert response.status_code == 400
        store.assert_not_called()

    def test_ingest_empty(self, client):
        response = client.post("/api/candidates/ingest", json=[])
        assert response.status_code == 400

    @patch('recruitops.routers.candidates.ingest_records', new_callable=AsyncMock)
    def test_ingest_single_object(self, mock_ingest, client):
        """A bare object is treated as a batch of one"""
        mock_ingest.return_value = {"count": 1, "errors": []}

        response = client.post("/api/candidates/ingest", json={"name": "Omar Said", "title": "Illustrator"})

        assert response.status_code == 200
        assert response.json()["count"] == 1
        assert mock_ingest.call_args[0][0] == [{"name": "Omar Said", "title": "Illustrator"}]

    @patch('recruitops.routers.candidates.enrich_candidate', new_callable=AsyncMock)
    def test_enrich_unknown_candidate(self, mock_enrich, client):
        mock_enrich.return_value = None

        response = client.post("/api/candidates/missing/enrich", json={"resume_text": "React developer"})

        assert response.status_code == 404
        assert response.json()["error"]["error_code"] == "NOT_FOUND"

    @patch('recruitops.routers.candidates.enrich_candidate', new_callable=AsyncMock)
    def test_enrich_without_body(self, mock_enrich, client):
        mock_enrich.return_value = {"candidate_id": "c-1", "data": {"technologies": [{"name": "React", "years": 1}], "tools": [], "work_history": []}}

        response = client.post("/api/candidates/c-1/enrich")

        assert response.status_code == 200
        assert response.json()["data"]["technologies"][0]["name"] == "React"
        assert mock_enrich.call_args[0] == ("c-1", None)

    @patch('recruitops.routers.candidates.backfill_enrichment', new_callable=AsyncMock)
    def test_backfill(self, mock_backfill, client):
        mock_backfill.return_value = {"processed": 3, "updated": 2, "skipped": 1}

        response = client.post("/api/candidates/backfill?use_llm=false")

        assert response.status_code == 200
        assert response.json()["updated"] == 2
        mock_backfill.assert_awaited_once_with(use_llm=False)


class TestStageMoves:
    """Pipeline stage changes through the API"""

    def test_move_stage(self, client):
        pool = FakeCollection([_row(pipeline_stage="Sourced")], name="candidates")
        with patch('recruitops.services.review_manager.candidates_coll', pool):
            response = client.patch("/api/candidates/c-1/stage", params={"stage": "Offer"})

        assert response.status_code == 200
        assert response.json()["previous_stage"] == "Sourced"
        assert pool.rows[0]["pipeline_stage"] == "Offer"

    def test_move_out_of_terminal_stage(self, client):
        pool = FakeCollection([_row(pipeline_stage="Hired")], name="candidates")
        with patch('recruitops.services.review_manager.candidates_coll', pool):
            response = client.patch("/api/candidates/c-1/stage", params={"stage": "Offer"})

        assert response.status_code == 400
        assert response.json()["error"]["error_code"] == "BUSINESS_LOGIC_ERROR"
        assert pool.rows[0]["pipeline_stage"] == "Hired"

    def test_unknown_stage(self, client):
        response = client.patch("/api/candidates/c-1/stage", params={"stage": "Vacation"})
        assert response.status_code == 400

    def test_stage_of_missing_candidate(self, client):
        with patch('recruitops.services.review_manager.candidates_coll', FakeCollection(name="candidates")):
            response = client.patch("/api/candidates/nope/stage", params={"stage": "Offer"})
        assert response.status_code == 404
