import asyncio
from unittest.mock import patch

import pytest

from conftest import FakeCollection
from recruitops.helpers.prompts import ENRICH_PROMPT
from recruitops.services.enrichment import (
    ENRICHED_FIELDS, backfill_enrichment, enrich_candidate, enrichment_for, pattern_enrichment,
)
from recruitops.utils.exceptions import ModelError, ValidationError
from recruitops.utils.utils import safe_json

TEXT = "Frontend developer. React, TypeScript, Figma, Jira. Acme Jan 2021 - Present. Beta 2019 - 2020."


@pytest.fixture
def tables():
    pool = FakeCollection(name="candidates", unique_key=None)
    staging = FakeCollection(name="unvetted")
    with patch("recruitops.services.enrichment.candidates_coll", pool), \
            patch("recruitops.services.enrichment.unvetted_coll", staging):
        yield pool, staging


class TestEnrichmentSources:

    def test_pattern_rules(self):
        data = pattern_enrichment(TEXT)
        assert [s.name for s in data["technologies"]] == ["React", "TypeScript", "Figma"]
        assert [s.name for s in data["tools"]] == ["Figma", "Jira"]
        assert len(data["work_history"]) == 2

    @patch("recruitops.services.enrichment.ollama_generate")
    def test_llm_answer_is_used(self, mock_llm):
        mock_llm.return_value = (
            'Sure: {"technologies": [{"name": "React", "years": 3}], "tools": ["Figma"], '
            '"work_history": [{"company": "Acme", "title": "Lead", "years": "2"}]}'
        )
        data = enrichment_for(TEXT, use_llm=True)
        assert data["technologies"] == [{"name": "React", "years": 3}]
        assert data["tools"] == [{"name": "Figma", "years": 1}]
        assert data["work_history"] == [{"company": "Acme", "title": "Lead", "years": 2}]

    @patch("recruitops.services.enrichment.ollama_generate", side_effect=ModelError("down", model_name="llama3.1:8b"))
    def test_llm_failure_falls_back(self, _mock_llm):
        data = enrichment_for(TEXT, use_llm=True)
        assert {"name": "React", "years": 1} in data["technologies"]

    @patch("recruitops.services.enrichment.ollama_generate", return_value="{}")
    def test_empty_llm_answer_falls_back(self, _mock_llm):
        assert len(enrichment_for(TEXT, use_llm=True)["work_history"]) == 2

    @patch("recruitops.services.enrichment.ollama_generate")
    def test_llm_disabled(self, mock_llm):
        enrichment_for(TEXT, use_llm=False)
        mock_llm.assert_not_called()

    def test_prompt_asks_only_for_stored_fields(self):
        example = safe_json(ENRICH_PROMPT.format(resume_text="Designer at Acme"), fallback={})
        assert set(example) == set(ENRICHED_FIELDS)


class TestEnrichCandidate:

    def test_staged_candidate_updated_in_place(self, tables):
        _, staging = tables
        staging.rows.append({"candidate_id": "c1", "full_name": "Mona", "resume_text": TEXT,
                             "status": "New", "match_score": 10})
        result = asyncio.run(enrich_candidate("c1", use_llm=False))

        assert result["candidate_id"] == "c1"
        row = staging.rows[0]
        assert row["technologies"][0]["name"] == "React"
        assert row["status"] == "New"
        assert row["match_score"] == 10

    def test_supplied_text_wins(self, tables):
        pool, _ = tables
        pool.rows.append({"candidate_id": "c2", "full_name": "Ali", "resume_text": "nothing useful"})
        asyncio.run(enrich_candidate("c2", resume_text="Python and Docker", use_llm=False))
        assert [t["name"] for t in pool.rows[0]["technologies"]] == ["Python", "Docker"]

    def test_unknown_candidate(self, tables):
        assert asyncio.run(enrich_candidate("missing", use_llm=False)) is None

    def test_missing_text(self, tables):
        pool, _ = tables
        pool.rows.append({"candidate_id": "c3", "full_name": "Ali"})
        with pytest.raises(ValidationError):
            asyncio.run(enrich_candidate("c3", use_llm=False))


def test_backfill_only_updates_rows_with_findings(tables):
    pool, staging = tables
    pool.rows.extend([
        {"candidate_id": "a", "source": "PDF Upload", "resume_text": TEXT},
        {"candidate_id": "b", "source": "PDF Upload", "resume_text": "Hello world"},
        {"candidate_id": "c", "source": "LinkedIn", "resume_text": TEXT},
        {"candidate_id": "d", "source": "PDF Upload", "resume_text": None},
    ])
    staging.rows.append({"candidate_id": "e", "source": "PDF Upload", "resume_text": "Kotlin and Swift"})

    result = asyncio.run(backfill_enrichment(use_llm=False))

    assert result == {"processed": 3, "updated": 2, "skipped": 1}
    assert "technologies" in pool.rows[0]
    assert "technologies" not in pool.rows[1]
    assert "technologies" not in pool.rows[2]
    assert staging.rows[0]["technologies"][0]["name"] == "Kotlin"
