import json

import pytest
from fastapi import FastAPI
from pymongo.errors import ServerSelectionTimeoutError

from recruitops.middleware.error_handlers import PerformanceMiddleware, error_envelope
from recruitops.utils.exceptions import (
    DatabaseError, ExceptionContext, ExternalServiceError, NotFoundError,
    ProcessingError, ValidationError, map_to_http_exception,
)


class TestErrorMapping:

    def test_status_codes(self):
        assert map_to_http_exception(ValidationError("short jd", field="jd")).status_code == 400
        assert map_to_http_exception(NotFoundError("gone", entity="candidates")).status_code == 404
        assert map_to_http_exception(ExternalServiceError("down", service_name="brave_search")).status_code == 502
        assert map_to_http_exception(DatabaseError("write failed")).status_code == 500

    def test_detail_fields_are_collected(self):
        exc = ValidationError("Unknown platform(s): MySpace", field="platforms", value=["MySpace"])
        assert exc.to_dict()["details"] == {"field": "platforms", "value": ["MySpace"]}

    def test_unexpected_field_is_a_bug(self):
        with pytest.raises(TypeError):
            NotFoundError("gone", collection="candidates")

    def test_context_types_foreign_errors(self):
        with pytest.raises(DatabaseError):
            with ExceptionContext("list_candidates"):
                raise ServerSelectionTimeoutError("no primary")
        with pytest.raises(ProcessingError):
            with ExceptionContext("list_candidates"):
                raise RuntimeError("boom")
        with pytest.raises(NotFoundError):
            with ExceptionContext("list_candidates"):
                raise NotFoundError("gone")


class TestMiddlewareHelpers:

    def test_error_envelope(self):
        response = error_envelope("req-1", 404, {"message": "Candidate c-1 not found"})
        body = json.loads(response.body)

        assert response.status_code == 404
        assert response.headers["X-Request-ID"] == "req-1"
        assert body["success"] is False
        assert body["request_id"] == "req-1"
        assert body["message"] == "Candidate c-1 not found"

    def test_slow_paths_get_their_own_threshold(self):
        middleware = PerformanceMiddleware(FastAPI(), slow_request_threshold=2.0)

        assert middleware.threshold_for("/api/sourcing") == 20.0
        assert middleware.threshold_for("/api/candidates/backfill") == 60.0
        assert middleware.threshold_for("/api/candidates") == 2.0
        assert middleware.threshold_for("/api/sourcingx") == 2.0
