"""Tests for ServiceResult, ServiceError, and the failure helpers."""

import json

import pytest
from pydantic import ValidationError

from dutyctl.services.result import ErrorCode, ServiceError, ServiceResult, failure, not_found


class TestServiceResult:
    def test_success_construction(self) -> None:
        result = ServiceResult(ok=True, op="resolve_scope", data={"unit_count": 4})
        assert result.ok is True
        assert result.data == {"unit_count": 4}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_json_serialization(self) -> None:
        result = ServiceResult(ok=True, op="test", data={"key": "value"}, meta={"ms": 42})
        parsed = json.loads(result.model_dump_json())
        assert parsed["ok"] is True
        assert parsed["data"]["key"] == "value"
        assert parsed["meta"]["ms"] == 42

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="test")
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]


class TestNotFound:
    def test_shape(self) -> None:
        result = not_found("eligible_roster", "duty_type_id", "guard")
        assert result.ok is False
        assert result.op == "eligible_roster"
        assert result.error == ServiceError(
            code="NOT_FOUND",
            message="Duty type id 'guard' not found",
            detail={"duty_type_id": "guard"},
        )


class TestFailure:
    def test_detail_from_kwargs(self) -> None:
        result = failure("expected_standby", ErrorCode.INVALID_PERIOD, "bad", start="2026-03-02")
        assert result.ok is False
        assert result.error is not None
        assert result.error.code is ErrorCode.INVALID_PERIOD
        assert result.error.detail == {"start": "2026-03-02"}

    def test_code_is_closed(self) -> None:
        with pytest.raises(ValidationError):
            ServiceError(code="WHATEVER", message="x")  # type: ignore[arg-type]

    def test_code_serializes_as_string(self) -> None:
        result = failure("check", ErrorCode.SNAPSHOT_INVALID, "gone", path="/x/roster.yaml")
        parsed = json.loads(result.model_dump_json())
        assert parsed["error"]["code"] == "SNAPSHOT_INVALID"
        assert parsed["error"]["detail"]["path"] == "/x/roster.yaml"
