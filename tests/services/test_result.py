"""Tests for ServiceResult and ServiceError."""

import pytest
from pydantic import ValidationError

from libforge.errors import CyclicDependencyError
from libforge.services.result import ServiceError, ServiceResult


class TestServiceResult:
    def test_defaults(self) -> None:
        result = ServiceResult(ok=True, op="order")
        assert result.data == {}
        assert result.warnings == []
        assert result.error is None
        assert result.meta is None

    def test_frozen(self) -> None:
        result = ServiceResult(ok=True, op="order")
        with pytest.raises(ValidationError):
            result.ok = False  # type: ignore[misc]

    def test_json_round_trip(self) -> None:
        result = ServiceResult(
            ok=False,
            op="build_all",
            data={"count": 1, "libraries": [{"library": "a", "state": "aborted"}]},
            error=ServiceError(code="DIRTY_WORKING_TREE", message="commit first"),
        )
        assert ServiceResult.model_validate_json(result.model_dump_json()) == result


class TestServiceError:
    def test_from_exception(self) -> None:
        exc = CyclicDependencyError("c", "a", ["c", "a", "b", "c"])
        err = ServiceError.from_exception(exc)
        assert err.code == "CYCLIC_DEPENDENCY"
        assert "c -> a -> b -> c" in err.message
        assert err.detail["cycle"] == ["c", "a", "b", "c"]

    def test_library_from_detail(self) -> None:
        err = ServiceError(code="X", message="m", detail={"library": "core"})
        assert err.library == "core"
        assert ServiceError(code="X", message="m").library is None


class TestConvenience:
    def test_libraries_default_empty(self) -> None:
        assert ServiceResult(ok=True, op="order").libraries == []

    def test_message_on_success_is_op(self) -> None:
        assert ServiceResult(ok=True, op="order").message == "order"

    def test_message_on_failure(self) -> None:
        err = ServiceError(code="CYCLIC_DEPENDENCY", message="cycle found")
        assert ServiceResult(ok=False, op="list", error=err).message == "cycle found"
        assert ServiceResult(ok=False, op="list").message == "Unknown error"
