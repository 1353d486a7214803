"""Return types shared by every service method.

Services never raise :class:`~libforge.errors.LibforgeError` to their
callers; they return a failed :class:`ServiceResult` whose ``data`` still
holds the per-library progress made before the failure.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from libforge.errors import LibforgeError


class ServiceError(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: LibforgeError) -> ServiceError:
        return cls(code=exc.code, message=exc.message, detail=exc.detail)

    @property
    def library(self) -> str | None:
        """Library the failure is attributed to, when there is one."""
        return self.detail.get("library")


class ServiceResult(BaseModel):
    """Outcome of one service operation.

    ``op`` names the operation (``install_lib``, ``order``, ...). ``data``
    is operation-specific; batch operations put one report entry per
    library under ``data["libraries"]``. ``meta`` carries the telemetry
    span tree when ``--verbose`` is on.
    """

    model_config = ConfigDict(frozen=True)

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @property
    def libraries(self) -> list[dict[str, Any]]:
        return self.data.get("libraries", [])

    @property
    def message(self) -> str:
        """One-line summary: the error message, or the op name on success."""
        if self.ok:
            return self.op
        return self.error.message if self.error else "Unknown error"
