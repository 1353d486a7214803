"""BaseService: foundation for libforge services.

Every service receives a :class:`Workspace` at construction time and turns
:class:`~libforge.errors.LibforgeError` into failed results at its public
boundary.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from libforge.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from libforge.errors import LibforgeError
    from libforge.infrastructure.workspace import Workspace

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class BuildService(BaseService):
            def clean_libs(self) -> ServiceResult:
                try:
                    ...
                except LibforgeError as exc:
                    return self._failure("clean_libs", exc)
    """

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    @staticmethod
    def _failure(
        op: str,
        exc: LibforgeError,
        *,
        data: dict[str, Any] | None = None,
        warnings: list[str] | None = None,
    ) -> ServiceResult:
        """Failed result for a fatal error, keeping any partial progress."""
        logger.error("%s failed: %s", op, exc.message)
        return ServiceResult(
            ok=False,
            op=op,
            data=data or {},
            warnings=warnings or [],
            error=ServiceError.from_exception(exc),
        )
