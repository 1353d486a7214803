"""Tests for format_result output mode selection."""

import json

from libforge.output.formatters import OutputSettings, format_result
from libforge.services.result import ServiceResult

_RESULT = ServiceResult(ok=True, op="order", data={"count": 1, "order": ["alpha"]})


class TestFormatResult:
    def test_json(self) -> None:
        out = format_result(_RESULT, settings=OutputSettings(json_output=True))
        assert json.loads(out)["data"]["order"] == ["alpha"]

    def test_json_beats_quiet(self) -> None:
        out = format_result(_RESULT, settings=OutputSettings(json_output=True, quiet=True))
        assert json.loads(out)["ok"] is True

    def test_quiet(self) -> None:
        assert format_result(_RESULT, settings=OutputSettings(quiet=True)) == "OK: order"

    def test_default_is_rich(self) -> None:
        assert " ".join(format_result(_RESULT).split()).startswith("OK order")
