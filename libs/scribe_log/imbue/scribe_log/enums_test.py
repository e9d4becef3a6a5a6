"""Tests for Severity and Verbosity."""

import pytest

from imbue.scribe_log.enums import Severity
from imbue.scribe_log.enums import Verbosity


def test_severity_order_is_total_and_ascending() -> None:
    rendered = [severity.render() for severity in sorted(Severity)]
    assert rendered == ["Debug", "Info", "Notice", "Warning", "Error", "Critical", "Alert", "Emergency"]
    assert Severity.DEBUG < Severity.INFO < Severity.NOTICE < Severity.WARNING
    assert Severity.WARNING < Severity.ERROR < Severity.CRITICAL < Severity.ALERT < Severity.EMERGENCY


def test_verbosity_order_is_total_and_ascending() -> None:
    assert sorted(Verbosity) == [Verbosity.V0, Verbosity.V1, Verbosity.V2, Verbosity.V3]
    assert Verbosity.V0 < Verbosity.V1 < Verbosity.V2 < Verbosity.V3


@pytest.mark.parametrize("severity", list(Severity))
def test_severity_parse_inverts_render(severity: Severity) -> None:
    assert Severity.parse(severity.render()) == severity


def test_severity_parse_is_case_insensitive() -> None:
    assert Severity.parse(" warning ") == Severity.WARNING
    assert Severity.parse("EMERGENCY") == Severity.EMERGENCY


def test_severity_parse_rejects_unknown_names() -> None:
    with pytest.raises(ValueError, match="Unknown severity"):
        Severity.parse("Fatal")
