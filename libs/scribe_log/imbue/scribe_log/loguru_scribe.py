from collections.abc import Mapping
from types import MappingProxyType
from typing import Any
from typing import Final

from loguru import logger
from pydantic import Field

from imbue.scribe_log.enums import Severity
from imbue.scribe_log.enums import Verbosity
from imbue.scribe_log.item import Item
from imbue.scribe_log.payload import payload_json
from imbue.scribe_log.scribe import ScribeInterface

# Loguru has no notice/alert/emergency levels, so those fold into the nearest built-in one.
LOGURU_LEVEL_BY_SEVERITY: Final[Mapping[Severity, str]] = MappingProxyType(
    {
        Severity.DEBUG: "DEBUG",
        Severity.INFO: "INFO",
        Severity.NOTICE: "SUCCESS",
        Severity.WARNING: "WARNING",
        Severity.ERROR: "ERROR",
        Severity.CRITICAL: "CRITICAL",
        Severity.ALERT: "CRITICAL",
        Severity.EMERGENCY: "CRITICAL",
    }
)


class LoguruScribe(ScribeInterface):
    """Forwards items into loguru, so existing loguru sinks receive them.

    The filtered payload is bound as the `data` extra field and the full
    namespace as `ns`. Items below `min_severity` are dropped.
    """

    verbosity: Verbosity = Field(default=Verbosity.V2, description="Verbosity used to filter payloads")
    min_severity: Severity = Field(default=Severity.DEBUG, description="Lowest severity forwarded")

    def push(self, item: Item[Any]) -> None:
        if item.severity < self.min_severity:
            return
        logger.bind(
            ns=item.namespace.render(),
            sev=item.severity.render(),
            data=payload_json(self.verbosity, item.payload),
            thread=str(item.execution_context_id),
        ).log(LOGURU_LEVEL_BY_SEVERITY[item.severity], "{}", item.message.render())
