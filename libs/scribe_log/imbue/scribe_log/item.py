"""The immutable record handed to every scribe, and its JSON wire shape."""

import json
from datetime import datetime
from datetime import timezone
from typing import Generic
from typing import TypeVar

from pydantic import ConfigDict
from pydantic import Field
from pydantic import JsonValue

from imbue.scribe_log.enums import Severity
from imbue.scribe_log.enums import Verbosity
from imbue.scribe_log.frozen_model import FrozenModel
from imbue.scribe_log.location import SourceLocation
from imbue.scribe_log.log_str import LogStr
from imbue.scribe_log.namespace import Namespace
from imbue.scribe_log.payload import payload_json
from imbue.scribe_log.primitives import Environment
from imbue.scribe_log.primitives import ExecutionContextId
from imbue.scribe_log.primitives import HostName
from imbue.scribe_log.primitives import ProcessId
from imbue.scribe_log.pure import pure

PayloadT = TypeVar("PayloadT")


class Item(FrozenModel, Generic[PayloadT]):
    """One log event with all of its ambient metadata.

    Built by dispatch and passed unchanged to every registered scribe. The
    payload is any value satisfying the LogContext protocol.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    app_namespace: Namespace = Field(description="Base namespace of the LogEnv")
    environment: Environment = Field(description="Deployment tag of the LogEnv")
    severity: Severity = Field(description="Severity given by the caller")
    execution_context_id: ExecutionContextId = Field(description="Thread/task that emitted the item")
    host: HostName = Field(description="Host name resolved when the LogEnv was created")
    process_id: ProcessId = Field(description="Process id resolved when the LogEnv was created")
    payload: PayloadT = Field(description="Caller-supplied structured context")
    message: LogStr = Field(description="Human-readable message")
    timestamp: datetime = Field(description="Reading of the LogEnv's cached clock")
    namespace: Namespace = Field(description="App namespace followed by the caller's namespace")
    location: SourceLocation | None = Field(default=None, description="Call site, when the caller supplied one")


@pure
def render_timestamp(timestamp: datetime) -> str:
    """ISO-8601 in UTC with microseconds and a 'Z' suffix, e.g. '2026-10-17T08:30:00.123456Z'."""
    return timestamp.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


@pure
def location_json(location: SourceLocation) -> dict[str, JsonValue]:
    return {
        "loc_fn": location.filename,
        "loc_pkg": location.package,
        "loc_mod": location.module,
        "loc_ln": location.line,
        "loc_col": location.column,
    }


@pure
def item_to_json(item: Item, verbosity: Verbosity) -> dict[str, JsonValue]:
    """Serialize an item to the JSON object consumers of structured logs parse.

    The key set and value shapes are fixed; only "data" depends on the
    verbosity, through the payload's own selection.
    """
    return {
        "app": list(item.app_namespace.segments),
        "env": str(item.environment),
        "sev": item.severity.render(),
        "thread": str(item.execution_context_id),
        "host": str(item.host),
        "pid": str(item.process_id),
        "data": payload_json(verbosity, item.payload),
        "msg": item.message.render(),
        "at": render_timestamp(item.timestamp),
        "ns": list(item.namespace.segments),
        "loc": location_json(item.location) if item.location is not None else None,
    }


@pure
def item_to_json_line(item: Item, verbosity: Verbosity) -> str:
    """Compact single-line JSON rendering of an item, for line-oriented sinks."""
    return json.dumps(item_to_json(item, verbosity), separators=(",", ":"), ensure_ascii=False)
