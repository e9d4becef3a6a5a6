"""Payload contract: which fields of a payload a scribe serializes at a given verbosity.

Any value with `payload_keys(verbosity)` and `to_json_object()` can ride on
an Item. Most payloads subclass LogPayload and only override payload_keys.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any
from typing import Final
from typing import Protocol
from typing import assert_never
from typing import runtime_checkable

from pydantic import Field
from pydantic import JsonValue
from pydantic import field_validator

from imbue.scribe_log.enums import Verbosity
from imbue.scribe_log.frozen_model import FrozenModel
from imbue.scribe_log.pure import pure


class AllKeys(FrozenModel):
    """Keep every top-level field of the serialized payload."""


class SomeKeys(FrozenModel):
    """Keep only the named top-level fields of the serialized payload."""

    keys: frozenset[str] = Field(default=frozenset(), description="Top-level keys to keep")


PayloadSelection = AllKeys | SomeKeys


@runtime_checkable
class LogContext(Protocol):
    def payload_keys(self, verbosity: Verbosity) -> PayloadSelection:
        """Return the fields to keep at this verbosity. Must be a pure function of the payload and verbosity."""
        ...

    def to_json_object(self) -> JsonValue:
        """Serialize the whole payload, normally to a JSON object."""
        ...


class LogPayload(FrozenModel):
    """Base class for pydantic payload models.

    Serializes through model_dump(mode="json"). The default selection keeps
    nothing at V0 and everything above it; subclasses override payload_keys
    to expose fewer fields at V1 and V2.
    """

    def payload_keys(self, verbosity: Verbosity) -> PayloadSelection:
        if verbosity == Verbosity.V0:
            return SomeKeys()
        return AllKeys()

    def to_json_object(self) -> JsonValue:
        return self.model_dump(mode="json")


class UnitPayload(LogPayload):
    """The zero payload used by message-only log calls. Selects nothing at any verbosity.

    Serializes to an empty array, which the key filter leaves as is.
    """

    def payload_keys(self, verbosity: Verbosity) -> PayloadSelection:
        return SomeKeys()

    def to_json_object(self) -> JsonValue:
        return []


UNIT_PAYLOAD: Final[UnitPayload] = UnitPayload()


class KeyValuePayload(LogPayload):
    """Ad-hoc payload built from keyword arguments, for call sites without a dedicated model."""

    fields: Mapping[str, JsonValue] = Field(
        default_factory=lambda: MappingProxyType({}),
        description="Payload fields; stored read-only, nested lists as tuples",
    )

    @field_validator("fields", mode="after")
    @classmethod
    def freeze_fields(cls, fields: Mapping[str, JsonValue]) -> Mapping[str, Any]:
        return freeze_json(fields)

    def to_json_object(self) -> JsonValue:
        return thaw_json(self.fields)


@pure
def kv(**fields: JsonValue) -> KeyValuePayload:
    """Shorthand for `KeyValuePayload(fields=fields)`."""
    return KeyValuePayload(fields=fields)


@pure
def payload_json(verbosity: Verbosity, payload: LogContext) -> JsonValue:
    """Serialize a payload and drop the top-level fields its selection excludes.

    Selected keys that the serialized payload lacks are ignored. A payload
    that does not serialize to an object is returned unfiltered.
    """
    serialized = payload.to_json_object()
    match payload.payload_keys(verbosity):
        case AllKeys():
            return serialized
        case SomeKeys(keys=keys):
            if not isinstance(serialized, dict):
                return serialized
            return {key: value for key, value in serialized.items() if key in keys}
        case _ as unreachable:
            assert_never(unreachable)


@pure
def freeze_json(value: Any) -> Any:
    """Read-only copy of a JSON value: objects become mapping proxies, arrays become tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze_json(child) for key, child in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze_json(child) for child in value)
    return value


@pure
def thaw_json(value: Any) -> JsonValue:
    """Fresh mutable copy of a value produced by freeze_json."""
    if isinstance(value, Mapping):
        return {key: thaw_json(child) for key, child in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw_json(child) for child in value]
    return value
