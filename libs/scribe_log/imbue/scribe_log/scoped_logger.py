from typing import Any
from typing import Self

from pydantic import ConfigDict
from pydantic import Field

from imbue.scribe_log.dispatch import log_payload
from imbue.scribe_log.enums import Severity
from imbue.scribe_log.frozen_model import FrozenModel
from imbue.scribe_log.log_env import LogEnv
from imbue.scribe_log.log_str import LogStr
from imbue.scribe_log.namespace import Namespace
from imbue.scribe_log.payload import UNIT_PAYLOAD


class ScopedLogger(FrozenModel):
    """A LogEnv bundled with a namespace and a default payload.

    This is an ordinary value: pass it to the code that logs, derive
    narrower loggers with child() and with_payload(), and adopt a newer env
    version with with_env(). Nothing here is global.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    log_env: LogEnv = Field(description="Environment items are emitted through")
    namespace: Namespace = Field(default_factory=Namespace.root, description="Namespace appended to the app's")
    payload: Any = Field(default=UNIT_PAYLOAD, description="Payload attached to every item (satisfies LogContext)")

    def child(self, namespace: Namespace | str) -> Self:
        """Return a logger whose namespace has `namespace` appended."""
        if isinstance(namespace, str):
            namespace = Namespace.of(namespace)
        return self.model_copy(update={"namespace": self.namespace + namespace})

    def with_payload(self, payload: Any) -> Self:
        return self.model_copy(update={"payload": payload})

    def with_env(self, log_env: LogEnv) -> Self:
        return self.model_copy(update={"log_env": log_env})

    def log(self, severity: Severity, message: LogStr | str) -> None:
        log_payload(self.log_env, self.payload, self.namespace, severity, message)

    def debug(self, message: LogStr | str) -> None:
        self.log(Severity.DEBUG, message)

    def info(self, message: LogStr | str) -> None:
        self.log(Severity.INFO, message)

    def notice(self, message: LogStr | str) -> None:
        self.log(Severity.NOTICE, message)

    def warning(self, message: LogStr | str) -> None:
        self.log(Severity.WARNING, message)

    def error(self, message: LogStr | str) -> None:
        self.log(Severity.ERROR, message)

    def critical(self, message: LogStr | str) -> None:
        self.log(Severity.CRITICAL, message)

    def alert(self, message: LogStr | str) -> None:
        self.log(Severity.ALERT, message)

    def emergency(self, message: LogStr | str) -> None:
        self.log(Severity.EMERGENCY, message)
