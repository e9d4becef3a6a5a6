"""The logging environment: ambient identity, cached clock and scribe registry.

A LogEnv is a value. register_scribe and unregister_scribe return a new
LogEnv and never touch the one passed in, so an env already in use by other
threads is never changed underneath them. Adopting the new value is up to
the application.
"""

import os
import socket
from collections.abc import Mapping
from types import MappingProxyType

from loguru import logger
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator

from imbue.scribe_log.clock import CachedClock
from imbue.scribe_log.config import LogEnvConfig
from imbue.scribe_log.frozen_model import FrozenModel
from imbue.scribe_log.namespace import Namespace
from imbue.scribe_log.primitives import Environment
from imbue.scribe_log.primitives import HostName
from imbue.scribe_log.primitives import ProcessId
from imbue.scribe_log.primitives import ScribeName
from imbue.scribe_log.scribe import ScribeInterface


class LogEnv(FrozenModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    host: HostName = Field(description="Host name, resolved once at creation")
    process_id: ProcessId = Field(description="Process id, resolved once at creation")
    app_namespace: Namespace = Field(description="Base namespace prepended to every item's namespace")
    environment: Environment = Field(description="Deployment tag stamped on every item")
    clock: CachedClock = Field(repr=False, description="Timestamp source shared by every version of this env")
    scribes: Mapping[ScribeName, ScribeInterface] = Field(
        default_factory=lambda: MappingProxyType({}),
        description="Registered scribes, ordered by name",
    )

    @field_validator("scribes", mode="after")
    @classmethod
    def freeze_registry_in_name_order(
        cls, scribes: Mapping[ScribeName, ScribeInterface]
    ) -> Mapping[ScribeName, ScribeInterface]:
        return _frozen_registry(scribes)

    def scribe_names(self) -> tuple[ScribeName, ...]:
        """Registered names in dispatch order."""
        return tuple(self.scribes)


def _frozen_registry(scribes: Mapping[ScribeName, ScribeInterface]) -> Mapping[ScribeName, ScribeInterface]:
    return MappingProxyType({name: scribes[name] for name in sorted(scribes)})


def resolve_host_name() -> HostName:
    return HostName(socket.gethostname() or "localhost")


def create_log_env(
    app_namespace: Namespace,
    environment: Environment,
    config: LogEnvConfig | None = None,
) -> LogEnv:
    """Create a LogEnv with an empty registry.

    Host name and process id are resolved here, once, and stamped on every
    item emitted through this env or any env derived from it.
    """
    if config is None:
        config = LogEnvConfig()
    host = config.host_name if config.host_name is not None else resolve_host_name()
    log_env = LogEnv(
        host=host,
        process_id=ProcessId(os.getpid()),
        app_namespace=app_namespace,
        environment=environment,
        clock=CachedClock(
            config.clock_refresh_interval_seconds,
            idle_ticks_before_exit=config.clock_idle_ticks_before_exit,
        ),
    )
    logger.debug(
        "Created log env for {} ({}) on {} pid {}",
        app_namespace.render() or "<root>",
        environment,
        log_env.host,
        log_env.process_id,
    )
    return log_env


def register_scribe(name: ScribeName, scribe: ScribeInterface, log_env: LogEnv) -> LogEnv:
    """Return a copy of log_env with `name` bound to `scribe`, replacing any previous binding."""
    updated = dict(log_env.scribes)
    updated[ScribeName(name)] = scribe
    logger.trace("Registering scribe {}", name)
    return log_env.model_copy(update={"scribes": _frozen_registry(updated)})


def unregister_scribe(name: ScribeName, log_env: LogEnv) -> LogEnv:
    """Return a copy of log_env without `name`. Removing an absent name returns an equivalent env."""
    if name not in log_env.scribes:
        return log_env
    updated = {key: value for key, value in log_env.scribes.items() if key != name}
    logger.trace("Unregistering scribe {}", name)
    return log_env.model_copy(update={"scribes": _frozen_registry(updated)})
