import os
from collections.abc import Mapping
from typing import Final

from pydantic import Field

from imbue.scribe_log.clock import DEFAULT_IDLE_TICKS_BEFORE_EXIT
from imbue.scribe_log.errors import ConfigError
from imbue.scribe_log.frozen_model import FrozenModel
from imbue.scribe_log.primitives import HostName
from imbue.scribe_log.primitives import PositiveFloat
from imbue.scribe_log.primitives import PositiveInt

CLOCK_REFRESH_SECONDS_ENV_VAR: Final[str] = "SCRIBE_LOG_CLOCK_REFRESH_SECONDS"
CLOCK_IDLE_TICKS_ENV_VAR: Final[str] = "SCRIBE_LOG_CLOCK_IDLE_TICKS"
HOST_NAME_ENV_VAR: Final[str] = "SCRIBE_LOG_HOST_NAME"

DEFAULT_CLOCK_REFRESH_INTERVAL_SECONDS: Final[PositiveFloat] = PositiveFloat(0.1)


class LogEnvConfig(FrozenModel):
    """Tunables for creating a LogEnv."""

    clock_refresh_interval_seconds: PositiveFloat = Field(
        default=DEFAULT_CLOCK_REFRESH_INTERVAL_SECONDS,
        description="How often the cached clock re-reads system time while it is being read",
    )
    clock_idle_ticks_before_exit: PositiveInt = Field(
        default=DEFAULT_IDLE_TICKS_BEFORE_EXIT,
        description="Consecutive unread refresh intervals after which the clock worker thread exits",
    )
    host_name: HostName | None = Field(
        default=None,
        description="Host name to stamp on items instead of the resolved one (e.g. a pod name)",
    )


def load_config_from_environ(environ: Mapping[str, str] | None = None) -> LogEnvConfig:
    """Build a LogEnvConfig from SCRIBE_LOG_* environment variables.

    Unset or empty variables keep their defaults.
    """
    if environ is None:
        environ = os.environ

    config = LogEnvConfig()

    raw_interval = environ.get(CLOCK_REFRESH_SECONDS_ENV_VAR, "").strip()
    if raw_interval:
        try:
            interval = PositiveFloat(float(raw_interval))
        except ValueError as e:
            raise ConfigError(CLOCK_REFRESH_SECONDS_ENV_VAR, raw_interval, str(e)) from e
        config = config.model_copy(update={"clock_refresh_interval_seconds": interval})

    raw_idle_ticks = environ.get(CLOCK_IDLE_TICKS_ENV_VAR, "").strip()
    if raw_idle_ticks:
        try:
            idle_ticks = PositiveInt(int(raw_idle_ticks))
        except ValueError as e:
            raise ConfigError(CLOCK_IDLE_TICKS_ENV_VAR, raw_idle_ticks, str(e)) from e
        config = config.model_copy(update={"clock_idle_ticks_before_exit": idle_ticks})

    raw_host_name = environ.get(HOST_NAME_ENV_VAR, "").strip()
    if raw_host_name:
        config = config.model_copy(update={"host_name": HostName(raw_host_name)})

    return config
