from collections.abc import Generator

import pytest

from imbue.scribe_log.config import LogEnvConfig
from imbue.scribe_log.log_env import LogEnv
from imbue.scribe_log.log_env import create_log_env
from imbue.scribe_log.namespace import namespace
from imbue.scribe_log.primitives import Environment
from imbue.scribe_log.primitives import HostName
from imbue.scribe_log.testing import CapturingScribe


@pytest.fixture
def log_env() -> Generator[LogEnv, None, None]:
    """An env for app 'myapp' in environment 'test', with a fixed host name and no scribes."""
    env = create_log_env(
        namespace("myapp"),
        Environment("test"),
        LogEnvConfig(host_name=HostName("test-host")),
    )
    yield env
    env.clock.stop()


@pytest.fixture
def capturing_scribe() -> CapturingScribe:
    return CapturingScribe()
