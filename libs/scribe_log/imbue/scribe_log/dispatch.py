"""Turning a log call into an Item delivered to every registered scribe.

Dispatch runs entirely on the calling thread or task: scribes are pushed to
one after another in registry name order, and the call returns once the
last push returns. A push that raises stops the iteration and the error
propagates to the caller unchanged.
"""

import asyncio
import threading
from typing import Any

from imbue.scribe_log.enums import Severity
from imbue.scribe_log.item import Item
from imbue.scribe_log.location import SourceLocation
from imbue.scribe_log.location import capture_location
from imbue.scribe_log.log_env import LogEnv
from imbue.scribe_log.log_str import LogStr
from imbue.scribe_log.log_str import log_str
from imbue.scribe_log.namespace import Namespace
from imbue.scribe_log.payload import LogContext
from imbue.scribe_log.payload import UNIT_PAYLOAD
from imbue.scribe_log.primitives import ExecutionContextId


def current_execution_context_id() -> ExecutionContextId:
    """Label the current thread, and the current asyncio task when called from one.

    Example: 'MainThread(140245) task=Task-3'
    """
    thread = threading.current_thread()
    label = f"{thread.name}({thread.ident})"
    try:
        task = asyncio.current_task()
    except RuntimeError:
        # No running event loop in this thread
        task = None
    if task is not None:
        label = f"{label} task={task.get_name()}"
    return ExecutionContextId(label)


def build_item(
    log_env: LogEnv,
    payload: LogContext,
    namespace: Namespace,
    location: SourceLocation | None,
    severity: Severity,
    message: LogStr | str,
) -> Item[Any]:
    return Item(
        app_namespace=log_env.app_namespace,
        environment=log_env.environment,
        severity=severity,
        execution_context_id=current_execution_context_id(),
        host=log_env.host,
        process_id=log_env.process_id,
        payload=payload,
        message=log_str(message),
        timestamp=log_env.clock.now(),
        namespace=log_env.app_namespace + namespace,
        location=location,
    )


def emit(
    log_env: LogEnv,
    payload: LogContext,
    namespace: Namespace,
    location: SourceLocation | None,
    severity: Severity,
    message: LogStr | str,
) -> None:
    """Log with everything, including an optional source location.

    This is the lowest-level entry point; log_payload and log_message only
    default some of its arguments.
    """
    scribes = tuple(log_env.scribes.values())
    item = build_item(log_env, payload, namespace, location, severity, message)
    for scribe in scribes:
        scribe.push(item)


def log_payload(
    log_env: LogEnv,
    payload: LogContext,
    namespace: Namespace,
    severity: Severity,
    message: LogStr | str,
) -> None:
    """Log with a payload but without a source location."""
    emit(log_env, payload, namespace, None, severity, message)


def log_message(
    log_env: LogEnv,
    namespace: Namespace,
    severity: Severity,
    message: LogStr | str,
) -> None:
    """Log a bare message: the zero payload and no source location."""
    log_payload(log_env, UNIT_PAYLOAD, namespace, severity, message)


def log_here(
    log_env: LogEnv,
    payload: LogContext,
    namespace: Namespace,
    severity: Severity,
    message: LogStr | str,
) -> None:
    """Like log_payload, but stamps the item with the caller's source location."""
    emit(log_env, payload, namespace, capture_location(depth=1), severity, message)
