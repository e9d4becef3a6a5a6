"""Tests for dispatch: building items and delivering them to scribes."""

import asyncio
import threading
from typing import Any

import pytest

from imbue.scribe_log.dispatch import current_execution_context_id
from imbue.scribe_log.dispatch import emit
from imbue.scribe_log.dispatch import log_here
from imbue.scribe_log.dispatch import log_message
from imbue.scribe_log.dispatch import log_payload
from imbue.scribe_log.enums import Severity
from imbue.scribe_log.item import Item
from imbue.scribe_log.location import SourceLocation
from imbue.scribe_log.log_env import LogEnv
from imbue.scribe_log.log_env import register_scribe
from imbue.scribe_log.log_env import unregister_scribe
from imbue.scribe_log.log_str import log_str
from imbue.scribe_log.namespace import Namespace
from imbue.scribe_log.namespace import namespace
from imbue.scribe_log.payload import UNIT_PAYLOAD
from imbue.scribe_log.payload import kv
from imbue.scribe_log.primitives import ScribeName
from imbue.scribe_log.scribe import make_scribe
from imbue.scribe_log.testing import CapturingScribe
from imbue.scribe_log.testing import FailingScribe
from imbue.scribe_log.testing import ScribeFailure


def test_minimal_entry_point_builds_expected_item(log_env: LogEnv, capturing_scribe: CapturingScribe) -> None:
    env = register_scribe(ScribeName("capture"), capturing_scribe, log_env)

    log_message(env, namespace("db"), Severity.WARNING, "disk low")

    assert len(capturing_scribe.items) == 1
    item = capturing_scribe.items[0]
    assert item.namespace == namespace("myapp", "db")
    assert item.app_namespace == namespace("myapp")
    assert item.severity == Severity.WARNING
    assert item.message.render() == "disk low"
    assert item.payload == UNIT_PAYLOAD
    assert item.environment == "test"
    assert item.host == "test-host"
    assert item.process_id == log_env.process_id
    assert item.location is None


def test_each_scribe_sees_the_item_once_in_key_order(log_env: LogEnv) -> None:
    observed: list[str] = []
    env = log_env
    for key in ["2", "1"]:
        env = register_scribe(ScribeName(key), make_scribe(lambda item: observed.append(item.severity.render())), env)

    log_message(env, Namespace.root(), Severity.ERROR, "boom")

    assert observed == ["Error", "Error"]


def test_same_item_reaches_every_scribe_in_name_order(log_env: LogEnv) -> None:
    received: list[tuple[str, Item[Any]]] = []
    env = register_scribe(ScribeName("b"), make_scribe(lambda item: received.append(("b", item))), log_env)
    env = register_scribe(ScribeName("a"), make_scribe(lambda item: received.append(("a", item))), env)

    log_payload(env, kv(user="alice"), namespace("auth"), Severity.INFO, log_str("login"))

    assert [key for key, _ in received] == ["a", "b"]
    assert received[0][1] == received[1][1]
    assert received[0][1] is received[1][1]


def test_failing_scribe_propagates_and_stops_dispatch(log_env: LogEnv) -> None:
    later = CapturingScribe()
    env = register_scribe(ScribeName("a"), FailingScribe(), log_env)
    env = register_scribe(ScribeName("b"), later, env)

    with pytest.raises(ScribeFailure):
        log_message(env, Namespace.root(), Severity.INFO, "hello")

    assert later.items == []


def test_emit_attaches_given_location(log_env: LogEnv, capturing_scribe: CapturingScribe) -> None:
    env = register_scribe(ScribeName("capture"), capturing_scribe, log_env)
    location = SourceLocation(filename="app/db.py", package="app", module="app.db", line=3, column=1)

    emit(env, UNIT_PAYLOAD, Namespace.root(), location, Severity.DEBUG, "connected")

    assert capturing_scribe.items[0].location == location


def test_log_here_captures_the_calling_line(log_env: LogEnv, capturing_scribe: CapturingScribe) -> None:
    env = register_scribe(ScribeName("capture"), capturing_scribe, log_env)
    expected_line = test_log_here_captures_the_calling_line.__code__.co_firstlineno + 4

    log_here(env, UNIT_PAYLOAD, Namespace.root(), Severity.INFO, "located")

    location = capturing_scribe.items[0].location
    assert location is not None
    assert location.line == expected_line
    assert location.filename.endswith("dispatch_test.py")
    assert location.module.endswith("dispatch_test")


def test_emit_with_no_scribes_is_a_no_op(log_env: LogEnv) -> None:
    log_message(log_env, Namespace.root(), Severity.INFO, "nobody listens")


def test_unregistered_scribe_receives_nothing(log_env: LogEnv, capturing_scribe: CapturingScribe) -> None:
    env = register_scribe(ScribeName("capture"), capturing_scribe, log_env)
    env = unregister_scribe(ScribeName("capture"), env)

    log_message(env, Namespace.root(), Severity.INFO, "dropped")

    assert capturing_scribe.items == []


def test_timestamps_are_non_decreasing(log_env: LogEnv, capturing_scribe: CapturingScribe) -> None:
    env = register_scribe(ScribeName("capture"), capturing_scribe, log_env)

    for index in range(200):
        log_message(env, Namespace.root(), Severity.DEBUG, str(index))

    timestamps = [item.timestamp for item in capturing_scribe.items]
    assert timestamps == sorted(timestamps)


def test_execution_context_id_is_captured_live(log_env: LogEnv, capturing_scribe: CapturingScribe) -> None:
    env = register_scribe(ScribeName("capture"), capturing_scribe, log_env)

    log_message(env, Namespace.root(), Severity.INFO, "main")
    worker = threading.Thread(
        target=log_message,
        args=(env, Namespace.root(), Severity.INFO, "worker"),
        name="worker-thread",
    )
    worker.start()
    worker.join()

    main_item, worker_item = capturing_scribe.items
    assert main_item.execution_context_id.startswith(threading.current_thread().name)
    assert worker_item.execution_context_id.startswith("worker-thread(")


def test_execution_context_id_names_the_asyncio_task() -> None:
    async def label_from_task() -> str:
        return current_execution_context_id()

    async def main() -> str:
        return await asyncio.create_task(label_from_task(), name="ingest-task")

    assert asyncio.run(main()).endswith("task=ingest-task")


def test_concurrent_emitters_deliver_every_item(log_env: LogEnv, capturing_scribe: CapturingScribe) -> None:
    env = register_scribe(ScribeName("capture"), capturing_scribe, log_env)

    def emit_many(label: str) -> None:
        for index in range(100):
            log_message(env, namespace(label), Severity.INFO, str(index))

    threads = [threading.Thread(target=emit_many, args=(f"t{index}",)) for index in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(capturing_scribe.items) == 400
    for label in ["t0", "t1", "t2", "t3"]:
        messages = [item.message.render() for item in capturing_scribe.items if item.namespace.segments[-1] == label]
        assert messages == [str(index) for index in range(100)]


def test_scribe_cannot_change_the_item_seen_by_later_scribes(
    log_env: LogEnv, capturing_scribe: CapturingScribe
) -> None:
    rejected_edits: list[str] = []

    def tamper(item: Item[Any]) -> None:
        try:
            item.payload.fields["user"] = "mallory"
        except TypeError:
            rejected_edits.append("fields")
        try:
            item.payload.fields["roles"].append("admin")
        except AttributeError:
            rejected_edits.append("roles")

    env = register_scribe(ScribeName("a"), make_scribe(tamper), log_env)
    env = register_scribe(ScribeName("b"), capturing_scribe, env)

    log_payload(env, kv(user="alice", roles=["reader"]), namespace("auth"), Severity.INFO, "login")

    assert rejected_edits == ["fields", "roles"]
    (item,) = capturing_scribe.items
    assert item.payload == kv(user="alice", roles=["reader"])
    assert item.payload.to_json_object() == {"user": "alice", "roles": ["reader"]}
