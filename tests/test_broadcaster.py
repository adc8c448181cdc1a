#!/usr/bin/env python3
import logging

import pytest

from debug_console.broadcaster import Broadcaster


def test_observer_receives_changes_after_subscribing(store, recorder):
    store.log("before")
    store.subscribe(recorder)
    assert recorder.snapshots == []

    store.log("after")
    assert recorder.messages == [["before", "after"]]


def test_paused_observer_gets_latest_snapshot_once_on_resume(store, recorder):
    subscription = store.subscribe(recorder)
    store.log("one")
    subscription.pause()
    assert subscription.is_paused

    store.log("two")
    store.log("three")
    assert recorder.messages == [["one"]]

    subscription.resume()
    assert recorder.messages == [["one"], ["one", "two", "three"]]

    store.log("four")
    assert len(recorder.snapshots) == 3


def test_resume_without_changes_delivers_nothing(store, recorder):
    subscription = store.subscribe(recorder)
    subscription.pause()
    subscription.resume()
    subscription.resume()
    assert recorder.snapshots == []


def test_paused_observer_sees_clear_as_latest_state(store, recorder):
    store.log("one")
    subscription = store.subscribe(recorder)
    subscription.pause()
    store.log("two")
    store.clear()
    subscription.resume()
    assert recorder.messages == [[]]


def test_cancel_is_idempotent_and_final(store, recorder):
    subscription = store.subscribe(recorder)
    store.log("one")
    subscription.cancel()
    subscription.cancel()
    assert subscription.is_cancelled

    store.log("two")
    subscription.resume()
    assert recorder.messages == [["one"]]
    assert store.broadcaster.subscriber_count == 0


def test_cancel_while_paused_drops_missed_snapshot(store, recorder):
    subscription = store.subscribe(recorder)
    subscription.pause()
    store.log("missed")
    subscription.cancel()
    subscription.resume()
    assert recorder.snapshots == []


def test_observers_are_independent(store, recorder):
    other = []
    paused = store.subscribe(recorder)
    store.subscribe(other.append)

    paused.pause()
    store.log("a")
    store.log("b")

    assert recorder.snapshots == []
    assert [[e.text for e in snapshot] for snapshot in other] == [["a"], ["a", "b"]]


def test_failing_observer_does_not_break_others(store, recorder, caplog):
    def broken(snapshot):
        raise ValueError("observer failure")

    store.subscribe(broken)
    store.subscribe(recorder)

    with caplog.at_level(logging.ERROR, logger="debug_console"):
        store.log("still delivered")

    assert recorder.messages == [["still delivered"]]
    assert any(record.exc_info for record in caplog.records)
    assert [entry.text for entry in store.entries()] == ["still delivered"]


def test_appends_from_an_observer_keep_order_for_everyone(store):
    seen_first = []
    seen_second = []

    def echo(snapshot):
        seen_first.append([entry.text for entry in snapshot])
        if snapshot and snapshot[-1].text == "ping":
            store.log("pong")

    store.subscribe(echo)
    store.subscribe(lambda snapshot: seen_second.append([entry.text for entry in snapshot]))

    store.log("ping")

    assert seen_first == [["ping"], ["ping", "pong"]]
    assert seen_second == [["ping"], ["ping", "pong"]]


def test_subscribe_requires_callable():
    with pytest.raises(TypeError):
        Broadcaster().subscribe("not callable")


def test_snapshots_are_immutable(store, recorder):
    store.subscribe(recorder)
    store.log("a")
    with pytest.raises(AttributeError):
        recorder.snapshots[0].append("b")
