"""
Conversation store tests.
"""
import dataclasses
import logging

import pytest

from weather_agent.core.conversation import ConversationStore, Message, Role


class TestMessage:

    def test_ids_are_unique(self):
        a = Message(role=Role.USER, text="hi")
        b = Message(role=Role.USER, text="hi")
        assert a.id != b.id

    def test_message_is_immutable(self):
        msg = Message(role=Role.AGENT, text="hello")
        with pytest.raises(dataclasses.FrozenInstanceError):
            msg.text = "changed"

    def test_to_dict(self):
        msg = Message(role=Role.USER, text="weather in Tokyo", id="m1")
        d = msg.to_dict()
        assert d["id"] == "m1"
        assert d["role"] == "user"
        assert d["text"] == "weather in Tokyo"


class TestConversationStore:

    def test_append_preserves_order(self):
        store = ConversationStore()
        first = Message(role=Role.USER, text="one")
        second = Message(role=Role.AGENT, text="two")
        store.append(first)
        store.append(second)
        assert store.snapshot() == (first, second)
        assert len(store) == 2

    def test_snapshot_is_a_copy(self):
        store = ConversationStore()
        store.append(Message(role=Role.USER, text="one"))
        snap = store.snapshot()
        store.append(Message(role=Role.AGENT, text="two"))
        assert len(snap) == 1

    def test_listeners_receive_snapshot_on_each_append(self):
        store = ConversationStore()
        seen = []
        store.subscribe(lambda messages: seen.append([m.text for m in messages]))

        store.append(Message(role=Role.USER, text="a"))
        store.append(Message(role=Role.AGENT, text="b"))

        assert seen == [["a"], ["a", "b"]]

    def test_unsubscribe_stops_notifications(self):
        store = ConversationStore()
        seen = []
        unsubscribe = store.subscribe(seen.append)
        store.append(Message(role=Role.USER, text="a"))
        unsubscribe()
        store.append(Message(role=Role.USER, text="b"))
        assert len(seen) == 1

    def test_stats(self):
        store = ConversationStore()
        store.append(Message(role=Role.USER, text="abc"))
        store.append(Message(role=Role.AGENT, text="de"))
        stats = store.get_stats()
        assert stats["total_messages"] == 2
        assert stats["user_messages"] == 1
        assert stats["agent_messages"] == 1
        assert stats["total_characters"] == 5

    def test_failing_listener_does_not_break_append(self, caplog):
        store = ConversationStore()
        seen = []

        def broken(messages):
            raise RuntimeError("render failed")

        store.subscribe(broken)
        store.subscribe(seen.append)

        with caplog.at_level(logging.ERROR, logger="weather_agent"):
            store.append(Message(role=Role.AGENT, text="Sunny."))

        assert [m.text for m in store.snapshot()] == ["Sunny."]
        assert len(seen) == 1
        assert any("listener" in record.getMessage() for record in caplog.records)
