from __future__ import annotations

import pytest
from pydantic import ValidationError

from journal.history import build_llm_history, preview, render_conversation
from journal.schemas import WELCOME_MESSAGE, Message
from journal.store import MessageStore


def test_append_preserves_insertion_order():
    store = MessageStore(Message.welcome())
    store.append(Message(content="first", is_user=True))
    store.append(Message(content="second", is_user=False))

    assert [m.content for m in store.all()] == [WELCOME_MESSAGE, "first", "second"]
    assert len(store) == 3


def test_all_returns_a_copy():
    store = MessageStore()
    store.append(Message(content="hello", is_user=True))

    snapshot = store.all()
    snapshot.append(Message(content="intruder", is_user=True))

    assert len(store) == 1


def test_reset_replaces_log_with_seed():
    store = MessageStore(Message.welcome())
    store.append(Message(content="hello", is_user=True))

    seed = Message.welcome()
    store.reset(seed)

    assert store.all() == [seed]


def test_messages_are_immutable_and_uniquely_identified():
    first = Message(content="hi", is_user=True)
    second = Message(content="hi", is_user=True)

    assert first.id != second.id
    with pytest.raises(ValidationError):
        first.content = "changed"


def test_build_llm_history_maps_roles():
    messages = [
        Message(content="Hi there", is_user=False),
        Message(content="I had a long day", is_user=True),
    ]

    assert build_llm_history(messages) == [
        {"role": "assistant", "content": "Hi there"},
        {"role": "user", "content": "I had a long day"},
    ]


def test_render_conversation_labels_speakers_and_separates_turns():
    messages = [
        Message(content="How was work?", is_user=False),
        Message(content="Busy.", is_user=True),
    ]

    assert render_conversation(messages) == "AI: How was work?\n\nYou: Busy."


def test_preview_truncates_long_text():
    assert preview("short") == "short"
    assert preview("x" * 60) == "x" * 50 + "..."
