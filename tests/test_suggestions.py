"""Unit tests for the suggestion generator."""
import asyncio

import pytest
from conftest import SUGGESTION_PROMPT, FakeResponseClient, RecordingCallback, wait_for
from hypothesis import given
from hypothesis import strategies as st

from mcptodo.chat import ChatMessage, SuggestionGenerator, parse_suggestions, reduce_items
from mcptodo.llm import ChatRole, ResponseItem


def conversation(*texts: str) -> list[ChatMessage]:
    """Build system + alternating user/assistant messages."""
    messages = [ChatMessage.system("system prompt")]
    for index, text in enumerate(texts):
        factory = ChatMessage.user if index % 2 == 0 else ChatMessage.assistant
        messages.append(factory(text))
    return messages


class TestParseSuggestions:
    """Tests for suggestion output parsing."""

    def test_one_suggestion_per_line(self):
        """Test lines are trimmed and blank lines dropped."""
        text = "  How do I add items? \r\n\r\nWhat is overdue?\n   \nMark all done"

        assert parse_suggestions(text) == ["How do I add items?", "What is overdue?", "Mark all done"]

    def test_keeps_first_three(self):
        """Test output is capped at three suggestions."""
        assert parse_suggestions("a\nb\nc\nd\ne") == ["a", "b", "c"]

    def test_empty_output(self):
        """Test empty or whitespace output yields no suggestions."""
        assert parse_suggestions("") == []
        assert parse_suggestions(" \n\r\n ") == []

    def test_custom_limit(self):
        """Test the limit is configurable."""
        assert parse_suggestions("a\nb\nc", limit=1) == ["a"]

    @given(st.text())
    def test_parsed_suggestions_are_clean(self, text: str):
        """Property test: results are non-blank, trimmed, single-line, at most 3."""
        suggestions = parse_suggestions(text)

        assert len(suggestions) <= 3
        for suggestion in suggestions:
            assert suggestion
            assert suggestion == suggestion.strip()
            assert "\n" not in suggestion and "\r" not in suggestion


class TestReduceItems:
    """Tests for suggestion context reduction."""

    def test_keeps_system_and_last_five(self):
        """Test older dialogue is dropped."""
        items = [message.to_item() for message in conversation(*[f"m{i}" for i in range(8)])]

        reduced = reduce_items(items)

        assert reduced[0].role == ChatRole.SYSTEM
        assert [item.content for item in reduced[1:]] == ["m3", "m4", "m5", "m6", "m7"]

    def test_skips_empty_items(self):
        """Test empty user/assistant items are not counted."""
        items = [
            ResponseItem.system("sys"),
            ResponseItem.user("hi"),
            ResponseItem.assistant(""),
            ResponseItem.user("again"),
        ]

        assert [item.content for item in reduce_items(items)] == ["sys", "hi", "again"]

    def test_short_conversation_is_unchanged(self):
        """Test conversations under the limit pass through."""
        items = [message.to_item() for message in conversation("q", "a")]

        assert reduce_items(items) == items

    @given(st.lists(
        st.tuples(st.sampled_from([ChatRole.USER, ChatRole.ASSISTANT]), st.text(max_size=3)),
        max_size=20,
    ))
    def test_reduction_is_ordered_suffix(self, dialogue):
        """Property test: reduced dialogue is the last non-empty items, in order."""
        items = [ResponseItem.system("sys")] + [
            ResponseItem(role=role, content=content) for role, content in dialogue
        ]

        reduced = reduce_items(items)

        non_empty = [item for item in items[1:] if item.content]
        assert reduced[0] == items[0]
        assert reduced[1:] == non_empty[-5:]


class TestSuggestionGenerator:
    """Tests for background suggestion generation."""

    @pytest.mark.asyncio
    async def test_generate_sends_reduced_context(self):
        """Test the request is the reduced context plus the instruction."""
        client = FakeResponseClient(responses=["Q1\nQ2"])
        generator = SuggestionGenerator(client, prompt=SUGGESTION_PROMPT)

        suggestions = await generator.generate(conversation(*[f"m{i}" for i in range(7)]))

        assert suggestions == ["Q1", "Q2"]
        items = client.response_calls[0]["items"]
        assert len(items) == 1 + 5 + 1
        assert items[-1] == ResponseItem.user(SUGGESTION_PROMPT)
        assert client.response_calls[0]["tools"] is None

    @pytest.mark.asyncio
    async def test_update_publishes_suggestions(self):
        """Test update stores and announces the new set."""
        callback = RecordingCallback()
        client = FakeResponseClient(responses=["Q1\nQ2\nQ3"])
        generator = SuggestionGenerator(client, prompt=SUGGESTION_PROMPT, callback=callback)

        await generator.update(conversation("q", "a"))

        assert generator.suggestions == ["Q1", "Q2", "Q3"]
        assert ("suggestions_changed", ["Q1", "Q2", "Q3"]) in callback.events
        assert generator.pending is None

    @pytest.mark.asyncio
    async def test_update_cancels_previous_request(self):
        """Test only the newest request publishes results."""
        callback = RecordingCallback()
        client = FakeResponseClient(responses=["first", "second"])
        client.response_gate = asyncio.Event()
        generator = SuggestionGenerator(client, prompt=SUGGESTION_PROMPT, callback=callback)

        first = generator.update(conversation("q1", "a1"))
        await wait_for(lambda: len(client.response_calls) == 1)
        second = generator.update(conversation("q2", "a2"))
        client.response_gate.set()

        await second
        with pytest.raises(asyncio.CancelledError):
            await first

        assert first.cancelled()
        published = [payload for name, payload in callback.events if name == "suggestions_changed"]
        assert published == [["first"]]
        assert generator.suggestions == ["first"]

    @pytest.mark.asyncio
    async def test_failure_is_reported(self):
        """Test errors go to the callback and leave suggestions empty."""
        callback = RecordingCallback()
        client = FakeResponseClient(responses=[ConnectionError("offline")])
        generator = SuggestionGenerator(client, prompt=SUGGESTION_PROMPT, callback=callback)

        await generator.update(conversation("q", "a"))

        assert generator.suggestions == []
        assert any(name == "error" and isinstance(payload, ConnectionError) for name, payload in callback.events)

    @pytest.mark.asyncio
    async def test_clear_cancels_and_empties(self):
        """Test clear drops suggestions and the pending request."""
        callback = RecordingCallback()
        client = FakeResponseClient(responses=["Q1", "Q2"])
        generator = SuggestionGenerator(client, prompt=SUGGESTION_PROMPT, callback=callback)
        await generator.update(conversation("q", "a"))

        client.response_gate = asyncio.Event()
        task = generator.update(conversation("q", "a", "q2", "a2"))
        await wait_for(lambda: len(client.response_calls) == 2)
        generator.clear()

        assert generator.suggestions == []
        assert generator.pending is None
        assert callback.events[-1] == ("suggestions_changed", [])
        with pytest.raises(asyncio.CancelledError):
            await task

    @pytest.mark.asyncio
    async def test_clear_without_suggestions_is_silent(self):
        """Test clearing an empty set emits nothing."""
        callback = RecordingCallback()
        generator = SuggestionGenerator(FakeResponseClient(), prompt=SUGGESTION_PROMPT, callback=callback)

        generator.clear()

        assert callback.events == []
