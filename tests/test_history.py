"""Tests for the bounded conversation history and prompt building."""

import pytest

from termchat.core.prompt_builder import build_prompt
from termchat.memory.history import ExchangeLine, HistoryBuffer, Role


@pytest.fixture
def history():
    return HistoryBuffer(max_pairs=2)


class TestHistoryBuffer:
    def test_starts_empty(self, history):
        assert len(history) == 0
        assert history.lines() == []

    def test_capacity_is_twice_the_pairs(self):
        assert HistoryBuffer().capacity == 10
        assert HistoryBuffer(max_pairs=3).capacity == 6

    def test_append_keeps_order(self, history):
        history.append(Role.USER, "hi")
        history.append(Role.ASSISTANT, "hello")
        assert [line.render() for line in history] == ["User: hi", "Assistant: hello"]

    def test_never_exceeds_capacity(self, history):
        for i in range(25):
            role = Role.USER if i % 2 == 0 else Role.ASSISTANT
            history.append(role, f"msg {i}")
            assert len(history) <= history.capacity

    def test_keeps_most_recent_window(self, history):
        for i in range(7):
            history.append(Role.USER, str(i))
        assert [line.text for line in history] == ["3", "4", "5", "6"]

    def test_unpaired_user_lines_count_against_capacity(self, history):
        # Failed turns leave user lines without a reply
        history.append(Role.USER, "a")
        history.append(Role.USER, "b")
        history.append(Role.USER, "c")
        history.append(Role.ASSISTANT, "d")
        history.append(Role.USER, "e")
        assert [line.text for line in history] == ["b", "c", "d", "e"]

    def test_role_accepts_plain_string(self, history):
        line = history.append("Assistant", "ok")
        assert line.role is Role.ASSISTANT

    def test_lines_are_immutable(self, history):
        line = history.append(Role.USER, "hi")
        with pytest.raises(AttributeError):
            line.text = "changed"

    def test_lines_returns_a_copy(self, history):
        history.append(Role.USER, "hi")
        history.lines().clear()
        assert len(history) == 1

    def test_rejects_zero_pairs(self):
        with pytest.raises(ValueError):
            HistoryBuffer(max_pairs=0)


class TestPromptBuilder:
    def test_single_user_line(self):
        assert build_prompt([ExchangeLine(Role.USER, "hi")]) == "User: hi\nAssistant:"

    def test_multiple_lines(self):
        history = HistoryBuffer()
        history.append(Role.USER, "hi")
        history.append(Role.ASSISTANT, "hello")
        history.append(Role.USER, "how are you?")
        assert build_prompt(history) == (
            "User: hi\nAssistant: hello\nUser: how are you?\nAssistant:"
        )

    def test_multiline_message_kept_verbatim(self):
        prompt = build_prompt([ExchangeLine(Role.USER, "line one\nline two")])
        assert prompt == "User: line one\nline two\nAssistant:"

    def test_empty_history(self):
        assert build_prompt([]) == "\nAssistant:"

    def test_does_not_mutate_history(self):
        history = HistoryBuffer()
        history.append(Role.USER, "hi")
        build_prompt(history)
        assert len(history) == 1
