"""Tests for route label parsing and the intent classifier."""

import pytest

from inksink.agents.classifier import IntentClassifier
from inksink.core.errors import ClassificationError
from inksink.schemas.routing import (
    ClarifyingQuestion,
    Route,
    normalize_route_text,
    parse_route_label,
    route_name,
)
from inksink.workflows.chat_workflow import RoutedConversation, select_branch
from tests.fakes import FakeClassifierAgent

TARGETS = ["research", "write", "assist", "clarify"]


class TestParseRouteLabel:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("research", Route.RESEARCH),
            ("write", Route.WRITE),
            ("writer", Route.WRITE),
            ("assistant", Route.ASSISTANT),
            ("  Research\n", Route.RESEARCH),
            ('"research"', Route.RESEARCH),
            ("'WRITE'", Route.WRITE),
        ],
    )
    def test_known_labels(self, raw, expected):
        assert parse_route_label(raw) is expected

    def test_free_text_becomes_clarifying_question(self):
        label = parse_route_label("  Could you tell me a bit more about the audience?  ")

        assert label == ClarifyingQuestion("Could you tell me a bit more about the audience?")

    def test_only_one_surrounding_quote_is_removed(self):
        assert normalize_route_text("\"'research'\"") == "'research'"
        assert isinstance(parse_route_label("\"'research'\""), ClarifyingQuestion)

    def test_route_name(self):
        assert route_name(Route.WRITE) == "write"
        assert route_name(ClarifyingQuestion("Which one?")) == "Which one?"


class TestSelectBranch:
    @pytest.mark.parametrize(
        "route, expected",
        [
            (Route.RESEARCH, ["research"]),
            (Route.WRITE, ["write"]),
            (Route.ASSISTANT, ["assist"]),
            (ClarifyingQuestion("Which one?"), ["clarify"]),
        ],
    )
    def test_exactly_one_target(self, route, expected):
        assert select_branch(RoutedConversation(messages=[], route=route), TARGETS) == expected


class TestIntentClassifier:
    async def test_returns_route(self):
        agent = FakeClassifierAgent(reply="write")

        label = await IntentClassifier(agent).classify(["history"])

        assert label is Route.WRITE
        assert agent.calls == [["history"]]

    async def test_empty_output_is_an_error(self):
        classifier = IntentClassifier(FakeClassifierAgent(reply=' "" '))

        with pytest.raises(ClassificationError):
            await classifier.classify([])

    async def test_agent_failure_is_an_error(self):
        classifier = IntentClassifier(FakeClassifierAgent(error=RuntimeError("timeout")))

        with pytest.raises(ClassificationError, match="timeout"):
            await classifier.classify([])
