"""Tests for the finance advisor."""

from datetime import date
from decimal import Decimal

import pytest

from finnexus.advisor.service import (
    CHAT_EMPTY,
    CHAT_NO_KEY,
    CHAT_UNAVAILABLE,
    INSIGHTS_EMPTY,
    INSIGHTS_NO_KEY,
    INSIGHTS_UNAVAILABLE,
    FinanceAdvisor,
    build_summary_context,
)
from finnexus.config import AISettings
from finnexus.domain.aggregation import calculate_summary


class FakeProvider:
    """Records prompts and returns a canned reply."""

    def __init__(self, reply="<ul><li>a</li><li>b</li><li>c</li></ul>", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def complete(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def summary(make_transaction):
    return calculate_summary(
        [make_transaction(1000), make_transaction(500)],
        today=date(2024, 3, 31),
    )


class TestInsights:
    """Tests for FinanceAdvisor.insights."""

    def test_prompt_uses_summary_and_last_ten(self, make_transaction, summary):
        """Test that only the ten most recent transactions are sent."""
        transactions = [
            make_transaction(day, txn_date=date(2024, 3, day), description=f"Entry {day}")
            for day in range(1, 13)
        ]
        provider = FakeProvider()

        result = FinanceAdvisor(provider).insights(summary, transactions)

        assert result.startswith("<ul>")
        prompt = provider.calls[0][0]["content"]
        assert "<ul>" in prompt
        assert "Total income: R$ 1.500,00" in prompt
        assert "Entry 12" in prompt
        assert "Entry 3)" in prompt
        assert "Entry 2)" not in prompt
        assert "Entry 1)" not in prompt

    def test_missing_key(self, summary):
        """Test the fallback when no provider is configured."""
        assert FinanceAdvisor().insights(summary, []) == INSIGHTS_NO_KEY

    def test_provider_error(self, summary):
        """Test that exceptions become the fallback string."""
        advisor = FinanceAdvisor(FakeProvider(error=ConnectionError("timeout")))

        assert advisor.insights(summary, []) == INSIGHTS_UNAVAILABLE

    def test_empty_reply(self, summary):
        """Test that an empty reply becomes the fallback string."""
        assert FinanceAdvisor(FakeProvider(reply="  ")).insights(summary, []) == INSIGHTS_EMPTY


class TestChat:
    """Tests for FinanceAdvisor.chat."""

    def test_chat_sends_context_and_question(self, summary):
        """Test the system context and the user message."""
        provider = FakeProvider(reply=" Your net profit is R$ 1.275,00. ")

        answer = FinanceAdvisor(provider).chat("What is my profit?", summary)

        assert answer == "Your net profit is R$ 1.275,00."
        system, user = provider.calls[0]
        assert system["role"] == "system"
        assert build_summary_context(summary) in system["content"]
        assert user == {"role": "user", "content": "What is my profit?"}

    def test_chat_fallbacks(self, summary):
        """Test every chat fallback."""
        assert FinanceAdvisor().chat("hi", summary) == CHAT_NO_KEY
        assert FinanceAdvisor(FakeProvider(error=ValueError("bad json"))).chat("hi", summary) == CHAT_UNAVAILABLE
        assert FinanceAdvisor(FakeProvider(reply="")).chat("hi", summary) == CHAT_EMPTY


class TestFromSettings:
    """Tests for building the advisor from settings."""

    def test_without_key_has_no_provider(self):
        """Test that a missing key gives the no-key fallback."""
        advisor = FinanceAdvisor.from_settings(AISettings())

        assert advisor.provider is None

    def test_openai_key_alias(self, monkeypatch):
        """Test that OPENAI_API_KEY configures the provider."""
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

        settings = AISettings()
        advisor = FinanceAdvisor.from_settings(settings)

        assert settings.api_key == "sk-test"
        assert advisor.provider is not None
        assert advisor.provider.model == "xiaomi/mimo-v2-flash:free"
