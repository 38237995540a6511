"""Finance advisor: turns summary figures into LLM prompts.

The advisor never raises. A missing API key, a failed request or an empty
reply each map to a fixed message the caller can show as-is.
"""

import logging
from typing import Iterable, Optional

from finnexus.advisor.providers import ChatProvider, OpenAIChatProvider
from finnexus.config import AISettings
from finnexus.domain.aggregation import sort_by_date_desc
from finnexus.domain.entities import FinancialSummary, Transaction
from finnexus.utils.amount_parser import format_currency

logger = logging.getLogger(__name__)

INSIGHTS_CONTEXT_SIZE = 10

INSIGHTS_NO_KEY = "API key (OPENAI_API_KEY) is not configured."
INSIGHTS_EMPTY = "Could not generate insights at this time."
INSIGHTS_UNAVAILABLE = "AI service unavailable. Check your connection."
CHAT_NO_KEY = "API key missing."
CHAT_EMPTY = "No response generated."
CHAT_UNAVAILABLE = "Error communicating with the AI assistant."

INSIGHTS_GUIDELINES = """\
You are a senior financial consultant (CFO) and auditor for small and
medium-sized companies. Give sharp, practical analysis to improve cash flow.

Response rules:
1. Act as an experienced business partner: serious but encouraging.
2. Format: an HTML unordered list (<ul>) with exactly 3 items (<li>).
   Use <strong> for key numbers and terms. Never use markdown.
3. Content:
   - Item 1: operational efficiency (income vs expense).
   - Item 2: an immediate risk or opportunity, based on the transactions
     or pending amounts.
   - Item 3: one practical action to take today.
"""

CHAT_GUIDELINES = """\
You are the FinNexus consultant, an assistant for quick business support.
Answer only what was asked. Base your answers on the data below; if asked
"what is my profit?", state the figure instead of explaining the concept.
Split long answers into short paragraphs and keep an executive tone.

{context}
"""


def build_summary_context(summary: FinancialSummary) -> str:
    """Render the summary figures as prompt context."""
    return "\n".join(
        [
            "Financial summary:",
            f"- Total income: {format_currency(summary.total_income)}",
            f"- Total expense: {format_currency(summary.total_expense)}",
            f"- Commissions: {format_currency(summary.total_commissions)}",
            f"- Gross profit: {format_currency(summary.gross_profit)}",
            f"- Estimated tax: {format_currency(summary.tax_liability_estimate)}",
            f"- Net profit: {format_currency(summary.net_profit)}",
            f"- Pending invoices: {format_currency(summary.pending_invoices)}",
        ]
    )


def _transaction_line(txn: Transaction) -> str:
    return (
        f"{txn.date.isoformat()}: {txn.type.value} of {format_currency(txn.amount)} "
        f"in {txn.category.value} ({txn.description})"
    )


class FinanceAdvisor:
    """LLM-backed advisor for insights and free-form questions."""

    def __init__(self, provider: Optional[ChatProvider] = None):
        """Initialize the advisor.

        Args:
            provider: Chat backend; None means no API key is configured
        """
        self.provider = provider

    @classmethod
    def from_settings(cls, settings: AISettings) -> "FinanceAdvisor":
        """Build an advisor from AI settings, without a provider if no key is set."""
        if not settings.api_key:
            return cls(provider=None)
        provider = OpenAIChatProvider(
            api_key=settings.api_key,
            base_url=settings.base_url,
            model=settings.model,
            timeout=settings.timeout_seconds,
        )
        return cls(provider=provider)

    def insights(self, summary: FinancialSummary, transactions: Iterable[Transaction]) -> str:
        """Ask for three short insights about the current figures.

        Args:
            summary: Figures to analyze
            transactions: Transactions; only the most recent ten are sent

        Returns:
            HTML list from the model, or a fallback message
        """
        if self.provider is None:
            return INSIGHTS_NO_KEY

        recent = sort_by_date_desc(transactions)[:INSIGHTS_CONTEXT_SIZE]
        prompt = "\n\n".join(
            [
                INSIGHTS_GUIDELINES,
                build_summary_context(summary),
                f"Recent transactions (last {INSIGHTS_CONTEXT_SIZE}):",
                "\n".join(_transaction_line(txn) for txn in recent) or "(none)",
            ]
        )
        messages = [{"role": "user", "content": prompt}]
        return self._complete(messages, empty=INSIGHTS_EMPTY, unavailable=INSIGHTS_UNAVAILABLE)

    def chat(self, message: str, summary: FinancialSummary) -> str:
        """Answer a free-form question using the summary as context."""
        if self.provider is None:
            return CHAT_NO_KEY

        messages = [
            {
                "role": "system",
                "content": CHAT_GUIDELINES.format(context=build_summary_context(summary)),
            },
            {"role": "user", "content": message},
        ]
        return self._complete(messages, empty=CHAT_EMPTY, unavailable=CHAT_UNAVAILABLE)

    def _complete(self, messages: list[dict], empty: str, unavailable: str) -> str:
        try:
            reply = self.provider.complete(messages)
        except Exception as e:
            logger.warning("Advisor request failed: %s", e)
            return unavailable
        if not reply or not reply.strip():
            return empty
        return reply.strip()
