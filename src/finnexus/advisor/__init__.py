"""LLM-backed finance advisor."""

from finnexus.advisor.providers import ChatProvider, OpenAIChatProvider
from finnexus.advisor.service import FinanceAdvisor, build_summary_context

__all__ = ["ChatProvider", "OpenAIChatProvider", "FinanceAdvisor", "build_summary_context"]
