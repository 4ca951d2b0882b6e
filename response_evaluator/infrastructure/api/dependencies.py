"""FastAPI dependency injection — wires adapters into use cases.

The shared objects (cache, adapters, use case) are built once by ``create_app``
and kept on ``app.state``; these helpers hand them to routes.
"""

from __future__ import annotations

from datetime import timedelta

from fastapi import Request

from response_evaluator.adapters.helpscout.helpscout_adapter import HelpScoutAdapter
from response_evaluator.adapters.llm.openai_adapter import OpenAIAdapter
from response_evaluator.adapters.rendering.html_renderer import HtmlRenderer
from response_evaluator.application.ports.conversation_port import ConversationPort
from response_evaluator.application.ports.llm_port import LLMPort
from response_evaluator.application.services.verdict_cache import VerdictCache
from response_evaluator.application.use_cases.evaluate_conversation import (
    EvaluateConversationUseCase,
)
from response_evaluator.config import Settings


def build_services(
    config: Settings,
    conversations: ConversationPort | None = None,
    llm: LLMPort | None = None,
    cache: VerdictCache | None = None,
) -> tuple[VerdictCache, EvaluateConversationUseCase, HtmlRenderer]:
    """Construct the process-wide services; callers may swap in fakes."""
    if cache is None:
        cache = VerdictCache(retention=timedelta(days=config.cache_retention_days))
    use_case = EvaluateConversationUseCase(
        conversations=conversations or HelpScoutAdapter(),
        llm=llm or OpenAIAdapter(),
        cache=cache,
        timeout_seconds=config.evaluation_timeout_seconds,
        context_limit=config.context_thread_limit,
    )
    renderer = HtmlRenderer(cached_detail=config.cached_result_detail)
    return cache, use_case, renderer


def get_verdict_cache(request: Request) -> VerdictCache:
    return request.app.state.verdict_cache


def get_evaluate_conversation_uc(request: Request) -> EvaluateConversationUseCase:
    return request.app.state.evaluate_uc


def get_renderer(request: Request) -> HtmlRenderer:
    return request.app.state.renderer


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
