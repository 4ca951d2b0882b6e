"""EvaluateConversationUseCase — fetch → select → summarize → evaluate."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass

from response_evaluator.application.ports.conversation_port import ConversationPort
from response_evaluator.application.ports.llm_port import LLMPort
from response_evaluator.application.services.verdict_cache import VerdictCache
from response_evaluator.domain.entities.thread import SelectedReply
from response_evaluator.domain.entities.ticket import Ticket
from response_evaluator.domain.entities.verdict import Verdict
from response_evaluator.domain.policies.context_summary import (
    MAX_CONTEXT_THREADS,
    summarize_context,
)
from response_evaluator.domain.policies.product_context import detect_product_context
from response_evaluator.domain.policies.reply_selection import select_latest_reply
from response_evaluator.domain.value_objects.enums import OutcomeStatus, ProductContext

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 7.0


@dataclass
class EvaluationOutcome:
    """What happened to one sidebar request."""

    status: OutcomeStatus
    verdict: Verdict | None = None
    product: ProductContext = ProductContext.WORDPRESS
    reply: SelectedReply | None = None
    cache_key: str | None = None


class EvaluateConversationUseCase:
    """Orchestrates the evaluation pipeline for a single ticket.

    Built once per process: it owns the set of detached evaluation tasks
    that outlive the request which started them.
    """

    def __init__(
        self,
        conversations: ConversationPort,
        llm: LLMPort,
        cache: VerdictCache,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        context_limit: int = MAX_CONTEXT_THREADS,
    ):
        self._conversations = conversations
        self._llm = llm
        self._cache = cache
        self._timeout = timeout_seconds
        self._context_limit = context_limit
        self._tasks: set[asyncio.Task] = set()

    async def execute(self, ticket: Ticket, tags: Iterable[object] = ()) -> EvaluationOutcome:
        """Evaluate the latest team reply on *ticket*.

        Pipeline:
        1. Live chats are not evaluated (no fetch).
        2. Fetch conversation threads.
        3. Select the latest team reply.
        4. Summarize context and detect product.
        5. Serve from cache, or report an evaluation already in flight.
        6. Start a detached evaluation and wait for it up to the timeout.
        """
        if ticket.is_chat():
            logger.info("Ticket %s is a chat, skipping evaluation", ticket.id)
            return EvaluationOutcome(status=OutcomeStatus.CHAT_UNAVAILABLE)

        threads = await self._conversations.fetch_threads(ticket.id)
        if threads is None:
            logger.warning("Conversation %s unavailable", ticket.id)
            return EvaluationOutcome(status=OutcomeStatus.FETCH_FAILED)

        reply = select_latest_reply(threads)
        if reply is None:
            logger.info("Conversation %s has no team reply to evaluate", ticket.id)
            return EvaluationOutcome(status=OutcomeStatus.NO_REPLY)

        product = detect_product_context(tags, threads)
        context = summarize_context(threads, limit=self._context_limit)
        key = self._cache.make_key(ticket.id, reply.text)
        logger.info(
            "Ticket %s: reply thread=%s, length=%d, product=%s",
            ticket.id, reply.source_thread_id, len(reply.text), product.value,
        )

        cached = self._cache.get(key)
        if cached is not None:
            logger.info("Cache hit for %s", key)
            return EvaluationOutcome(
                status=OutcomeStatus.CACHED, verdict=cached,
                product=product, reply=reply, cache_key=key,
            )

        if self._cache.is_in_flight(key):
            logger.info("Evaluation for %s already in flight", key)
            return EvaluationOutcome(
                status=OutcomeStatus.PROCESSING, product=product, reply=reply, cache_key=key,
            )

        task = self.start_evaluation(key, reply, context, product)
        try:
            verdict = await asyncio.wait_for(asyncio.shield(task), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Evaluation for %s exceeded %.1fs, continuing in background",
                key, self._timeout,
            )
            return EvaluationOutcome(
                status=OutcomeStatus.PROCESSING, product=product, reply=reply, cache_key=key,
            )

        return EvaluationOutcome(
            status=OutcomeStatus.EVALUATED, verdict=verdict,
            product=product, reply=reply, cache_key=key,
        )

    def start_evaluation(
        self,
        key: str,
        reply: SelectedReply,
        context: str,
        product: ProductContext,
    ) -> asyncio.Task:
        """Mark *key* in flight and launch the model call as a detached task.

        The returned handle may be awaited or ignored; either way the result
        lands in the cache and the marker is cleared when the call finishes.
        """
        self._cache.mark_in_flight(key)
        task = asyncio.create_task(self._evaluate_and_store(key, reply, context, product))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    async def drain(self, timeout: float | None = None) -> None:
        """Wait for detached evaluations to finish (used at shutdown)."""
        if not self._tasks:
            return
        logger.info("Waiting for %d background evaluation(s)", len(self._tasks))
        _, pending = await asyncio.wait(set(self._tasks), timeout=timeout)
        if pending:
            logger.warning("%d background evaluation(s) still running at shutdown", len(pending))

    async def _evaluate_and_store(
        self,
        key: str,
        reply: SelectedReply,
        context: str,
        product: ProductContext,
    ) -> Verdict:
        try:
            verdict = await self._llm.evaluate_reply(reply, context, product)
        except Exception as e:
            logger.exception("Evaluator raised for %s", key)
            verdict = Verdict.failed(str(e))
        finally:
            self._cache.clear_in_flight(key)

        # Failed evaluations stay uncached so a sidebar reload retries them
        if verdict.is_error:
            logger.warning("Evaluation for %s failed: %s", key, verdict.error)
        else:
            self._cache.set(key, verdict)
            logger.info("Cached verdict for %s (overall=%.1f)", key, verdict.overall_score)
        return verdict
