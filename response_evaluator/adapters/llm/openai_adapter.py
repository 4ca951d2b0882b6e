"""OpenAI adapter — implements LLMPort using the OpenAI API."""

from __future__ import annotations

import json
import logging
import math

from openai import AsyncOpenAI

from response_evaluator.adapters.llm.rubric import (
    RUBRIC_VERSION,
    SYSTEM_PROMPT,
    build_user_prompt,
)
from response_evaluator.application.ports.llm_port import LLMPort
from response_evaluator.config import settings
from response_evaluator.domain.entities.thread import SelectedReply
from response_evaluator.domain.entities.verdict import CategoryScore, Verdict
from response_evaluator.domain.value_objects.enums import ProductContext, RubricCategory

logger = logging.getLogger(__name__)

MIN_SCORE = 0
MAX_SCORE = 10


def _clamp(value: float) -> float:
    if not math.isfinite(value):
        raise ValueError(f"score is not a finite number: {value!r}")
    return max(MIN_SCORE, min(MAX_SCORE, value))


class OpenAIAdapter(LLMPort):
    """OpenAI implementation of LLMPort."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        client: AsyncOpenAI | None = None,
    ):
        self._api_key = api_key if api_key is not None else settings.openai_api_key
        self._model = model or settings.openai_model
        self._temperature = (
            temperature if temperature is not None else settings.openai_temperature
        )
        self._max_tokens = max_tokens or settings.openai_max_tokens
        if client is not None:
            self._client = client
        elif self._api_key.strip():
            self._client = AsyncOpenAI(api_key=self._api_key)
        else:
            self._client = None

    async def evaluate_reply(
        self, reply: SelectedReply, context: str, product: ProductContext
    ) -> Verdict:
        """Send the reply to OpenAI and parse the structured verdict.

        Exactly one API call; any failure becomes ``Verdict.failed``.
        """
        if self._client is None:
            logger.warning("OPENAI_API_KEY is not set. Returning error verdict.")
            return Verdict.failed("OpenAI API key is not configured")

        user_content = build_user_prompt(reply.text, context, product)

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": user_content},
                ],
                temperature=self._temperature,
                max_tokens=self._max_tokens,
                response_format={"type": "json_object"},
            )
            raw_text = response.choices[0].message.content or ""
            parsed = json.loads(raw_text)
            verdict = self._map_to_verdict(parsed)
        except json.JSONDecodeError as e:
            logger.warning("Failed to parse JSON from LLM response: %s", e)
            return Verdict.failed(f"Invalid JSON from model: {e}")
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Malformed verdict in LLM response: %r", e)
            return Verdict.failed(f"Malformed model response: {e!r}")
        except Exception as e:
            logger.exception("Unexpected error during LLM call")
            return Verdict.failed(str(e) or e.__class__.__name__)

        logger.info(
            "Evaluated reply (model=%s, rubric=%s, overall=%.1f, improvements=%d)",
            self._model, RUBRIC_VERSION, verdict.overall_score, len(verdict.key_improvements),
        )
        return verdict

    @staticmethod
    def _map_to_verdict(parsed: dict) -> Verdict:
        """Map raw JSON to a Verdict, clamping scores into range.

        Raises KeyError/TypeError/ValueError when the shape is wrong.
        """
        if not isinstance(parsed, dict):
            raise TypeError(f"expected a JSON object, got {type(parsed).__name__}")

        overall = round(float(_clamp(float(parsed["overall_score"]))), 1)

        raw_categories = parsed["categories"]
        categories: dict[RubricCategory, CategoryScore] = {}
        for category in RubricCategory:
            raw = raw_categories[category.value]
            score = int(round(_clamp(float(raw["score"]))))
            feedback = str(raw.get("feedback") or "").strip()
            categories[category] = CategoryScore(score=score, feedback=feedback)

        raw_improvements = parsed.get("key_improvements") or []
        if not isinstance(raw_improvements, list):
            raise TypeError("key_improvements must be a list")
        improvements = [
            str(item).strip() for item in raw_improvements
            if item is not None and str(item).strip()
        ]

        return Verdict(
            overall_score=overall,
            categories=categories,
            key_improvements=improvements,
        )
