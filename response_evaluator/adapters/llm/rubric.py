"""Support-quality rubric sent to the model.

Kept as template data so rubric wording can change without touching the
adapter. Bump RUBRIC_VERSION whenever the scoring rules change.
"""

from __future__ import annotations

from response_evaluator.domain.value_objects.enums import ProductContext

RUBRIC_VERSION = "2024-06.1"

SYSTEM_PROMPT = (
    "You are an expert at evaluating customer support responses. "
    "Respond ONLY with a valid JSON object, no markdown or extra text."
)

RUBRIC_TEMPLATE = """\
You are evaluating a customer support response for a {platform} product \
(a {product_term}) against these guidelines.

SUPPORT TONE REQUIREMENTS:
1. MUST open by thanking the customer.
2. MUST close with a polite sign-off (e.g. "Let me know if you have any questions").
3. Apologize ONLY when the company has done something wrong. Do not ask for an \
apology when the company made no mistake.
4. Suggest a workaround ONLY when declining a request or saying something is not \
possible. Do not ask for workarounds when the issue is fully resolved.
5. Suggest adding a link ONLY when the reply references specific documentation or \
a specific feature without already linking to it.
6. Use positive language (avoid "but" and "however" where possible).
7. Call the product a "{product_term}", never a "{wrong_term}".
8. Be helpful and reassuring, especially for pre-sales questions.

INVESTIGATIVE REPLIES:
If the reply is gathering information (asking for details, screenshots, access, \
steps to reproduce), score Problem Resolution on the quality of the investigation. \
Do not penalize it for lacking a final resolution.

RECENT CONVERSATION (oldest first):
{context}

RESPONSE TO EVALUATE:
\"\"\"{reply}\"\"\"

Score each category from 0 to 10 (integers) with short, specific feedback:
1. tone_empathy: tone guidelines, thanks the customer, polite closing
2. clarity_completeness: clear, direct answers that address every question
3. standard_of_english: grammar, spelling, natural phrasing
4. problem_resolution: addresses the customer's actual need (or investigates well)
5. following_structure: greeting, closing, correct "{product_term}" terminology

Then give an overall score from 0 to 10 (one decimal place).

key_improvements: list ONLY improvements that are meaningfully necessary. If the \
reply is already strong, return an empty list. Never invent issues to fill the list.

{schema}"""

OUTPUT_SCHEMA = """\
Return JSON with exactly this structure:
{
  "overall_score": 8.5,
  "categories": {
    "tone_empathy": {"score": 9, "feedback": "..."},
    "clarity_completeness": {"score": 8, "feedback": "..."},
    "standard_of_english": {"score": 8, "feedback": "..."},
    "problem_resolution": {"score": 9, "feedback": "..."},
    "following_structure": {"score": 8, "feedback": "..."}
  },
  "key_improvements": []
}"""

NO_CONTEXT_PLACEHOLDER = "(no earlier messages available)"


def build_user_prompt(reply_text: str, context: str, product: ProductContext) -> str:
    return RUBRIC_TEMPLATE.format(
        platform="Shopify" if product is ProductContext.SHOPIFY else "WordPress",
        product_term=product.product_term,
        wrong_term=product.wrong_term,
        context=context or NO_CONTEXT_PLACEHOLDER,
        reply=reply_text,
        schema=OUTPUT_SCHEMA,
    )
