"""ProductContextPolicy — Shopify app or WordPress plugin conversation."""

from __future__ import annotations

from collections.abc import Iterable

from response_evaluator.domain.entities.thread import Thread
from response_evaluator.domain.value_objects.enums import ProductContext

SHOPIFY_MARKER = "shopify"


def detect_product_context(
    tags: Iterable[object] = (),
    threads: Iterable[Thread] = (),
) -> ProductContext:
    """Shopify if any tag or thread body mentions it, WordPress otherwise.

    Tags may be plain strings or Help Scout tag objects ({"tag": ...} or
    {"name": ...}).
    """
    for tag in tags:
        if isinstance(tag, dict):
            name = tag.get("name") or tag.get("tag") or ""
        else:
            name = tag
        if isinstance(name, str) and SHOPIFY_MARKER in name.lower():
            return ProductContext.SHOPIFY

    for thread in threads:
        if SHOPIFY_MARKER in (thread.body or "").lower():
            return ProductContext.SHOPIFY

    return ProductContext.WORDPRESS
