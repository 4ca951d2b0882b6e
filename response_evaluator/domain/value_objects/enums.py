"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class AuthorKind(str, Enum):
    CUSTOMER = "customer"
    TEAM = "team"
    SYSTEM = "system"
    UNKNOWN = "unknown"


class ThreadType(str, Enum):
    MESSAGE = "message"
    REPLY = "reply"
    NOTE = "note"
    CUSTOMER = "customer"
    CHAT = "chat"
    LINEITEM = "lineitem"
    OTHER = "other"


class ProductContext(str, Enum):
    SHOPIFY = "shopify"
    WORDPRESS = "wordpress"

    @property
    def product_term(self) -> str:
        """The word replies should use for the product."""
        return "app" if self is ProductContext.SHOPIFY else "plugin"

    @property
    def wrong_term(self) -> str:
        return "plugin" if self is ProductContext.SHOPIFY else "app"

    @property
    def label(self) -> str:
        return "Shopify App" if self is ProductContext.SHOPIFY else "WordPress Plugin"


class RubricCategory(str, Enum):
    """The five scored dimensions, in display order."""

    TONE_EMPATHY = "tone_empathy"
    CLARITY_COMPLETENESS = "clarity_completeness"
    STANDARD_OF_ENGLISH = "standard_of_english"
    PROBLEM_RESOLUTION = "problem_resolution"
    FOLLOWING_STRUCTURE = "following_structure"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]


CATEGORY_LABELS: dict[RubricCategory, str] = {
    RubricCategory.TONE_EMPATHY: "Tone & Empathy",
    RubricCategory.CLARITY_COMPLETENESS: "Clarity & Completeness",
    RubricCategory.STANDARD_OF_ENGLISH: "Standard of English",
    RubricCategory.PROBLEM_RESOLUTION: "Problem Resolution",
    RubricCategory.FOLLOWING_STRUCTURE: "Following Structure",
}


class OutcomeStatus(str, Enum):
    CHAT_UNAVAILABLE = "chat_unavailable"
    FETCH_FAILED = "fetch_failed"
    NO_REPLY = "no_reply"
    CACHED = "cached"
    EVALUATED = "evaluated"
    PROCESSING = "processing"
