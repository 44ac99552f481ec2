"""Text normalization shared by extraction and summarization."""
from __future__ import annotations

import html
import re

BOILERPLATE_KEYWORDS: tuple[str, ...] = (
    "cookie",
    "advertisement",
    "sign up",
    "privacy policy",
    "terms of use",
    "get the app",
)

# Short lines without any lowercase letter are almost always nav labels
NAV_LABEL_MAX_LENGTH = 40

_PUNCTUATION_MAP = str.maketrans(
    {
        "\u201c": '"',
        "\u201d": '"',
        "\u2018": "'",
        "\u2019": "'",
        "\u2013": "-",
        "\u2014": "-",
        "\u00a0": " ",
        "\t": " ",
        "\r": None,
        "\ufffd": None,
    }
)

_INLINE_WHITESPACE = re.compile(r"[^\S\n]+")
_ANY_WHITESPACE = re.compile(r"\s+")


def unify_punctuation(text: str) -> str:
    """Replace typographic quotes, dashes and odd spaces with ASCII forms."""
    return text.translate(_PUNCTUATION_MAP).replace("\u2026", "...")


def is_nav_label(line: str) -> bool:
    return len(line) < NAV_LABEL_MAX_LENGTH and not any(ch.islower() for ch in line)


def has_boilerplate(line: str, keywords: tuple[str, ...] = BOILERPLATE_KEYWORDS) -> bool:
    lowered = line.lower()
    return any(keyword in lowered for keyword in keywords)


def clean_article_text(text: str | None) -> str:
    """Normalize extracted article text into paragraphs.

    Decodes HTML entities, unifies punctuation, drops nav labels and
    boilerplate lines, collapses inline whitespace, and joins the surviving
    lines with exactly one blank line between them. Already-clean text is
    returned unchanged.

    Args:
        text: Raw text, typically paragraph texts joined by newlines

    Returns:
        Cleaned text, or an empty string when nothing survives
    """
    if not text or not text.strip():
        return ""

    text = unify_punctuation(html.unescape(text))

    paragraphs: list[str] = []
    for raw_line in text.split("\n"):
        line = _INLINE_WHITESPACE.sub(" ", raw_line).strip()
        if not line:
            continue
        if is_nav_label(line) or has_boilerplate(line):
            continue
        paragraphs.append(line)

    return "\n\n".join(paragraphs)


def normalize_for_summary(text: str | None) -> str:
    """Flatten text into a single whitespace-normalized line for the backend."""
    if not text or not text.strip():
        return ""
    text = unify_punctuation(html.unescape(text))
    return _ANY_WHITESPACE.sub(" ", text).strip()


def count_paragraphs(text: str) -> int:
    return len([part for part in text.split("\n\n") if part.strip()])
