"""
Test utilities: HTML fixtures and text factories.
"""

from __future__ import annotations

from typing import Iterable

SENTENCE = "The council approved the new budget after a long debate on transit funding. "


def make_text(length: int, sentence: str = SENTENCE) -> str:
    """Return prose of exactly ``length`` characters with no edge whitespace."""
    if length <= 0:
        return ""
    repeated = sentence * (length // len(sentence) + 1)
    text = repeated[:length]
    if text[-1].isspace():
        text = text[:-1] + "."
    return text


def paragraphs_html(paragraphs: Iterable[str]) -> str:
    return "".join(f"<p>{text}</p>" for text in paragraphs)


def page(body: str, title: str = "Test page") -> str:
    return (
        "<!DOCTYPE html><html><head>"
        f"<title>{title}</title></head><body>{body}</body></html>"
    )


def article_page(*paragraphs: str) -> str:
    """A page whose body is a semantic <article> with the given paragraphs."""
    return page(
        '<nav><a href="/">HOME</a></nav>'
        f"<article><h1>Headline</h1>{paragraphs_html(paragraphs)}</article>"
        '<footer><p>Copyright notice.</p></footer>'
    )
