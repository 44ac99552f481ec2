"""Locate the article body inside a parsed HTML document.

Strategies are tried in priority order and the first qualifying node wins.
When no selector matches, a density heuristic picks the ``<div>`` whose own
paragraphs carry the most text. That last step is best-effort and may pick a
long comment thread on unusual templates.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import lxml.html
from lxml import etree
from lxml.html import HtmlElement

logger = logging.getLogger(__name__)

_LOWER = "translate({attr}, 'ABCDEFGHIJKLMNOPQRSTUVWXYZ', 'abcdefghijklmnopqrstuvwxyz')"


def _attr_contains(tag: str, fragment: str) -> str:
    """XPath for ``tag`` elements whose class or id contains ``fragment``, ignoring case."""
    klass = _LOWER.format(attr="@class")
    ident = _LOWER.format(attr="@id")
    return f"//{tag}[contains({klass}, '{fragment}') or contains({ident}, '{fragment}')]"


@dataclass(frozen=True)
class LocatorStrategy:
    name: str
    xpath: str
    min_paragraphs: int = 1

    def find(self, document: HtmlElement) -> Optional[HtmlElement]:
        for node in document.xpath(self.xpath):
            if len(paragraph_texts(node)) >= self.min_paragraphs:
                return node
        return None


_CONTAINER = "*[self::div or self::section or self::main]"

DEFAULT_STRATEGIES: tuple[LocatorStrategy, ...] = (
    LocatorStrategy("article-tag", "//article"),
    LocatorStrategy("article-body", _attr_contains(_CONTAINER, "article-body")),
    LocatorStrategy("story-body", _attr_contains("div", "story-body"), min_paragraphs=2),
    LocatorStrategy("entry-content", _attr_contains("div", "entry-content"), min_paragraphs=2),
    LocatorStrategy("post-content", _attr_contains("div", "post-content"), min_paragraphs=2),
    LocatorStrategy("article-section", _attr_contains("section", "article"), min_paragraphs=2),
    LocatorStrategy("article-div", _attr_contains("div", "article"), min_paragraphs=2),
)

DENSITY_MIN_PARAGRAPHS = 2
DENSITY_STRATEGY = "density"


def parse_html(html: str) -> Optional[HtmlElement]:
    """Parse an HTML string, returning None for empty or unparsable input."""
    if not html or not html.strip():
        return None
    try:
        return lxml.html.document_fromstring(html)
    except (etree.ParserError, ValueError):
        logger.debug("Unparsable HTML document", exc_info=True)
        return None


def paragraph_texts(node: HtmlElement) -> List[str]:
    """Non-empty text of every ``<p>`` under ``node``, in document order."""
    texts: List[str] = []
    for p in node.iter("p"):
        text = p.text_content().strip()
        if text:
            texts.append(text)
    return texts


def _own_paragraph_texts(div: HtmlElement) -> List[str]:
    """Paragraphs whose nearest enclosing ``<div>`` is ``div`` itself."""
    texts: List[str] = []
    for p in div.iter("p"):
        nearest = next(p.iterancestors("div"), None)
        if nearest is not div:
            continue
        text = p.text_content().strip()
        if text:
            texts.append(text)
    return texts


def densest_div(document: HtmlElement) -> Optional[HtmlElement]:
    best: Optional[HtmlElement] = None
    best_length = 0
    for div in document.iter("div"):
        texts = _own_paragraph_texts(div)
        if len(texts) < DENSITY_MIN_PARAGRAPHS:
            continue
        length = sum(len(text) for text in texts)
        if length > best_length:
            best, best_length = div, length
    return best


class ContentLocator:
    """Finds the node most likely to hold the article body.

    Strategies are data: pass a different sequence to add or reorder them.
    """

    def __init__(
        self,
        strategies: Sequence[LocatorStrategy] = DEFAULT_STRATEGIES,
        use_density_fallback: bool = True,
    ):
        self.strategies = tuple(strategies)
        self.use_density_fallback = use_density_fallback

    def locate(self, document: HtmlElement) -> Optional[HtmlElement]:
        located = self._locate(document)
        return located[1] if located else None

    def extract_paragraphs(self, html: str) -> List[str]:
        """Parse ``html`` and return the located node's paragraphs (empty if none)."""
        document = parse_html(html)
        if document is None:
            return []
        located = self._locate(document)
        if located is None:
            return []
        strategy, node = located
        if strategy == DENSITY_STRATEGY:
            return _own_paragraph_texts(node)
        return paragraph_texts(node)

    def _locate(self, document: HtmlElement) -> Optional[Tuple[str, HtmlElement]]:
        for strategy in self.strategies:
            node = strategy.find(document)
            if node is not None:
                logger.debug("Content located", extra={"strategy": strategy.name})
                return strategy.name, node

        if self.use_density_fallback:
            node = densest_div(document)
            if node is not None:
                logger.debug("Content located", extra={"strategy": DENSITY_STRATEGY})
                return DENSITY_STRATEGY, node

        return None
