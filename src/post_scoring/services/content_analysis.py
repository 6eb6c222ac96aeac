"""Structural analysis of post markup."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from html.parser import HTMLParser

logger = logging.getLogger(__name__)

_SCORED_HEADINGS = {"h2", "h3"}
_LIST_TAGS = {"ul", "ol"}


@dataclass(frozen=True)
class ContentStructure:
    """Structural features extracted from a post body."""

    image_count: int = 0
    heading_count: int = 0
    has_blockquote: bool = False
    has_list: bool = False
    has_table: bool = False


class _StructureParser(HTMLParser):
    """Count the opening tags that describe a post's structure."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.image_count = 0
        self.heading_count = 0
        self.has_blockquote = False
        self.has_list = False
        self.has_table = False

    def handle_starttag(self, tag: str, attrs: list) -> None:
        tag_lower = tag.lower()
        if tag_lower == "img":
            self.image_count += 1
        elif tag_lower in _SCORED_HEADINGS:
            self.heading_count += 1
        elif tag_lower == "blockquote":
            self.has_blockquote = True
        elif tag_lower in _LIST_TAGS:
            self.has_list = True
        elif tag_lower == "table":
            self.has_table = True


def analyze_content(markup: str | None) -> ContentStructure:
    """Return the structural features of ``markup``.

    Empty or unparseable markup yields an all-zero structure; this function
    never raises.
    """
    if not markup:
        return ContentStructure()

    parser = _StructureParser()
    try:
        parser.feed(markup)
        parser.close()
    except (AssertionError, ValueError, TypeError) as exc:
        logger.debug("Unparseable post markup: %s", exc)
        return ContentStructure()

    return ContentStructure(
        image_count=parser.image_count,
        heading_count=parser.heading_count,
        has_blockquote=parser.has_blockquote,
        has_list=parser.has_list,
        has_table=parser.has_table,
    )
