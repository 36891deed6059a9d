"""Binds post summaries into the cards shown on the listing page."""

from __future__ import annotations

import datetime
import logging
import re
from dataclasses import dataclass
from html import unescape
from typing import Iterable, List, Optional

import frontmatter
import yaml
from markdown import markdown
from markupsafe import Markup

from content import PostSummary

logger = logging.getLogger(__name__)

POST_DATE_FMT = "%B %d, %Y"
MORE_MARKER = "<!--more-->"
DEFAULT_EXCERPT_LENGTH = 220


class RenderError(Exception):
    """A post body could not be resolved to renderable content."""

    def __init__(self, message: str, identifier: Optional[str] = None) -> None:
        super().__init__(message)
        self.identifier = identifier


@dataclass(frozen=True)
class RenderedCard:
    identifier: str
    title: str
    href: str
    date_iso: str
    date_display: str
    excerpt_html: Markup
    # Set on placeholder cards only.
    error: Optional[str] = None

    @property
    def is_placeholder(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class RenderedPost:
    identifier: str
    title: str
    date_iso: str
    date_display: str
    html: Markup


def render_markdown(md_text: str) -> str:
    return markdown(
        md_text or "",
        extensions=["fenced_code", "codehilite", "tables", "sane_lists"],
        output_format="html5",
    )


def format_post_date(value: datetime.date) -> str:
    return value.strftime(POST_DATE_FMT)


def link_for(identifier: str) -> str:
    return f"/{identifier}"


def build_excerpt(html: str, length: int = DEFAULT_EXCERPT_LENGTH) -> str:
    text = unescape(re.sub(r"<[^>]+>", "", html or "")).strip()
    if len(text) <= length:
        return text
    return f"{text[:length].rstrip()}…"


def sort_posts(collection: Iterable[PostSummary]) -> List[PostSummary]:
    """Newest first. sorted() is stable, so same-day posts keep their input order."""
    return sorted(collection, key=lambda s: s.publish_date, reverse=True)


def _read_body(summary: PostSummary) -> str:
    path = summary.body_ref.path
    try:
        return frontmatter.load(str(path)).content
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise RenderError(
            f"cannot resolve body of {summary.identifier!r} at {path}: {exc}",
            identifier=summary.identifier,
        ) from exc


def render_excerpt(summary: PostSummary, length: int = DEFAULT_EXCERPT_LENGTH) -> Markup:
    """Preview HTML for a card.

    An ``excerpt`` front matter field wins; then everything above the
    ``<!--more-->`` marker; then the first ``length`` characters of the
    rendered body as plain text. The body must resolve in every case.
    """
    body = _read_body(summary)
    explicit = summary.body_ref.meta.get("excerpt")
    if isinstance(explicit, str) and explicit.strip():
        return Markup(render_markdown(explicit))

    if MORE_MARKER in body:
        preview = body.split(MORE_MARKER, 1)[0]
        return Markup(render_markdown(preview))

    text = build_excerpt(render_markdown(body), length)
    if not text:
        return Markup("")
    return Markup("<p>%s</p>") % text


def _card(summary: PostSummary, excerpt: Markup, error: Optional[str] = None) -> RenderedCard:
    return RenderedCard(
        identifier=summary.identifier,
        title=summary.title,
        href=link_for(summary.identifier),
        date_iso=summary.publish_date.isoformat(),
        date_display=format_post_date(summary.publish_date),
        excerpt_html=excerpt,
        error=error,
    )


def render_card(summary: PostSummary, excerpt_length: int = DEFAULT_EXCERPT_LENGTH) -> RenderedCard:
    return _card(summary, render_excerpt(summary, excerpt_length))


def render_list(
    collection: Iterable[PostSummary], excerpt_length: int = DEFAULT_EXCERPT_LENGTH
) -> List[RenderedCard]:
    """Cards for ``collection``, newest first, one per summary.

    A post whose body cannot be resolved becomes a placeholder card (no
    excerpt, ``error`` set); the rest of the list is unaffected.
    """
    cards: List[RenderedCard] = []
    for summary in sort_posts(collection):
        try:
            cards.append(render_card(summary, excerpt_length))
        except RenderError as exc:
            logger.warning("Rendering placeholder card for %s: %s", summary.identifier, exc)
            cards.append(_card(summary, Markup(""), error=str(exc)))
    return cards


def render_post(summary: PostSummary) -> RenderedPost:
    return RenderedPost(
        identifier=summary.identifier,
        title=summary.title,
        date_iso=summary.publish_date.isoformat(),
        date_display=format_post_date(summary.publish_date),
        html=Markup(render_markdown(_read_body(summary))),
    )
