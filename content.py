"""Post documents on disk, validated into summaries for the listing page.

Each post is a Markdown file with YAML front matter, either
``posts/<name>.md`` or ``posts/<name>/index.md`` under the content root.
Only the front matter is interpreted here; the body is left for the
composer to resolve through :class:`BodyRef`.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import frontmatter
import pydantic
import yaml
from slugify import slugify

logger = logging.getLogger(__name__)

POSTS_SUBDIR = "posts"
INDEX_DOCUMENT = "index.md"
# Identifiers are served as /<identifier>, so they must not shadow fixed routes.
RESERVED_IDENTIFIERS = frozenset({"about", "static"})


class ContentLoadError(Exception):
    """The document set is malformed; no listing can be produced."""

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.path}: {self.message}"


class PostMetadata(pydantic.BaseModel):
    """Front matter schema for a post document."""

    model_config = pydantic.ConfigDict(extra="allow", str_strip_whitespace=True)

    title: str = pydantic.Field(min_length=1)
    date: datetime.date
    slug: Optional[str] = None
    draft: bool = False

    @pydantic.field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> Any:
        # YAML hands back date/datetime objects for unquoted values.
        if isinstance(value, datetime.datetime):
            return value.date()
        if isinstance(value, str):
            try:
                return datetime.datetime.fromisoformat(value.strip()).date()
            except ValueError as exc:
                raise ValueError(f"not an ISO-8601 date: {value!r}") from exc
        return value


@dataclass(frozen=True)
class BodyRef:
    """Where a post body lives, plus the front matter fields we don't interpret."""

    path: Path
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PostSummary:
    identifier: str
    title: str
    publish_date: datetime.date
    body_ref: BodyRef


PostCollection = Tuple[PostSummary, ...]


def _describe(exc: pydantic.ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "metadata"
        problems.append(f"{location}: {error['msg']}")
    return "invalid metadata (" + "; ".join(problems) + ")"


class ContentSource:
    """Read-only view over the post documents below ``root``."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    @property
    def posts_dir(self) -> Path:
        return self.root / POSTS_SUBDIR

    def document_paths(self) -> List[Path]:
        posts_dir = self.posts_dir
        paths = [p for p in posts_dir.glob("*.md") if p.is_file()]
        for child in posts_dir.iterdir():
            index = child / INDEX_DOCUMENT
            if child.is_dir() and index.is_file():
                paths.append(index)
        return sorted(paths)

    def list_posts(self) -> PostCollection:
        """Load every published post.

        Raises ContentLoadError on the first malformed document; nothing is
        returned in that case. Order of the result is not meaningful.
        """
        if not self.posts_dir.is_dir():
            raise ContentLoadError("posts directory not found", path=self.posts_dir)

        summaries: List[PostSummary] = []
        seen: Dict[str, Path] = {}
        drafts = 0
        for path in self.document_paths():
            summary, draft = self._load_summary(path)
            previous = seen.get(summary.identifier)
            if previous is not None:
                raise ContentLoadError(
                    f"duplicate identifier {summary.identifier!r} (also used by {previous})",
                    path=path,
                )
            seen[summary.identifier] = path
            if draft:
                drafts += 1
                continue
            summaries.append(summary)

        logger.debug(
            "Loaded %d posts (%d drafts skipped) from %s",
            len(summaries),
            drafts,
            self.posts_dir,
        )
        return tuple(summaries)

    def _identifier_for(self, path: Path, meta: PostMetadata) -> str:
        if meta.slug:
            raw = meta.slug
        elif path.name == INDEX_DOCUMENT and path.parent != self.posts_dir:
            raw = path.parent.name
        else:
            raw = path.stem
        identifier = slugify(raw)
        if not identifier:
            raise ContentLoadError(f"cannot derive an identifier from {raw!r}", path=path)
        if identifier in RESERVED_IDENTIFIERS:
            raise ContentLoadError(
                f"identifier {identifier!r} clashes with a fixed route", path=path
            )
        return identifier

    def _load_summary(self, path: Path) -> Tuple[PostSummary, bool]:
        try:
            post = frontmatter.load(str(path))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            raise ContentLoadError(f"cannot read document: {exc}", path=path) from exc

        try:
            meta = PostMetadata.model_validate(post.metadata)
        except pydantic.ValidationError as exc:
            raise ContentLoadError(_describe(exc), path=path) from exc

        summary = PostSummary(
            identifier=self._identifier_for(path, meta),
            title=meta.title,
            publish_date=meta.date,
            body_ref=BodyRef(path=path, meta=dict(meta.model_extra or {})),
        )
        return summary, meta.draft


def get_all_post_previews(root: Path) -> PostCollection:
    return ContentSource(root).list_posts()


def load_page(root: Path, name: str) -> Optional[str]:
    """Markdown body of ``<root>/<name>.md``, or None when there is no such page."""
    path = Path(root) / f"{name}.md"
    if not path.is_file():
        return None
    try:
        return frontmatter.load(str(path)).content
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise ContentLoadError(f"cannot read page: {exc}", path=path) from exc
