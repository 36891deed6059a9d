from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional

import click
import frontmatter
from flask import Flask, abort, current_app, render_template
from markupsafe import Markup
from slugify import slugify

import config
from composer import RenderError, render_list, render_markdown, render_post
from content import ContentLoadError, ContentSource, PostSummary, load_page

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = Flask(__name__)
app.config.from_object(config)
app.secret_key = config.SECRET_KEY


def content_source() -> ContentSource:
    return ContentSource(Path(current_app.config["CONTENT_DIR"]))


def get_post_by_slug(slug: str) -> Optional[PostSummary]:
    for post in content_source().list_posts():
        if post.identifier == slug:
            return post
    return None


def social_meta() -> List[Dict[str, str]]:
    """Sharing tags for the listing page; fixed per deployment."""
    cfg = current_app.config
    site_url = cfg["SITE_URL"]
    image = f"{site_url}{cfg['SOCIAL_IMAGE']}" if cfg["SOCIAL_IMAGE"] else None
    tags = [
        {"name": "twitter:card", "content": "summary_large_image" if image else "summary"},
        {"name": "twitter:site", "content": cfg["TWITTER_HANDLE"]},
        {"name": "twitter:creator", "content": cfg["TWITTER_HANDLE"]},
        {"name": "twitter:title", "content": cfg["SITE_TITLE"]},
        {"name": "twitter:description", "content": cfg["SITE_DESCRIPTION"]},
        {"property": "og:url", "content": site_url},
        {"property": "og:type", "content": "article"},
        {"property": "og:title", "content": cfg["SITE_TITLE"]},
        {"property": "og:description", "content": cfg["SITE_DESCRIPTION"]},
        {"name": "description", "content": cfg["META_DESCRIPTION"]},
    ]
    if image:
        tags.append({"name": "twitter:image", "content": image})
        tags.append({"property": "og:image", "content": image})
    return tags


@app.context_processor
def inject_globals():
    return {
        "site_title": current_app.config["SITE_TITLE"],
        "nav_links": current_app.config["NAV_LINKS"],
    }


@app.route("/")
def blog_index():
    posts = content_source().list_posts()
    cards = render_list(posts, current_app.config["EXCERPT_LENGTH"])
    return render_template(
        "blog_index.html",
        cards=cards,
        meta_tags=social_meta(),
        heading=current_app.config["LISTING_HEADING"],
        tagline=current_app.config["LISTING_TAGLINE"],
    )


@app.route("/about")
def about():
    body = load_page(Path(current_app.config["CONTENT_DIR"]), "about")
    return render_template(
        "about.html",
        tagline=current_app.config["ABOUT_TAGLINE"],
        body_html=Markup(render_markdown(body)) if body else None,
    )


@app.route("/<slug>")
def blog_post(slug: str):
    post = get_post_by_slug(slug)
    if not post:
        abort(404)
    return render_template("blog_post.html", post=render_post(post))


@app.errorhandler(404)
def not_found(exc):
    return render_template("error.html", heading="Page not found"), 404


@app.errorhandler(ContentLoadError)
def content_load_failed(exc: ContentLoadError):
    app.logger.error("Content could not be loaded: %s", exc)
    return render_template("error.html", heading="Content unavailable"), 500


@app.errorhandler(RenderError)
def render_failed(exc: RenderError):
    app.logger.error("Post %s could not be rendered: %s", exc.identifier, exc)
    return render_template("error.html", heading="Post unavailable"), 500


@app.cli.command("check")
def cli_check():
    """Validate every post document and list them newest first."""
    try:
        posts = content_source().list_posts()
    except ContentLoadError as exc:
        raise click.ClickException(str(exc)) from exc

    cards = render_list(posts, current_app.config["EXCERPT_LENGTH"])
    for card in cards:
        marker = "!" if card.is_placeholder else " "
        click.echo(f"{marker} {card.date_iso}  {card.href}  {card.title}")
        if card.is_placeholder:
            click.secho(f"    {card.error}", fg="yellow")
    broken = sum(1 for card in cards if card.is_placeholder)
    if broken:
        raise click.ClickException(f"{broken} of {len(cards)} posts could not be rendered")
    click.secho(f"\n{len(cards)} posts OK.", fg="green")


@app.cli.command("new")
@click.argument("title")
@click.option("--date", "date_str", default=None, help="Publish date (YYYY-MM-DD), defaults to today.")
@click.option("--draft", is_flag=True, help="Keep the post out of the listing.")
def cli_new(title: str, date_str: Optional[str], draft: bool):
    """Scaffold a new post file from TITLE."""
    slug_value = slugify(title)
    if not slug_value:
        raise click.ClickException("Slug could not be generated")
    if date_str:
        try:
            date.fromisoformat(date_str)
        except ValueError as exc:
            raise click.BadParameter(f"not an ISO-8601 date: {date_str}", param_hint="--date") from exc
    else:
        date_str = date.today().isoformat()

    posts_dir = content_source().posts_dir
    path = posts_dir / f"{slug_value}.md"
    if path.exists():
        raise click.ClickException(f"Post already exists: {path}")

    meta = {"title": title, "date": date_str}
    if draft:
        meta["draft"] = True
    post = frontmatter.Post("Intro paragraph.\n\n<!--more-->\n\nRest of the post.\n", **meta)
    posts_dir.mkdir(parents=True, exist_ok=True)
    path.write_text(frontmatter.dumps(post) + "\n", encoding="utf-8")
    click.echo(f"Created {path}")


if __name__ == "__main__":
    app.run(debug=True)
