"""
tests/conftest.py
"""
from __future__ import annotations

from pathlib import Path
from typing import Callable, Generator

import frontmatter
import pytest
from flask.testing import FlaskClient, FlaskCliRunner

from app import app


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """An empty content root with its posts/ directory."""
    root = tmp_path / "content"
    (root / "posts").mkdir(parents=True)
    return root


@pytest.fixture
def make_post(content_dir: Path) -> Callable[..., Path]:
    """
    Write a post document and return its path.

    ``make_post("a", title="A", date="2021-01-05")`` writes posts/a.md;
    pass ``nested=True`` for posts/a/index.md.
    """

    def _make(name: str, body: str = "Hello there.", *, nested: bool = False, **meta) -> Path:
        posts = content_dir / "posts"
        if nested:
            path = posts / name / "index.md"
            path.parent.mkdir(parents=True, exist_ok=True)
        else:
            path = posts / f"{name}.md"
        path.write_text(frontmatter.dumps(frontmatter.Post(body, **meta)), encoding="utf-8")
        return path

    return _make


@pytest.fixture
def configured_app(content_dir: Path):
    app.config.update(TESTING=True, CONTENT_DIR=str(content_dir))
    return app


@pytest.fixture
def client(configured_app) -> Generator[FlaskClient, None, None]:
    with configured_app.test_client() as client:
        yield client


@pytest.fixture
def runner(configured_app) -> FlaskCliRunner:
    return configured_app.test_cli_runner()
