"""tests/test_cli.py"""

from content import ContentSource


def test_check_lists_posts(runner, make_post):
    make_post("a", title="First", date="2021-01-05")
    make_post("b", title="Second", date="2021-02-10")

    result = runner.invoke(args=["check"])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0].endswith("/b  Second")
    assert lines[1].endswith("/a  First")
    assert "2 posts OK." in result.output


def test_check_reports_malformed_content(runner, make_post):
    make_post("bad", title="Missing date")

    result = runner.invoke(args=["check"])

    assert result.exit_code == 1
    assert "bad.md" in result.output


def test_check_fails_when_a_post_cannot_render(runner, content_dir, make_post, monkeypatch):
    make_post("fine", title="Fine", date="2021-01-05")
    broken = make_post("broken", title="Broken", date="2021-02-01")
    posts = ContentSource(content_dir).list_posts()
    broken.unlink()
    monkeypatch.setattr(ContentSource, "list_posts", lambda self: posts)

    result = runner.invoke(args=["check"])

    assert result.exit_code == 1
    assert result.output.splitlines()[0].startswith("! 2021-02-01  /broken")
    assert "1 of 2 posts could not be rendered" in result.output
    assert "posts OK" not in result.output


def test_new_scaffolds_a_loadable_post(runner, content_dir):
    result = runner.invoke(args=["new", "Hello, World!", "--date", "2021-05-01"])

    assert result.exit_code == 0
    assert (content_dir / "posts" / "hello-world.md").is_file()
    (post,) = ContentSource(content_dir).list_posts()
    assert post.identifier == "hello-world"
    assert post.title == "Hello, World!"
    assert post.publish_date.isoformat() == "2021-05-01"


def test_new_draft_stays_out_of_the_listing(runner, content_dir):
    result = runner.invoke(args=["new", "Later", "--draft"])
    assert result.exit_code == 0
    assert ContentSource(content_dir).list_posts() == ()


def test_new_refuses_to_overwrite(runner, make_post):
    make_post("taken", title="Taken", date="2021-01-05")
    result = runner.invoke(args=["new", "Taken"])
    assert result.exit_code == 1
    assert "already exists" in result.output


def test_new_rejects_bad_date(runner):
    result = runner.invoke(args=["new", "Title", "--date", "soon"])
    assert result.exit_code == 2
