"""Integration tests for the CLI commands (env issue -> commit -> export)"""

import pytest
from typer.testing import CliRunner

from issueblog.cli.cli import app


ISSUE_ENV = {
    "ISSUE_NUMBER": "1",
    "ISSUE_TITLE": "Hello World",
    "ISSUE_BODY": "# Intro\n\nFirst **post**.",
    "ISSUE_AUTHOR": "octocat",
    "ISSUE_CREATED_AT": "2024-01-15T10:00:00Z",
    "ISSUE_LABELS": "python, APPROVED",
}


@pytest.fixture(name="runner")
def runner_fixture(tmp_path, monkeypatch):
    """CliRunner in a clean tmp dir with a file-backed DB and a known repository."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ISSUEBLOG_DB_URL", f"sqlite:///{tmp_path}/test.db")
    monkeypatch.setenv("GITHUB_REPOSITORY", "octo/blog")
    for key in ISSUE_ENV:
        monkeypatch.delenv(key, raising=False)
    return CliRunner()


def _publish(runner, **overrides):
    return runner.invoke(app, ["publish", "--out-dir", "site"], env={**ISSUE_ENV, **overrides})


# --- init ---

def test_init_cmd(runner):
    result = runner.invoke(app, ["init"])
    assert result.exit_code == 0, result.output
    assert "Database initialized" in result.output


def test_init_cmd_reset(runner, tmp_path):
    _publish(runner)
    result = runner.invoke(app, ["init", "--reset"])
    assert result.exit_code == 0, result.output
    assert "Existing data cleared." in result.output
    assert runner.invoke(app, ["list"]).exit_code == 1


# --- publish ---

def test_publish_cmd_writes_site(runner, tmp_path):
    result = _publish(runner)
    assert result.exit_code == 0, result.output
    assert "created: #1 -> posts/2024-01-15-hello-world.html" in result.output
    site = tmp_path / "site"
    page = (site / "posts" / "2024-01-15-hello-world.html").read_text()
    assert "<h1>Intro</h1>" in page
    assert "<strong>post</strong>" in page
    assert (site / "tags" / "python.html").exists()
    assert (site / "feed.xml").exists()


def test_publish_cmd_unchanged_then_updated(runner):
    _publish(runner)
    assert "unchanged: #1" in _publish(runner).output
    assert "updated: #1" in _publish(runner, ISSUE_BODY="Edited").output


def test_publish_cmd_missing_env(runner):
    result = runner.invoke(app, ["publish"])
    assert result.exit_code == 1
    assert "Error: Missing required environment variables: ISSUE_NUMBER, ISSUE_TITLE" in result.output


def test_publish_cmd_invalid_number(runner):
    result = _publish(runner, ISSUE_NUMBER="one")
    assert result.exit_code == 1
    assert "ISSUE_NUMBER" in result.output


# --- render ---

def test_render_cmd_file(runner, tmp_path):
    (tmp_path / "post.md").write_text("## Hi\n\n- a\n- b\n")
    result = runner.invoke(app, ["render", "post.md"])
    assert result.exit_code == 0, result.output
    assert result.output == "<h2>Hi</h2>\n\n<ul>\n<li>a</li>\n<li>b</li>\n</ul>\n"


def test_render_cmd_stdin(runner):
    result = runner.invoke(app, ["render", "-"], input="**x** & y")
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "<p><strong>x</strong> &amp; y</p>"


def test_render_cmd_missing_file(runner):
    result = runner.invoke(app, ["render", "nope.md"])
    assert result.exit_code == 1
    assert "Error: Cannot read nope.md" in result.output


# --- list ---

def test_list_cmd_empty(runner):
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 1
    assert "No posts published yet." in result.output


def test_list_cmd_shows_posts(runner):
    _publish(runner)
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0, result.output
    assert "#1  January 15, 2024  Hello World  [python, APPROVED]" in result.output


# --- rebuild ---

def test_rebuild_cmd(runner, tmp_path):
    _publish(runner)
    (tmp_path / "site" / "index.html").unlink()
    result = runner.invoke(app, ["rebuild", "--out-dir", "site"])
    assert result.exit_code == 0, result.output
    assert "Rebuild complete - 0 re-rendered" in result.output
    assert (tmp_path / "site" / "index.html").exists()


# --- unpublish ---

def test_unpublish_cmd(runner, tmp_path):
    _publish(runner)
    result = runner.invoke(app, ["unpublish", "1", "--out-dir", "site"])
    assert result.exit_code == 0, result.output
    assert "Unpublished issue #1" in result.output
    assert not (tmp_path / "site" / "posts" / "2024-01-15-hello-world.html").exists()


def test_unpublish_cmd_missing(runner):
    result = runner.invoke(app, ["unpublish", "99"])
    assert result.exit_code == 1
    assert "Error: No post found for issue #99" in result.output


# --- history ---

def test_history_cmd_lists_versions(runner):
    _publish(runner)
    _publish(runner, ISSUE_BODY="Second draft")
    result = runner.invoke(app, ["history", "1"])
    assert result.exit_code == 0, result.output
    assert "v1" in result.output
    assert "Hello World" in result.output


def test_history_cmd_no_versions(runner):
    _publish(runner)
    result = runner.invoke(app, ["history", "1"])
    assert "No stored versions for issue #1." in result.output


def test_history_cmd_diff(runner):
    _publish(runner, ISSUE_BODY="one\n")
    _publish(runner, ISSUE_BODY="two\n")
    _publish(runner, ISSUE_BODY="three\n")
    result = runner.invoke(app, ["history", "1", "--diff", "1", "2"])
    assert result.exit_code == 0, result.output
    assert "-one" in result.output
    assert "+two" in result.output


def test_history_cmd_since(runner):
    _publish(runner, ISSUE_BODY="one\n")
    _publish(runner, ISSUE_BODY="two\n")
    result = runner.invoke(app, ["history", "1", "--since", "1"])
    assert result.exit_code == 0, result.output
    assert "+++ current" in result.output
    assert "+two" in result.output


def test_history_cmd_missing_version(runner):
    _publish(runner)
    _publish(runner, ISSUE_BODY="changed")
    result = runner.invoke(app, ["history", "1", "--diff", "1", "5"])
    assert result.exit_code == 1
    assert "Error: Version 5 not found" in result.output


def test_history_cmd_missing_post(runner):
    result = runner.invoke(app, ["history", "3"])
    assert result.exit_code == 1
    assert "No post found for issue #3" in result.output
