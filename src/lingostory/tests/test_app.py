"""Tests for application wiring and the command line."""
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from lingostory import config
from lingostory.__main__ import cli, parse_word_pairs
from lingostory.app import StoryApp
from lingostory.models.events import GenerateStory, LoadData
from lingostory.providers.faker_provider import FakerStoryProvider


@pytest.fixture
def app(db):
    """Create an application on the test database."""
    app = StoryApp("reader", db=db, provider=FakerStoryProvider(seed=2))
    yield app
    app.stop()


@pytest.fixture
def runner(db):
    """CLI runner whose application uses the test database."""
    with patch("lingostory.__main__.setup_logging"), patch(
        "lingostory.__main__.StoryApp",
        side_effect=lambda user, provider_name=None: StoryApp(user, db=db, provider=FakerStoryProvider(seed=4)),
    ):
        yield CliRunner()


@pytest.mark.asyncio
async def test_start_wires_services(app: StoryApp) -> None:
    """Test starting the application."""
    controller = app.start()

    assert app.running
    assert app.start() is controller
    state = await controller.handle(LoadData())
    assert state.quota.limit == 3


@pytest.mark.asyncio
async def test_generate_through_app(app: StoryApp) -> None:
    """Test generation end to end with the offline provider."""
    controller = app.start()
    app.learner.add_words(parse_word_pairs([f"word{i}:kelime{i}" for i in range(12)]))

    state = await controller.handle(GenerateStory())

    assert state.error is None
    assert state.current_story.used_words
    assert state.quota.remaining == 2


def test_stop(app: StoryApp) -> None:
    """Test stopping the application."""
    app.start()
    app.stop()
    assert not app.running
    assert app.db is None


def test_start_creates_data_directory(tmp_path, monkeypatch) -> None:
    """Test that the default database directory is created on start."""
    data_dir = tmp_path / "data"
    monkeypatch.setattr(config, "DATA_DIR", data_dir)
    app = StoryApp("reader", provider=FakerStoryProvider(seed=2))

    app.start()
    try:
        assert data_dir.is_dir()
    finally:
        app.stop()


def test_injected_session_skips_data_directory(app: StoryApp, tmp_path, monkeypatch) -> None:
    """Test that an injected session needs no data directory."""
    data_dir = tmp_path / "data"
    monkeypatch.setattr(config, "DATA_DIR", data_dir)

    app.start()
    assert not data_dir.exists()


def test_parse_word_pairs() -> None:
    """Test parsing deck words from the command line."""
    words = parse_word_pairs(["apple:elma", " river : nehir "])
    assert [(word.english, word.turkish) for word in words] == [("apple", "elma"), ("river", "nehir")]

    with pytest.raises(ValueError):
        parse_word_pairs(["apple"])


def test_cli_generate_and_list(runner: CliRunner) -> None:
    """Test the main command line flow."""
    pairs = [f"word{i}:kelime{i}" for i in range(12)]
    result = runner.invoke(cli, ["--user", "ayse", "add-words", *pairs])
    assert result.exit_code == 0, result.output
    assert "Added 12 words" in result.output

    result = runner.invoke(cli, ["--user", "ayse", "generate", "--type", "fantasy", "--topic", "sea"])
    assert result.exit_code == 0, result.output
    assert "Stories left this month: 2/3" in result.output

    result = runner.invoke(cli, ["--user", "ayse", "list"])
    assert result.exit_code == 0, result.output
    assert "No stories found." not in result.output
    assert "Stories left this month: 2/3" in result.output

    result = runner.invoke(cli, ["--user", "ayse", "list", "--type", "dialogue"])
    assert result.exit_code == 0, result.output
    assert "No stories found." in result.output

    result = runner.invoke(cli, ["--user", "ayse", "list", "--type", "fantasy"])
    assert "No stories found." not in result.output

    result = runner.invoke(cli, ["--user", "ayse", "list", "--favorites"])
    assert "No stories found." in result.output

    result = runner.invoke(cli, ["--user", "ayse", "list", "--favorites", "--type", "fantasy"])
    assert result.exit_code == 2


def test_cli_quota_shows_reset(runner: CliRunner) -> None:
    """Test the quota command."""
    result = runner.invoke(cli, ["--user", "new", "quota"])
    assert result.exit_code == 0, result.output
    assert "Stories left this month: 3/3" in result.output
    assert "Resets in " in result.output


def test_cli_reports_errors(runner: CliRunner) -> None:
    """Test that a failed generation exits non-zero."""
    result = runner.invoke(cli, ["--user", "empty", "generate"])
    assert result.exit_code == 1
    assert "Not enough words" in result.output


def test_cli_rejects_bad_arguments(runner: CliRunner) -> None:
    """Test argument validation."""
    assert runner.invoke(cli, ["generate", "--length", "huge"]).exit_code == 2
    assert runner.invoke(cli, ["add-words", "apple"]).exit_code == 2
