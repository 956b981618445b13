"""Smoke tests for the CLI."""
import pytest
from typer.testing import CliRunner

from dimagram.api.state import AppState
from dimagram.cli import app
from dimagram.models.album import AlbumItem, StoreKind


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def state(monkeypatch, store, remote, cdn) -> AppState:
    state = AppState(store=store, remote=remote, cdn=cdn)
    monkeypatch.setattr("dimagram.api.state._state", state)
    return state


class TestPublishCommand:
    def test_publish(self, runner, store, remote):
        store.save(StoreKind.QUEUE, [AlbumItem(id="1", url="a")])
        result = runner.invoke(app, ["publish"])
        assert result.exit_code == 0
        assert "Successfully published 1" in result.output
        assert remote.pointer["id"] == "1"

    def test_publish_empty_queue_exits_nonzero(self, runner):
        result = runner.invoke(app, ["publish"])
        assert result.exit_code == 1
        assert "no items in album queue" in result.output

    def test_cdn_warning_is_reported(self, runner, store, cdn):
        store.save(StoreKind.QUEUE, [AlbumItem(id="1", url="a")])
        cdn.fail = True
        result = runner.invoke(app, ["publish"])
        assert result.exit_code == 0
        assert "Warning: invalidate CDN cache" in result.output


class TestUnpublishCommand:
    def test_unpublish(self, runner, store):
        store.save(StoreKind.ARCHIVE, [AlbumItem(id="1", url="a"), AlbumItem(id="2", url="b")])
        result = runner.invoke(app, ["unpublish"])
        assert result.exit_code == 0
        assert "Live item: 1" in result.output
        assert [i.id for i in store.read(StoreKind.QUEUE)] == ["2"]

    def test_unpublish_empty_archive_exits_nonzero(self, runner):
        result = runner.invoke(app, ["unpublish"])
        assert result.exit_code == 1
        assert "no items in archive" in result.output


def test_no_args_shows_help(runner):
    result = runner.invoke(app, [])
    assert "publish" in result.output
