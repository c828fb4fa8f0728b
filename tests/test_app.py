import json

import pytest

from dopanel import app
from dopanel.panel.widget import DropletsWidget

from .conftest import FakeClient, paged


@pytest.fixture(autouse=True)
def no_token(monkeypatch):
    monkeypatch.delenv("DO_API_TOKEN", raising=False)


@pytest.mark.parametrize(
    "raw, following, key",
    [
        ("j", "", "j"),
        ("\x04", "", "ctrl-d"),
        ("\r", "", "enter"),
        ("\x1b", "", "esc"),
        ("\x1b", "[A", "up"),
        ("\x1b", "[B", "down"),
    ],
)
def test_decode_key(raw, following, key):
    assert app.decode_key(raw, following) == key


def test_json_without_token_fails(capsys):
    assert app.main(["--json"]) == 1
    assert "client could not be initialized" in capsys.readouterr().err


def test_json_prints_droplets(monkeypatch, capsys, droplets):
    monkeypatch.setattr(app, "create_client", lambda settings: FakeClient(paged(droplets)))

    assert app.main(["--json", "--token", "secret"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert [d["name"] for d in payload] == ["web", "db", "worker"]


def test_snapshot_mode(monkeypatch, capsys, droplets):
    monkeypatch.setattr(app, "create_client", lambda settings: FakeClient(paged(droplets)))

    assert app.main(["--token", "secret"]) == 0
    assert "worker" in capsys.readouterr().out


def test_bad_config_exits(capsys):
    assert app.main(["--config", "/nonexistent/dopanel.json"]) == 2


def test_toggle_help(settings):
    widget = DropletsWidget(None, settings)

    app.toggle_help(widget)
    assert widget.screen.has_page(app.HELP_PAGE)

    app.toggle_help(widget)
    assert not widget.screen.has_page(app.HELP_PAGE)
