from pathlib import Path

import pytest
from typer.testing import CliRunner

from newsmerge.cli.app import app
from newsmerge.config import load_sources
from newsmerge.models import ReliabilityTier

runner = CliRunner()


@pytest.fixture
def home(tmp_path, monkeypatch):
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    return tmp_path


def sources_file(home):
    return home / ".config" / "newsmerge" / "sources.yaml"


class TestSourcesCommands:
    def test_add_then_remove(self, home):
        result = runner.invoke(
            app,
            [
                "sources",
                "add",
                "--name",
                "Gabon Media Time",
                "--url",
                "https://www.gabonmediatime.com",
                "--feed-url",
                "https://www.gabonmediatime.com/feed/",
                "--reliability",
                "medium",
            ],
        )

        assert result.exit_code == 0
        sources = load_sources(sources_file(home))
        assert sources[0].kind == "rss"
        assert sources[0].reliability == ReliabilityTier.MEDIUM

        result = runner.invoke(app, ["sources", "remove", "Gabon Media Time"])

        assert result.exit_code == 0
        assert load_sources(sources_file(home)) == []

    def test_duplicate_name_rejected(self, home):
        args = ["sources", "add", "--name", "AGP", "--url", "https://agpgabon.ga"]
        assert runner.invoke(app, args).exit_code == 0

        result = runner.invoke(app, args)

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_remove_unknown(self, home):
        result = runner.invoke(app, ["sources", "remove", "Nowhere"])
        assert result.exit_code == 1

    def test_list_without_sources(self, home):
        result = runner.invoke(app, ["sources", "list"])

        assert result.exit_code == 0
        assert "No sources configured" in result.output
