"""Tests for the command line interface."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from dialogue_engine.cli.commands import _parse_equipped, cli
from dialogue_engine.cli.play_cmd import DialoguePlayer

RESOURCES = Path(__file__).resolve().parent.parent / "resources"
DIALOGUES = RESOURCES / "dialogue"
FISHER = DIALOGUES / "fisher.json"


@pytest.fixture
def runner():
    return CliRunner()


class TestValidateCommand:
    def test_valid_file(self, runner):
        result = runner.invoke(cli, ["validate", str(FISHER)])
        assert result.exit_code == 0
        assert "Validation passed" in result.output

    def test_invalid_file(self, runner, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"lines": []}), encoding="utf-8")
        result = runner.invoke(cli, ["validate", str(path)])
        assert result.exit_code == 1

    def test_detailed(self, runner):
        result = runner.invoke(cli, ["validate", "--detailed", str(FISHER)])
        assert "Statistics" in result.output


class TestStatsCommand:
    def test_stats(self, runner):
        result = runner.invoke(cli, ["stats", str(FISHER)])
        assert result.exit_code == 0
        assert "bait, basic_rod" in result.output

    def test_unreadable(self, runner, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{", encoding="utf-8")
        assert runner.invoke(cli, ["stats", str(path)]).exit_code == 1


class TestShowCommand:
    def test_without_items(self, runner):
        result = runner.invoke(cli, ["show", str(FISHER)])
        assert result.exit_code == 0
        assert "You look like you could use a rod." in result.output

    def test_with_item(self, runner):
        result = runner.invoke(cli, ["show", str(FISHER), "--item", "basic_rod"])
        assert "Nice rod" in result.output
        assert "[yes]" in result.output

    def test_with_equipped(self, runner):
        result = runner.invoke(cli, ["show", str(FISHER), "--equipped", "equippedRodId=basic_rod"])
        assert "Nice rod" in result.output


class TestPlayCommand:
    def test_plays_to_the_end(self, runner):
        result = runner.invoke(cli, ["play", "fisher", "--dialogues", str(DIALOGUES)], input="\n\n")
        assert result.exit_code == 0
        assert "Take this one, I have spares." in result.output
        assert "basic_rod x1" in result.output

    def test_with_locales(self, runner):
        result = runner.invoke(
            cli,
            ["play", "fisher", "--dialogues", str(DIALOGUES), "--locales", str(RESOURCES / "locales")],
            input="\n\n",
        )
        assert "Old Fisher" in result.output

    def test_unknown_npc(self, runner):
        result = runner.invoke(cli, ["play", "nobody", "--dialogues", str(DIALOGUES)])
        assert result.exit_code == 1
        assert "nothing to say" in result.output


class TestDialoguePlayer:
    def test_selects_option(self):
        inputs = iter(["", "2", "", ""])
        output = []
        player = DialoguePlayer(
            DIALOGUES,
            items={"basic_rod": 1},
            input_func=lambda prompt: next(inputs),
            output=output.append,
        )

        assert player.play("fisher") is True
        text = "\n".join(output)
        assert "Not yet." in text
        assert "Try some bait. Here." in text
        assert player.inventory.count("bait") == 5

    def test_quit(self):
        output = []
        player = DialoguePlayer(DIALOGUES, input_func=lambda prompt: "q", output=output.append)
        assert player.play("fisher") is True
        assert any("abandoned" in line for line in output)
        assert player.inventory.count("basic_rod") == 0


class TestParseEquipped:
    def test_key_value(self):
        assert _parse_equipped(["equippedRodId=rod"]) == {"equippedRodId": "rod"}

    def test_bare_item(self):
        assert _parse_equipped(["rod"]) == {"equippedItemId": "rod"}
