"""Tests for the command line interface."""

import json
from pathlib import Path

import yaml  # type: ignore[import-untyped]
from click.testing import CliRunner
from openpyxl import load_workbook  # type: ignore[import-untyped]

from calloutnav import cli, config


def _doc(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "note.md"
    path.write_text(text, encoding="utf-8")
    return path


def test_parse_outputs_text_outline(
    tmp_path: Path, settings_file: Path, sample_text: str
) -> None:
    """Ensure the default listing is an indented outline."""

    doc = _doc(tmp_path, sample_text)

    result = CliRunner().invoke(cli.cli, ["parse", str(doc)])

    assert result.exit_code == 0
    assert result.output.splitlines() == [
        " ME  L:1  A",
        "   YOU  L:2  B",
        " ME  L:3  C (2024-01-01 10:00)",
    ]


def test_parse_overrides_saved_order(
    tmp_path: Path, settings_file: Path, sample_text: str
) -> None:
    """Ensure ordering flags replace the saved settings for one run."""

    doc = _doc(tmp_path, sample_text)

    result = CliRunner().invoke(
        cli.cli,
        ["parse", str(doc), "--by-timestamp", "--flatten", "--descending"],
    )

    assert result.exit_code == 0
    bodies = [line.split("  ")[-1][0] for line in result.output.splitlines()]
    assert bodies == ["C", "A", "B"]


def test_parse_uses_saved_order(
    tmp_path: Path, settings_file: Path, sample_text: str
) -> None:
    """Ensure saved settings drive the listing when no flag is given."""

    settings = config.load_settings()
    settings.sort_ascending = False
    config.save_settings(settings)
    doc = _doc(tmp_path, sample_text)

    result = CliRunner().invoke(cli.cli, ["parse", str(doc)])

    assert result.exit_code == 0
    assert result.output.splitlines()[0] == " ME  L:3  C (2024-01-01 10:00)"


def test_parse_outputs_json(
    tmp_path: Path, settings_file: Path, sample_text: str
) -> None:
    doc = _doc(tmp_path, sample_text)

    result = CliRunner().invoke(cli.cli, ["parse", str(doc), "--format", "json"])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert [a["body"] for a in data] == ["A", "C (2024-01-01 10:00)"]
    assert data[0]["children"][0]["author"] == "you"


def test_parse_writes_yaml_to_directory(
    tmp_path: Path, settings_file: Path, sample_text: str
) -> None:
    doc = _doc(tmp_path, sample_text)
    out_dir = tmp_path / "out"
    out_dir.mkdir()

    result = CliRunner().invoke(
        cli.cli,
        ["parse", str(doc), "--format", "yaml", "--output", str(out_dir)],
    )

    assert result.exit_code == 0
    data = yaml.safe_load((out_dir / "note.yaml").read_text())
    assert data[0]["children"][0]["body"] == "B"


def test_parse_xlsx_requires_output(
    tmp_path: Path, settings_file: Path, sample_text: str
) -> None:
    doc = _doc(tmp_path, sample_text)

    result = CliRunner().invoke(cli.cli, ["parse", str(doc), "--format", "xlsx"])

    assert result.exit_code != 0
    assert "Output file is required" in result.output


def test_parse_writes_xlsx(
    tmp_path: Path, settings_file: Path, sample_text: str
) -> None:
    doc = _doc(tmp_path, sample_text)
    out_file = tmp_path / "out.xlsx"

    result = CliRunner().invoke(
        cli.cli,
        ["parse", str(doc), "--format", "xlsx", "--output", str(out_file)],
    )

    assert result.exit_code == 0
    ws = load_workbook(out_file)["Annotation"]
    assert ws.max_row == 4


def test_parse_reports_empty_documents(
    tmp_path: Path, settings_file: Path
) -> None:
    doc = _doc(tmp_path, "no callouts here\n> [!note] untracked")

    result = CliRunner().invoke(cli.cli, ["parse", str(doc)])

    assert result.exit_code == 0
    assert "No tracked callouts found." in result.output


def test_parse_reports_unreadable_settings(
    tmp_path: Path, settings_file: Path, sample_text: str
) -> None:
    settings_file.write_text("- not\n- a mapping\n")
    doc = _doc(tmp_path, sample_text)

    result = CliRunner().invoke(cli.cli, ["parse", str(doc)])

    assert result.exit_code != 0
    assert "Cannot read settings" in result.output


def test_settings_option_overrides_environment(
    tmp_path: Path, settings_file: Path, sample_text: str
) -> None:
    other = tmp_path / "other.yaml"
    config.save_settings(config.Settings(), other)
    doc = _doc(tmp_path, sample_text)

    result = CliRunner().invoke(
        cli.cli, ["--settings", str(other), "parse", str(doc)]
    )

    # The default settings track tag1/tag2 only.
    assert result.exit_code == 0
    assert "No tracked callouts found." in result.output


def test_insert_prints_block_for_piped_selection(settings_file: Path) -> None:
    result = CliRunner().invoke(cli.cli, ["insert"], input="line one\nline two\n")

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0].startswith("> [!me]- me (")
    assert lines[1:] == ["> line one", "> line two"]


def test_insert_into_file(tmp_path: Path, settings_file: Path) -> None:
    doc = _doc(tmp_path, "first\nsecond")

    result = CliRunner().invoke(
        cli.cli,
        [
            "insert",
            "--author",
            "you",
            "--text",
            "quoted",
            "--into",
            str(doc),
            "--line",
            "2",
        ],
    )

    assert result.exit_code == 0
    lines = doc.read_text().split("\n")
    assert lines[0] == "first"
    assert lines[1].startswith("> [!you]- you (")
    assert lines[2:] == ["> quoted", "second"]


def test_insert_appends_before_final_newline(
    tmp_path: Path, settings_file: Path
) -> None:
    doc = _doc(tmp_path, "first\n")

    result = CliRunner().invoke(
        cli.cli, ["insert", "--text", "quoted", "--into", str(doc)]
    )

    assert result.exit_code == 0
    lines = doc.read_text().split("\n")
    assert lines[0] == "first"
    assert lines[1].startswith("> [!me]- me (")
    assert lines[2:] == ["> quoted", ""]


def test_insert_rejects_line_zero(tmp_path: Path, settings_file: Path) -> None:
    doc = _doc(tmp_path, "first")

    result = CliRunner().invoke(
        cli.cli, ["insert", "--text", "x", "--into", str(doc), "--line", "0"]
    )

    assert result.exit_code != 0
    assert doc.read_text() == "first"


def test_watch_renders_once(
    tmp_path: Path, settings_file: Path, sample_text: str
) -> None:
    doc = _doc(tmp_path, sample_text)

    result = CliRunner().invoke(
        cli.cli, ["watch", str(doc), "--count", "1", "--interval", "0"]
    )

    assert result.exit_code == 0
    assert " ME  L:1  A" in result.output


def test_tags_commands_round_trip(settings_file: Path) -> None:
    runner = CliRunner()

    assert runner.invoke(cli.cli, ["tags", "add", "bob"]).exit_code == 0
    assert (
        runner.invoke(cli.cli, ["tags", "color", "BOB", "#abcdef"]).exit_code
        == 0
    )
    assert runner.invoke(cli.cli, ["tags", "remove", "me"]).exit_code == 0

    result = runner.invoke(cli.cli, ["tags", "list"])

    assert result.exit_code == 0
    assert result.output.splitlines() == ["you\t#FF9500", "bob\t#abcdef"]


def test_tags_remove_unknown(settings_file: Path) -> None:
    result = CliRunner().invoke(cli.cli, ["tags", "remove", "nobody"])

    assert result.exit_code != 0
    assert "Unknown tag" in result.output


def test_tags_add_rejects_blank(settings_file: Path) -> None:
    result = CliRunner().invoke(cli.cli, ["tags", "add", " "])

    assert result.exit_code != 0


def test_settings_set_and_toggles(settings_file: Path) -> None:
    runner = CliRunner()

    assert (
        runner.invoke(
            cli.cli, ["settings", "set", "author_name", "jose"]
        ).exit_code
        == 0
    )
    order = runner.invoke(cli.cli, ["settings", "toggle-order"])
    direction = runner.invoke(cli.cli, ["settings", "toggle-direction"])

    assert order.output.strip() == "Order: chronological"
    assert direction.output.strip() == "Direction: descending"

    shown = yaml.safe_load(runner.invoke(cli.cli, ["settings", "show"]).output)
    assert shown["author_name"] == "jose"
    assert shown["sort_by_timestamp"] is True
    assert shown["sort_ascending"] is False


def test_settings_set_rejects_bad_boolean(settings_file: Path) -> None:
    result = CliRunner().invoke(
        cli.cli, ["settings", "set", "sort_ascending", "sideways"]
    )

    assert result.exit_code != 0
