"""Tests for the command line entry points."""

import json

import pandas as pd
import pytest

from eadv_mocker.cli import extract_dependencies_cli, generate_mock_data_cli


@pytest.fixture
def ruleblocks_json(tmp_path):
    """Write a parsed ruleblock dump like the rule compiler produces."""
    payload = {
        "ruleblocks": [
            {
                "name": "ckd",
                "rules": [
                    {
                        "rule_type": "fetch",
                        "assigned_variable": "egfr_last",
                        "table": "eadv",
                        "attribute_list": ["lab_bld_egfr", "icd_n18%"],
                        "property": "val",
                        "function_name": "last",
                    },
                    {
                        "rule_type": "bind",
                        "assigned_variable": "dm",
                        "source_ruleblock": "dm",
                        "source_variable": "dm",
                    },
                    {
                        "rule_type": "compute",
                        "assigned_variable": "has_ckd",
                        "conditions": [
                            {"predicate": "egfr_last < 60", "return_value": "1"},
                            {"predicate": None, "return_value": "0"},
                        ],
                    },
                ],
            }
        ]
    }
    path = tmp_path / "ruleblocks.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_generate_writes_json_to_stdout(ruleblocks_json, capsys) -> None:
    exit_code = generate_mock_data_cli(
        [
            str(ruleblocks_json),
            "--entities",
            "2",
            "--observations",
            "4",
            "--seed",
            "12345",
            "--start",
            "2024-01-01",
            "--end",
            "2024-12-31",
        ]
    )
    assert exit_code == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["metadata"]["entities"] == [1001, 1002]
    assert payload["metadata"]["total_rows"] == 16  # 2 entities x 2 attributes x 4
    assert payload["metadata"]["seed"] == 12345
    assert len(payload["rout_tables"]["rout_dm"]) == 2


def test_generate_is_reproducible(ruleblocks_json, capsys) -> None:
    args = [str(ruleblocks_json), "--seed", "7", "--start", "2024-01-01", "--end", "2024-06-30"]
    generate_mock_data_cli(args)
    first = capsys.readouterr().out
    generate_mock_data_cli(args)
    second = capsys.readouterr().out
    assert first == second


def test_generate_writes_output_file_and_csv(
    ruleblocks_json, tmp_path, monkeypatch
) -> None:
    monkeypatch.chdir(tmp_path)
    exit_code = generate_mock_data_cli(
        [
            str(ruleblocks_json),
            "--scenario",
            "episodic-admission",
            "--entities",
            "2",
            "--date-format",
            "mssql",
            "--no-bind-tables",
            "--output",
            "out/mock.json",
            "--csv-dir",
            "csv",
        ]
    )
    assert exit_code == 0

    payload = json.loads((tmp_path / "out" / "mock.json").read_text(encoding="utf-8"))
    assert payload["rout_tables"] == {}
    assert payload["metadata"]["total_rows"] == 2 * 2 * 9
    assert len(payload["eadv"][0]["dt"]) == len("2024-01-01 00:00:00")

    eadv = pd.read_csv(tmp_path / "csv" / "eadv.csv")
    assert list(eadv.columns) == ["eid", "att", "dt", "val"]
    assert len(eadv) == 36


def test_output_outside_cwd_is_rejected(ruleblocks_json, tmp_path, monkeypatch) -> None:
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    with pytest.raises(ValueError, match="current working directory"):
        generate_mock_data_cli(
            [str(ruleblocks_json), "--seed", "1", "--output", str(tmp_path / "escape.json")]
        )


def test_empty_input_returns_error(tmp_path) -> None:
    path = tmp_path / "empty.json"
    path.write_text("[]", encoding="utf-8")
    assert generate_mock_data_cli([str(path)]) == 1


def test_start_requires_end(ruleblocks_json) -> None:
    with pytest.raises(ValueError, match="together"):
        generate_mock_data_cli([str(ruleblocks_json), "--start", "2024-01-01"])


def test_extract_dependencies_cli(ruleblocks_json, capsys) -> None:
    assert extract_dependencies_cli([str(ruleblocks_json)]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload == {
        "attributes": ["lab_bld_egfr", "icd_n18%"],
        "bind_dependencies": {"rout_dm": ["dm"]},
    }


def test_unknown_log_level_rejected(ruleblocks_json) -> None:
    with pytest.raises(ValueError, match="unknown log level"):
        generate_mock_data_cli([str(ruleblocks_json), "--log-level", "chatty"])


def test_log_level_from_environment(ruleblocks_json, monkeypatch, capsys) -> None:
    monkeypatch.setenv("EADV_MOCKER_LOG_LEVEL", "WARNING")
    assert generate_mock_data_cli([str(ruleblocks_json), "--seed", "3"]) == 0
    captured = capsys.readouterr()
    assert "loading_ruleblocks" not in captured.err
    json.loads(captured.out)
