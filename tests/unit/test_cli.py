# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Chronocheck Contributors

import json

import pytest

from chronocheck_cli.commands import create_parser, main

TINY_PROFILE = """\
name: TinyLib
tier: slow
eras:
  - label: "1"
    signals:
      - {id: tiny-1, pattern: tiny_call}
  - label: "2"
    signals:
      - {id: tiny-2, pattern: tiny_call}
"""


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("CHRONOCHECK_PROFILES_DIR", "CHRONOCHECK_BUNDLED_PROFILES", "CHRONOCHECK_ENV", "ENV"):
        monkeypatch.delenv(name, raising=False)


def _run(argv) -> int:
    with pytest.raises(SystemExit) as exc:
        main(argv)
    return exc.value.code


def test_parser_requires_a_command():
    with pytest.raises(SystemExit):
        create_parser().parse_args([])


def test_registry_list(capsys):
    assert _run(["registry", "list"]) == 0
    out = capsys.readouterr().out
    assert "pandas [slow]" in out
    assert "SQL [glacial]" in out


def test_assess_prints_json(capsys):
    assert _run(["assess", "pandas", "DataFrame.append", "-e", "pandas 2.1.0"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["inference"]["era"] == "2.x"
    assert data["response_pattern"] == "hedge-and-correct"
    assert data["conflicts"][0]["replacement"] == "pandas.concat"


def test_assess_reads_evidence_files_and_writes_output(tmp_path, capsys):
    evidence = tmp_path / "requirements.txt"
    evidence.write_text("pydantic==2.6.1\n")
    output = tmp_path / "out.json"

    code = _run(["assess", "pydantic", "parse_obj", "-f", str(evidence), "-o", str(output)])

    assert code == 0
    assert "Assessment written" in capsys.readouterr().out
    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["technology"] == "Pydantic"
    assert data["inference"]["era"] == "v2"


def test_assess_rejects_empty_input(capsys):
    assert _run(["assess", "", ""]) == 1
    assert "Invalid assessment input" in capsys.readouterr().err


def test_assess_missing_evidence_file(tmp_path, capsys):
    assert _run(["assess", "pandas", "x", "-f", str(tmp_path / "missing.txt")]) == 1
    assert "Failed to read evidence" in capsys.readouterr().err


def test_assess_non_utf8_evidence_file(tmp_path, capsys):
    evidence = tmp_path / "latin1.log"
    evidence.write_bytes("pandas r\xe9sum\xe9 2.1.0\n".encode("latin-1"))
    assert _run(["assess", "pandas", "x", "-f", str(evidence)]) == 1
    assert "Failed to read evidence" in capsys.readouterr().err


def test_validate_reports_every_problem(tmp_path, capsys):
    (tmp_path / "bad.yml").write_text("- {name: A, tier: active}\n- {name: B}\n")
    assert _run(["registry", "validate", str(tmp_path)]) == 1
    err = capsys.readouterr().err
    assert "A: " in err
    assert "B: " in err


def test_validate_warnings_and_strict_mode(tmp_path, capsys):
    (tmp_path / "tiny.yml").write_text(TINY_PROFILE)

    assert _run(["registry", "validate", str(tmp_path)]) == 0
    assert "ambiguous-signal" in capsys.readouterr().out

    assert _run(["registry", "validate", "--strict", str(tmp_path)]) == 2
