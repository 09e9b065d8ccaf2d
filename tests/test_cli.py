import json

import pytest

from folproof.cli import main


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FOLPROOF_LOG_LEVEL", raising=False)
    monkeypatch.delenv("FOLPROOF_DECISION_LIMIT", raising=False)


def test_no_command(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out


def test_report(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["report"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("# Theory `group_theory`")
    assert "| inverse_is_involutive |" in out
    assert "`inverse(x, G, *)`" in out


def test_report_json(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["report", "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert "subgroup_operation" in data["theorems"]


def test_show(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["show", "inverse_symmetry"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["type"] == "theorem"
    assert data["rule"] == "right_forall"


def test_show_definition(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["show", "identity"]) == 0
    assert json.loads(capsys.readouterr().out)["rule"] == "definition:identity"


def test_show_missing(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["show", "no_such_theorem"]) == 1
    assert "no_such_theorem" in capsys.readouterr().err


def test_models(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["models"]) == 0
    out = capsys.readouterr().out
    assert "two_element" in out
    assert "FAILED" not in out


def test_bad_configuration(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("FOLPROOF_LOG_LEVEL", "LOUD")
    assert main(["report"]) == 2
    assert "Invalid configuration" in capsys.readouterr().err
