from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from ledger_lens.app.main import main
from ledger_lens.cli import commands
from ledger_lens.services.analysis_client import AnalysisClient

runner = CliRunner()


@pytest.fixture
def csv_file(tmp_path, csv_data):
    path = tmp_path / "transactions.csv"
    path.write_text(csv_data, encoding="utf-8")
    return path


@pytest.fixture
def use_fake(monkeypatch, fake_gemini_cls):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")

    def _install(reply="", error=None):
        fake = fake_gemini_cls(reply=reply, error=error)
        monkeypatch.setattr(
            commands, "_build_client", lambda config: AnalysisClient(config, gemini=fake)
        )
        return fake

    return _install


def test_outlets_command_lists_names(use_fake, csv_file):
    use_fake(reply='["Marina", "Deira"]')
    result = runner.invoke(commands.app, ["outlets", str(csv_file)])
    assert result.exit_code == 0
    assert "- Marina" in result.output
    assert "- Deira" in result.output


def test_outlets_command_reports_consolidation(use_fake, csv_file):
    use_fake(reply="not json")
    result = runner.invoke(commands.app, ["outlets", str(csv_file)])
    assert result.exit_code == 0
    assert "No outlet column detected" in result.output


def test_ask_command_prints_answer(use_fake, csv_file):
    fake = use_fake(reply="Total revenue was AED 35,400.50.")
    result = runner.invoke(commands.app, ["ask", str(csv_file), "What was total revenue?"])
    assert result.exit_code == 0
    assert "AED 35,400.50" in result.output
    assert "What was total revenue?" in fake.last_prompt


def test_forecast_failure_exits_with_generic_message(use_fake, csv_file):
    use_fake(error=ConnectionError("dns failure"))
    result = runner.invoke(
        commands.app,
        ["forecast", str(csv_file), "--revenue-growth", "5", "--expense-growth", "-1"],
    )
    assert result.exit_code == 1
    assert "Failed to get an updated forecast" in result.output


def test_analyze_command_writes_json(use_fake, csv_file, tmp_path, payload):
    fake = use_fake(reply=json.dumps(payload))
    out = tmp_path / "out" / "report.json"
    result = runner.invoke(
        commands.app, ["analyze", str(csv_file), "--outlet", "Marina", "--json", str(out)]
    )
    assert result.exit_code == 0, result.output
    assert json.loads(out.read_text(encoding="utf-8")) == payload
    assert '"Marina"' in fake.last_prompt
    assert "Key Risks" in result.output


def test_missing_credentials_exit_code(monkeypatch, csv_file):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    result = runner.invoke(commands.app, ["ask", str(csv_file), "Anything?"])
    assert result.exit_code == 2


def test_unreadable_csv_exits(use_fake, tmp_path):
    use_fake(reply="unused")
    result = runner.invoke(commands.app, ["ask", str(tmp_path / "missing.csv"), "Q?"])
    assert result.exit_code == 1


def test_currency_option_reaches_the_prompt(use_fake, csv_file):
    fake = use_fake(reply="About USD 14,000.00.")
    result = runner.invoke(
        commands.app, ["--currency", "usd", "forecast", str(csv_file), "--revenue-growth", "3"]
    )
    assert result.exit_code == 0, result.output
    assert "USD 1,234.56" in fake.last_prompt


def test_blank_question_exits_cleanly(use_fake, csv_file):
    fake = use_fake(reply="unused")
    result = runner.invoke(commands.app, ["ask", str(csv_file), "   "])
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "query must be non-empty text" in result.output
    assert fake.calls == []


def test_non_finite_growth_exits_cleanly(use_fake, csv_file):
    use_fake(reply="unused")
    result = runner.invoke(
        commands.app, ["forecast", str(csv_file), "--revenue-growth", "nan"]
    )
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)


def test_analyze_prints_raw_body_when_validation_is_off(
    use_fake, csv_file, tmp_path, payload, monkeypatch
):
    monkeypatch.setenv("STRICT_VALIDATION", "0")
    del payload["keyRisks"]
    use_fake(reply=json.dumps(payload))
    out = tmp_path / "report.json"
    result = runner.invoke(commands.app, ["analyze", str(csv_file), "--json", str(out)])

    assert result.exit_code == 0, result.output
    assert "did not pass validation" in result.output
    assert json.loads(out.read_text(encoding="utf-8")) == payload


def test_main_entry_point_runs_the_app():
    with pytest.raises(SystemExit) as exc_info:
        main(["--help"])
    assert exc_info.value.code == 0
