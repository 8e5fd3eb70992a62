import json

from typer.testing import CliRunner

from statement_ingest import cli, document
from statement_ingest.errors import PasswordRequiredError

runner = CliRunner()

HDFC_TEXT = "\n".join(
    [
        "HDFC BANK LIMITED",
        "01/10/23 UPI-ONE 5555555555 01/10/23 10.00 0.00 90.00",
        "02/10/23 UPI-TWO 6666666666 02/10/23 0.00 25.00 115.00",
    ]
)


def _records(output: str) -> list[dict]:
    return [json.loads(line) for line in output.splitlines() if line.strip()]


def _statement(tmp_path, text=HDFC_TEXT, name="statement.txt"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_sources_lists_every_extractor():
    result = runner.invoke(cli.app, ["sources"])

    assert result.exit_code == 0
    lines = result.stdout.splitlines()
    assert lines[0] == "hdfc-credit-card\tHDFC Credit Card"
    assert lines[-1] == "generic\tGeneric"


def test_detect_prints_the_key(tmp_path):
    result = runner.invoke(cli.app, ["detect", str(_statement(tmp_path))])

    assert result.exit_code == 0
    assert result.stdout.strip() == "hdfc"


def test_extract_prints_json_lines(tmp_path):
    result = runner.invoke(cli.app, ["extract", str(_statement(tmp_path))])

    assert result.exit_code == 0
    records = _records(result.stdout)
    assert [(r["date"], r["payee"], r["amount"], r["type"]) for r in records] == [
        ("2023-10-01", "UPI-ONE", "10.00", "expense"),
        ("2023-10-02", "UPI-TWO", "25.00", "income"),
    ]
    assert records[0]["source"] == "HDFC Bank"


def test_extract_with_ledger_hides_exact_duplicates(tmp_path):
    ledger = tmp_path / "ledger.json"
    ledger.write_text(
        json.dumps([{"date": "2023-10-01", "amount": "10.00", "type": "expense", "payee": "UPI-ONE"}]),
        encoding="utf-8",
    )
    path = str(_statement(tmp_path))

    hidden = runner.invoke(cli.app, ["extract", path, "--ledger", str(ledger)])
    shown = runner.invoke(cli.app, ["extract", path, "--ledger", str(ledger), "--include-duplicates"])

    assert hidden.exit_code == 0
    assert [r["payee"] for r in _records(hidden.stdout)] == ["UPI-TWO"]
    assert _records(hidden.stdout)[0]["selected"] is True

    assert shown.exit_code == 0
    first, second = _records(shown.stdout)
    assert (first["payee"], first["exact_match"], first["selected"]) == ("UPI-ONE", True, False)
    assert second["exact_match"] is False


def test_source_defaults_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("STATEMENT_INGEST_SOURCE", "generic")
    path = _statement(tmp_path, "HDFC BANK\n01/08/2024 UPI-ALIPAY-12345 500.00 DR")

    result = runner.invoke(cli.app, ["extract", str(path)])

    assert result.exit_code == 0
    (record,) = _records(result.stdout)
    assert record["source"] == "Generic"
    assert record["payee"] == "UPI-ALIPAY-12345"


def test_source_option_overrides_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("STATEMENT_INGEST_SOURCE", "sbi")
    path = _statement(tmp_path, "HDFC BANK\n01/08/2024 UPI-ALIPAY-12345 500.00 DR")

    result = runner.invoke(cli.app, ["extract", str(path), "--source", "generic"])

    assert result.exit_code == 0
    assert len(_records(result.stdout)) == 1


def test_source_defaults_from_dotenv(tmp_path, monkeypatch):
    # Register the variable so the value loaded from .env is removed afterwards.
    monkeypatch.setenv("STATEMENT_INGEST_SOURCE", "")
    monkeypatch.delenv("STATEMENT_INGEST_SOURCE")
    (tmp_path / ".env").write_text("STATEMENT_INGEST_SOURCE=generic\n", encoding="utf-8")
    path = _statement(tmp_path, "HDFC BANK\n01/08/2024 UPI-ALIPAY-12345 500.00 DR")

    result = runner.invoke(cli.app, ["extract", str(path)])

    assert result.exit_code == 0
    assert _records(result.stdout)[0]["source"] == "Generic"


def test_missing_statement_exits_with_document_error(tmp_path):
    result = runner.invoke(cli.app, ["extract", str(tmp_path / "missing.txt")])
    assert result.exit_code == cli.EXIT_DOCUMENT_ACCESS


def test_password_protected_pdf_exits_with_password_status(tmp_path, monkeypatch):
    def fake_read(path, password=None):
        raise PasswordRequiredError()

    monkeypatch.setattr(document, "read_pdf_fragments", fake_read)

    result = runner.invoke(cli.app, ["extract", str(tmp_path / "locked.pdf")])

    assert result.exit_code == cli.EXIT_PASSWORD_REQUIRED


def test_password_falls_back_to_environment(tmp_path, monkeypatch):
    seen = []

    def fake_read(path, password=None):
        seen.append(password)
        return []

    monkeypatch.setattr(document, "read_pdf_fragments", fake_read)
    monkeypatch.setenv("PDF_PASSWORD", "s3cret")

    result = runner.invoke(cli.app, ["detect", str(tmp_path / "statement.pdf")])

    assert result.exit_code == 0
    assert seen == ["s3cret"]
    assert result.stdout.strip() == "generic"


def test_malformed_ledger_is_invalid_input(tmp_path):
    ledger = tmp_path / "ledger.json"
    ledger.write_text("{not json", encoding="utf-8")

    result = runner.invoke(cli.app, ["extract", str(_statement(tmp_path)), "--ledger", str(ledger)])

    assert result.exit_code == cli.EXIT_INVALID_INPUT


def test_ledger_must_be_a_list(tmp_path):
    ledger = tmp_path / "ledger.json"
    ledger.write_text(json.dumps({"date": "2023-10-01"}), encoding="utf-8")

    assert cli.cmd_extract(_statement(tmp_path), ledger=ledger) == cli.EXIT_INVALID_INPUT


def test_cmd_sources_returns_success(capsys):
    assert cli.cmd_sources() == 0
    assert "pnb\tPNB" in capsys.readouterr().out


def test_non_utf8_statement_exits_with_document_error(tmp_path):
    path = tmp_path / "statement.txt"
    path.write_bytes("HDFC BANK\n01/10/23 CAFÉ 10.00\n".encode("latin-1"))

    for command in ("detect", "extract"):
        result = runner.invoke(cli.app, [command, str(path)])
        assert result.exit_code == cli.EXIT_DOCUMENT_ACCESS
