import json

import httpx
import pytest
from pydantic import ValidationError

from expense_importer import cli
from expense_importer.submit import ExpenseApiClient
from expense_importer.template import write_template


@pytest.fixture
def template_path(tmp_path):
    return write_template(str(tmp_path / "template-despesas.xlsx"))


def _patch_client(monkeypatch, handler, seen_settings=None):
    def from_settings(settings, client=None):
        if seen_settings is not None:
            seen_settings.append(settings)
        http = httpx.Client(transport=httpx.MockTransport(handler))
        return ExpenseApiClient(settings.api_base_url, access_token=settings.access_token, client=http)

    monkeypatch.setattr(cli.ExpenseApiClient, "from_settings", staticmethod(from_settings))


def test_detect(template_path, capsys):
    assert cli.main(["detect", template_path]) == 0
    out = capsys.readouterr().out
    assert "description=Descrição" in out
    assert "amount=Valor" in out
    assert "dueDate=Vencimento" in out
    assert "status=Status" in out


def test_preview_writes_report(template_path, tmp_path, capsys):
    report = tmp_path / "report.json"
    assert cli.main(["preview", template_path, "--report", str(report)]) == 0
    rep = json.loads(report.read_text(encoding="utf-8"))
    assert rep["valid_rows"] == 3
    assert rep["invalid_rows"] == 0
    assert rep["imported"] == 0
    assert json.loads(capsys.readouterr().out) == rep


def test_import_success(template_path, monkeypatch, capsys):
    posted = []
    settings_seen = []

    def handler(request):
        posted.append(json.loads(request.content))
        return httpx.Response(201, json={"expense": {"id": str(len(posted))}})

    _patch_client(monkeypatch, handler, settings_seen)
    code = cli.main(["import", template_path, "--api-url", "https://api.example.test", "--token", "tok"])

    assert code == 0
    assert sorted(p["description"] for p in posted) == [
        "Areia para construção",
        "Cimento 50kg",
        "Pintura externa",
    ]
    assert settings_seen[0].access_token == "tok"
    assert json.loads(capsys.readouterr().out)["imported"] == 3


def test_import_failure_exit_code(template_path, monkeypatch, capsys):
    def handler(request):
        return httpx.Response(500, json={"error": "database unavailable"})

    _patch_client(monkeypatch, handler)
    code = cli.main(["import", template_path, "--concurrency", "1"])

    assert code == 1
    assert "database unavailable" in capsys.readouterr().out


def test_template_command(tmp_path, capsys):
    out = tmp_path / "modelo.csv"
    assert cli.main(["template", "--out", str(out)]) == 0
    assert capsys.readouterr().out.strip() == str(out)
    assert out.read_text(encoding="utf-8-sig").splitlines()[0] == "Vencimento,Descrição,Valor,Status"


def test_bad_api_settings_only_break_import(template_path, tmp_path, monkeypatch):
    monkeypatch.setenv("EXPENSE_IMPORT_MAX_CONCURRENCY", "0")
    assert cli.main(["template", "--out", str(tmp_path / "t.xlsx")]) == 0
    assert cli.main(["detect", template_path]) == 0
    with pytest.raises(ValidationError):
        cli.main(["import", template_path])
