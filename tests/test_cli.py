import json

from typer.testing import CliRunner

from vatcheck import __version__
from vatcheck.__main__ import main
from vatcheck.cli import app

runner = CliRunner()


def test_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "VAT number" in result.stdout


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_check_valid():
    result = runner.invoke(app, ["check", "ATU37675002", "de 136 695 976"])
    assert result.exit_code == 0
    assert "invalid" not in result.stdout
    assert "DE136695976" in result.stdout


def test_check_invalid_sets_exit_code():
    result = runner.invoke(app, ["check", "ATU37675002", "ATU37675003"])
    assert result.exit_code == 1
    assert "invalid" in result.stdout


def test_check_json():
    result = runner.invoke(app, ["check", "--json", "FR40303265045", "XX1"])
    assert result.exit_code == 1
    data = json.loads(result.stdout)
    assert data[0] == {"raw": "FR40303265045", "normalized": "FR40303265045", "country": "FR", "valid": True}
    assert data[1]["country"] is None and data[1]["valid"] is False


def test_extra_vat_option():
    result = runner.invoke(app, ["--extra-vat", "builtins:str.isdigit", "check", "11"])
    assert result.exit_code == 0


def test_bad_extra_vat_is_a_usage_error():
    result = runner.invoke(app, ["--extra-vat", "math:pi", "check", "11"])
    assert result.exit_code == 2


def test_config_restricts_countries(tmp_path):
    cfg = tmp_path / "vatcheck.yaml"
    cfg.write_text("countries: [DE]\n")
    result = runner.invoke(app, ["--config", str(cfg), "check", "ATU37675002"])
    assert result.exit_code == 1


def test_scan_file(tmp_path):
    src = tmp_path / "numbers.txt"
    src.write_text("ATU37675002\n\nNL004495445B01\nDK13585627\n")
    result = runner.invoke(app, ["scan", str(src)])
    assert result.exit_code == 1
    assert "Checked 3 numbers, 1 invalid" in result.stdout
    assert "numbers.txt:4" in result.stdout


def test_scan_all_valid(tmp_path):
    src = tmp_path / "numbers.txt"
    src.write_text("ATU37675002\nCHE-123.456.788 MWST\n")
    result = runner.invoke(app, ["scan", str(src)])
    assert result.exit_code == 0
    assert "Checked 2 numbers, 0 invalid" in result.stdout


def test_schemes_listing():
    result = runner.invoke(app, ["schemes"])
    assert result.exit_code == 0
    assert "SK" in result.stdout


def test_schemes_single_country():
    result = runner.invoke(app, ["schemes", "--country", "CHE"])
    assert result.exit_code == 0
    assert "Switzerland" in result.stdout
    assert "Austria" not in result.stdout


def test_schemes_unknown_country():
    result = runner.invoke(app, ["schemes", "--country", "XX"])
    assert result.exit_code == 2


def test_main_entry_point_is_callable():
    assert callable(main)


def test_schemes_follow_config_countries(tmp_path):
    cfg = tmp_path / "vatcheck.yaml"
    cfg.write_text("countries: [DE]\n")
    result = runner.invoke(app, ["--config", str(cfg), "schemes"])
    assert result.exit_code == 0
    assert "Germany" in result.stdout
    assert "Austria" not in result.stdout


def test_schemes_country_outside_config_is_rejected(tmp_path):
    cfg = tmp_path / "vatcheck.yaml"
    cfg.write_text("countries: [DE]\n")
    result = runner.invoke(app, ["--config", str(cfg), "schemes", "--country", "AT"])
    assert result.exit_code == 2


def test_check_uses_validator_from_callback():
    result = runner.invoke(app, ["check", "ATU37675002"])
    assert result.exception is None
    assert result.exit_code == 0
