import json

import pytest
import yaml

from compton_config import cli


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch) -> None:
    monkeypatch.setattr(cli, "configure_logging", lambda level, log_format: None)


@pytest.fixture(autouse=True)
def _isolated_search(monkeypatch, isolated_env: dict) -> None:
    for key, value in isolated_env.items():
        monkeypatch.setenv(key, value)
    monkeypatch.delenv("COMPTON_CONFIG", raising=False)


def test_cli_prints_json(write_config, capsys) -> None:
    path = write_config('shadow = true;\nbackend = "glx";\nblur-kern = "3,3,1,1,1,1,-1,1,1,1";\n')
    cli.main(["--config", str(path)])
    data = json.loads(capsys.readouterr().out)
    assert data["path"] == str(path)
    assert data["blur_kern_has_negative"] is True
    assert data["options"]["shadow_enable"] is True
    assert data["options"]["backend"] == "glx"
    assert data["options"]["wintype_option"]["dock"] == {}


def test_cli_prints_yaml(write_config, capsys) -> None:
    path = write_config("wintypes: { dock = { shadow = false; }; };\n")
    cli.main(["--config", str(path), "--output", "yaml"])
    data = yaml.safe_load(capsys.readouterr().out)
    assert data["options"]["wintype_option"]["dock"] == {"shadow": False}


def test_cli_reads_config_from_env(write_config, capsys, monkeypatch) -> None:
    path = write_config("fade-delta = 8;\n")
    monkeypatch.setenv("COMPTON_CONFIG", str(path))
    cli.main([])
    data = json.loads(capsys.readouterr().out)
    assert data["options"]["fade_delta"] == 8


def test_cli_without_file_prints_defaults(capsys) -> None:
    cli.main([])
    data = json.loads(capsys.readouterr().out)
    assert data["path"] is None
    assert data["options"]["fade_delta"] == 10


def test_cli_fatal_error_exits(write_config, capsys) -> None:
    path = write_config('vsync = "maybe";\n')
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--config", str(path)])
    assert excinfo.value.code == 1
    assert "Fatal" in capsys.readouterr().err


def test_cli_syntax_error_exits(write_config, capsys) -> None:
    path = write_config("shadow = ;\n")
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--config", str(path)])
    assert excinfo.value.code == 1
    assert "could not be parsed" in capsys.readouterr().err
