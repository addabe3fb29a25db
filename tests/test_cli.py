import json
import logging
import os
from pathlib import Path

import pytest

from clickatell_client.cli import main

from conftest import sent_params


@pytest.fixture(autouse=True)
def restore_root_logger():
    # main() reconfigures the root logger
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def credential_args(tmp_path: Path):
    return ["--config", str(tmp_path / "none.json"), "--api-id", "3001234", "-u", "joe", "-p", "secret"]


def test_init_writes_config(tmp_path: Path, capsys):
    config_dir = tmp_path / "clickatell"
    rc = main(["init", "--config-dir", str(config_dir), "--api-id", "3001234",
               "--username", "joe", "--password", "secret", "--from", "ACME"])
    assert rc == 0

    config_path = config_dir / "config.json"
    data = json.loads(config_path.read_text(encoding="utf-8"))
    assert data == {"api_id": "3001234", "username": "joe", "password": "secret", "from": "ACME"}
    if os.name == "posix":
        assert (config_path.stat().st_mode & 0o777) == 0o600

    # Refuses to overwrite without --force
    assert main(["init", "--config-dir", str(config_dir)]) == 1
    assert main(["init", "--config-dir", str(config_dir), "--force"]) == 0


def test_send_authenticates_then_sends(tmp_path: Path, gateway, capsys):
    gateway.respond("OK: sess", "ID: 6ed5b9a3")

    rc = main(["send", "hello", "--to", "27999112345"] + credential_args(tmp_path))

    assert rc == 0
    assert "Message ID: 6ed5b9a3" in capsys.readouterr().out
    params = sent_params(gateway.call_args)
    assert params["session_id"] == "sess"
    assert params["text"] == "hello"


def test_send_uses_config_file(tmp_path: Path, gateway, capsys):
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({
        "api_id": "3001234", "username": "joe", "password": "secret", "from": "ACME",
    }), encoding="utf-8")
    gateway.respond("OK: sess", "ID: 6ed5b9a3")

    rc = main(["send", "hello", "--to", "27999112345", "--config", str(config_path)])

    assert rc == 0
    assert sent_params(gateway.call_args)["from"] == "ACME"


def test_status_prints_description(tmp_path: Path, gateway, capsys):
    gateway.respond("OK: sess", "ID: abc Status: 004")

    rc = main(["status", "abc"] + credential_args(tmp_path))

    assert rc == 0
    assert "status: 4 (Received by recipient)" in capsys.readouterr().out


def test_balance(tmp_path: Path, gateway, capsys):
    gateway.respond("OK: sess", "Credit: 12.5")

    assert main(["balance"] + credential_args(tmp_path)) == 0
    assert "Account balance: 12.5" in capsys.readouterr().out


def test_gateway_error_exit_code(tmp_path: Path, gateway, capsys):
    gateway.respond("ERR: 001, Authentication failed")

    rc = main(["balance"] + credential_args(tmp_path))

    assert rc == 1
    assert "Error: 001: Authentication failed" in capsys.readouterr().err


def test_missing_credentials(tmp_path: Path, gateway, capsys):
    rc = main(["balance", "--config", str(tmp_path / "none.json")])

    assert rc == 1
    assert "Missing required config field: api_id" in capsys.readouterr().err
    gateway.assert_not_called()


def test_test_mode_sends_nothing(tmp_path: Path, gateway, capsys):
    rc = main(["ping", "--test"] + credential_args(tmp_path))

    assert rc == 0
    assert "Connection successful!" in capsys.readouterr().out
    gateway.assert_not_called()


def test_queries_in_test_mode(tmp_path: Path, gateway, capsys):
    assert main(["balance", "--test"] + credential_args(tmp_path)) == 0
    assert "Account balance: 0.0" in capsys.readouterr().out

    assert main(["charge", "abc", "--test"] + credential_args(tmp_path)) == 0
    assert "Message abc charge: 0.0" in capsys.readouterr().out

    assert main(["status", "abc", "--test"] + credential_args(tmp_path)) == 0
    assert "status: unknown" in capsys.readouterr().out

    gateway.assert_not_called()


def test_send_in_test_mode_reports_recorded_request(tmp_path: Path, gateway, capsys):
    rc = main(["send", "hello", "--to", "27999000001,27999000002", "--test"] + credential_args(tmp_path))

    assert rc == 0
    out = capsys.readouterr().out
    assert "Test mode: SMS to 27999000001, 27999000002 recorded, nothing sent" in out
    assert "None" not in out


def test_send_verbose_maps_every_recipient(tmp_path: Path, gateway, capsys):
    gateway.respond("OK: sess", "ID: a1 To: 27999000001\nID: b2 To: 27999000002\nID: c3 To: 27999000003")

    rc = main(["send", "hello", "--to", "27999000001,27999000002", "--to", "27999000003", "-v"]
              + credential_args(tmp_path))

    assert rc == 0
    assert json.loads(capsys.readouterr().out) == {
        "27999000001": "a1",
        "27999000002": "b2",
        "27999000003": "c3",
    }
    assert sent_params(gateway.call_args)["to"] == "27999000001,27999000002,27999000003"


def test_log_file_from_environment(tmp_path: Path, gateway, monkeypatch):
    log_file = tmp_path / "clickatell.log"
    monkeypatch.setenv("LOG_FILE", str(log_file))
    monkeypatch.setenv("LOG_LEVEL", "info")
    gateway.respond("OK: sess", "Credit: 3")

    assert main(["balance"] + credential_args(tmp_path)) == 0

    root = logging.getLogger()
    assert "command=getbalance" in log_file.read_text(encoding="utf-8")
    for handler in root.handlers:
        if isinstance(handler, logging.FileHandler):
            handler.close()
