"""CLI tests; the metadata fetch is stubbed out"""

import json

import pytest

from s2a_autoconfig import cli
from s2a_autoconfig.mtls.sync import MTLS_CONFIG_ENDPOINT, MtlsConfigSync


@pytest.fixture
def fetch_result(monkeypatch):
    result = {"address": "127.0.0.1:50051"}
    monkeypatch.setattr(
        MtlsConfigSync, "fetch_s2a_address", lambda self: result["address"]
    )
    return result


class TestCli:

    def test_endpoint(self, capsys, monkeypatch):
        monkeypatch.setenv("GCE_METADATA_HOST", "localhost:8080")
        assert cli.main(["endpoint"]) == 0
        assert capsys.readouterr().out.strip() == "http://localhost:8080" + MTLS_CONFIG_ENDPOINT

    def test_address(self, capsys, fetch_result):
        assert cli.main(["address"]) == 0
        assert capsys.readouterr().out.strip() == "127.0.0.1:50051"

    def test_address_json(self, capsys, fetch_result):
        assert cli.main(["--json", "address"]) == 0
        output = json.loads(capsys.readouterr().out)
        assert output["success"] is True
        assert output["s2a_address"] == "127.0.0.1:50051"
        assert output["valid"] is True
        assert "expiry" in output
        assert output["endpoint"].endswith(MTLS_CONFIG_ENDPOINT)

    def test_address_unavailable(self, capsys, fetch_result):
        fetch_result["address"] = ""
        assert cli.main(["address"]) == 1
        assert capsys.readouterr().out == ""

    def test_bad_config(self, capsys, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("s2a:\n  ttl_s: -1\n")
        assert cli.main(["--config", str(path), "endpoint"]) == 2
        assert "ttl_s" in capsys.readouterr().err

    def test_command_required(self):
        with pytest.raises(SystemExit):
            cli.main([])

    def test_ttl_above_maximum_rejected(self, capsys, monkeypatch):
        monkeypatch.setenv("S2A_AUTOCONFIG_TTL_S", "1000000000000")
        assert cli.main(["endpoint"]) == 2
        assert "ttl_s" in capsys.readouterr().err
