"""
Unit tests for the click CLI.
"""

import json

import pytest
from click.testing import CliRunner

from buidl.cli.main import cli
from buidl.utils.logger import BuidlLogger


OWNER = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
RANDOM = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
ANOTHER = "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC"

QUIET_ENV = {"BUIDL_LOG_LEVEL": "WARNING", "BUIDL_INITIAL_SUPPLY": None, "BUIDL_OWNER": None}


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    BuidlLogger.reset()


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def script(tmp_path):
    """Write a list of calls to a JSON file and return its path."""
    def _write(calls):
        path = tmp_path / "calls.json"
        path.write_text(json.dumps(calls))
        return str(path)
    return _write


class TestInfo:
    """Tests for the info command."""

    def test_info_shows_defaults(self, runner):
        result = runner.invoke(cli, ["info"], env=QUIET_ENV)
        assert result.exit_code == 0
        assert "BUIDL" in result.output
        assert "Initial supply: 1000" in result.output
        assert OWNER in result.output

    def test_info_reads_environment(self, runner):
        env = dict(QUIET_ENV, BUIDL_SYMBOL="TST")
        result = runner.invoke(cli, ["info"], env=env)
        assert "Symbol: TST" in result.output

    def test_bad_configuration(self, runner):
        env = dict(QUIET_ENV, BUIDL_INITIAL_SUPPLY="-5")
        result = runner.invoke(cli, ["info"], env=env)
        assert result.exit_code != 0
        assert "initial_supply" in result.output


class TestDemo:
    """Tests for the demo command."""

    def test_demo_runs(self, runner):
        result = runner.invoke(cli, ["demo"], env=QUIET_ENV)
        assert result.exit_code == 0
        assert "value_out_of_bounds" in result.output
        assert "insufficient_balance" in result.output
        assert "supply=1010" in result.output
        assert "Demo complete" in result.output


class TestRun:
    """Tests for scripted replays."""

    def test_run_applies_calls(self, runner, script):
        path = script([
            {"op": "approve", "caller": OWNER, "params": {"spender": RANDOM, "amount": 10}},
            {"op": "transferFrom", "caller": RANDOM,
             "params": {"from": OWNER, "to": ANOTHER, "amount": 10}},
            {"op": "burn", "caller": RANDOM, "params": {"amount": 1}},
        ])
        result = runner.invoke(cli, ["run", path], env=QUIET_ENV)
        assert result.exit_code == 0
        assert "Total supply: 1000" in result.output
        assert f"{ANOTHER}: 10" in result.output
        assert "2 applied, 1 rejected" in result.output

    def test_run_json_output(self, runner, script):
        path = script([
            {"op": "mint", "caller": OWNER, "params": {"amount": -1}},
            {"op": "transfer", "caller": OWNER, "params": {"to": RANDOM, "amount": 5}},
        ])
        result = runner.invoke(cli, ["run", path, "--json"], env=QUIET_ENV)
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["total_supply"] == 1000
        assert data["balances"][RANDOM] == 5
        first, second = data["results"]
        assert first["error"]["kind"] == "value_out_of_bounds"
        assert second["success"] is True

    def test_strict_exit_code(self, runner, script):
        path = script([{"op": "burn", "caller": RANDOM, "params": {"amount": 1}}])
        result = runner.invoke(cli, ["run", path, "--strict"], env=QUIET_ENV)
        assert result.exit_code == 1

    def test_initial_supply_override(self, runner, script):
        path = script([{"op": "totalSupply"}])
        result = runner.invoke(cli, ["run", path, "--initial-supply", "50"], env=QUIET_ENV)
        assert "totalSupply -> 50" in result.output

    def test_malformed_request(self, runner, script):
        path = script([{"op": "transfer", "caller": OWNER, "params": {"amount": 5}}])
        result = runner.invoke(cli, ["run", path], env=QUIET_ENV)
        assert result.exit_code != 0
        assert "malformed request" in result.output

    def test_unknown_operation(self, runner, script):
        path = script([{"op": "rugpull", "caller": OWNER}])
        result = runner.invoke(cli, ["run", path], env=QUIET_ENV)
        assert result.exit_code != 0
        assert "call 0" in result.output

    def test_oversized_integer_literal(self, runner, tmp_path):
        path = tmp_path / "calls.json"
        path.write_text(
            '[{"op": "mint", "caller": "' + OWNER + '", "params": {"amount": 1'
            + "0" * 5000 + "}}]"
        )
        result = runner.invoke(cli, ["run", str(path)], env=QUIET_ENV)
        assert result.exit_code != 0
        assert "invalid JSON" in result.output

    def test_not_a_list(self, runner, script):
        path = script({"op": "totalSupply"})
        result = runner.invoke(cli, ["run", path], env=QUIET_ENV)
        assert result.exit_code != 0
        assert "expected a JSON list" in result.output
