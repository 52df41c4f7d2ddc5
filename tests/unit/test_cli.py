"""Unit tests for the command line entry point."""

import asyncio
from pathlib import Path
from unittest.mock import patch

import pytest

from looplens_app import cli
from looplens_app.engine import AgentContext
from looplens_app.proposals import ProposalGenerator
from looplens_app.arbitration import Arbiter
from looplens_app.ledger import ChainCommitter

CREDENTIAL_VARS = ("GROQ_API_KEY", "BASE_SEPOLIA_RPC", "DEPLOYER_PRIVATE_KEY", "PREDICTION_MARKET_ADDRESS")


class TestArgumentParsing:
    def test_defaults(self):
        args = cli.build_parser().parse_args([])
        assert args.once is False
        assert args.config_dir is None
        assert args.log_level == "INFO"
        assert args.json_logs is False

    def test_options(self):
        args = cli.build_parser().parse_args(
            ["--once", "--config-dir", "/etc/looplens", "--log-level", "DEBUG", "--json-logs"]
        )
        assert args.once is True
        assert args.config_dir == Path("/etc/looplens")
        assert args.log_level == "DEBUG"
        assert args.json_logs is True

    def test_rejects_unknown_level(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["--log-level", "VERBOSE"])


class TestMain:
    def test_invalid_configuration_exit_code(self, monkeypatch, tmp_path):
        for name in CREDENTIAL_VARS:
            monkeypatch.delenv(name, raising=False)

        with patch.object(cli, "configure_logging"), patch.object(cli, "load_dotenv"):
            assert cli.main(["--once", "--config-dir", str(tmp_path)]) == 2


class TestRunOnce:
    """Exit code of a single run"""

    def _context(self, static_fetcher_factory, decision_client_factory, ledger, snapshot):
        return AgentContext(
            fetcher=static_fetcher_factory(snapshot),
            generator=ProposalGenerator(),
            arbiter=Arbiter(decision_client_factory()),
            committer=ChainCommitter(ledger),
        )

    def test_success_exit_zero(self, static_fetcher_factory, decision_client_factory, ledger_factory,
                               make_snapshot, btc_quote):
        ledger = ledger_factory()
        context = self._context(static_fetcher_factory, decision_client_factory, ledger,
                                make_snapshot(btc_quote))

        assert asyncio.run(cli.run_once(context)) == 0
        assert ledger.closed

    def test_commit_failure_exit_one(self, static_fetcher_factory, decision_client_factory, ledger_factory,
                                     make_snapshot, btc_quote):
        ledger = ledger_factory()
        ledger.submit_error = ValueError("insufficient funds")
        context = self._context(static_fetcher_factory, decision_client_factory, ledger,
                                make_snapshot(btc_quote))

        assert asyncio.run(cli.run_once(context)) == 1
        assert ledger.closed
