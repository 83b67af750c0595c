"""Tests for the command router and the application startup path."""

import asyncio
import dataclasses
from unittest.mock import patch

import pytest

from node_pool_shifter import main as app
from node_pool_shifter.cli import entrypoint
from node_pool_shifter.core.errors import ClusterDiscoveryError

FLAGS = ["--node-pool-from", "default-pool", "--node-pool-to", "preemptible-pool"]


class TestEntrypoint:
    def test_no_command(self):
        assert entrypoint.main([]) == 2

    def test_unknown_command(self):
        assert entrypoint.main(["shift-everything"]) == 2

    def test_invalid_config(self):
        with patch.dict("os.environ", {"NODE_POOL_FROM": "", "NODE_POOL_TO": ""}):
            assert entrypoint.main(["run"]) == 2

    @pytest.mark.parametrize("command,run_once,dry_run", [
        ("run", False, False),
        ("once", True, False),
        ("check", True, True),
    ])
    def test_command_modes(self, command, run_once, dry_run):
        with patch.object(app, "run", return_value=0) as run:
            assert entrypoint.main([command, *FLAGS]) == 0

        config = run.call_args.args[0]
        assert config.run_once is run_once
        assert config.dry_run is dry_run
        assert config.node_pool_from == "default-pool"


class TestMain:
    def test_client_setup_failure_is_fatal(self, config):
        with patch.object(app, "start_api"), \
                patch.object(app, "configure_logging"), \
                patch.object(app, "build_clients", side_effect=ClusterDiscoveryError("no node in the cluster")):
            assert app.run(config) == 1

    def test_main_runs_loop_with_injected_clients(self, config, inventory, resizer):
        once = dataclasses.replace(config, run_once=True)

        asyncio.run(app.main(once, inventory=inventory, resizer=resizer))

        assert resizer.submissions == [("preemptible-pool", 3), ("default-pool", 3)]
