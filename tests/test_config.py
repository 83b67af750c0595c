"""Tests for configuration resolution from flags, environment and YAML."""

import pytest

from node_pool_shifter.core.config import ShifterConfig, load_config, parse_bool
from node_pool_shifter.core.errors import ConfigurationError

REQUIRED_ENV = {"NODE_POOL_FROM": "default-pool", "NODE_POOL_TO": "preemptible-pool"}


class TestLoadConfig:
    def test_defaults(self):
        config = load_config([], environ=REQUIRED_ENV)

        assert config.node_pool_from == "default-pool"
        assert config.node_pool_to == "preemptible-pool"
        assert config.interval == 300
        assert config.node_pool_from_min_node == 0
        assert config.metrics_listen_address == ":9001"
        assert config.metrics_path == "/metrics"
        assert config.operation_timeout == 600
        assert config.operation_poll_interval == 10
        assert config.shift_interval == 10
        assert config.dry_run is False
        assert config.kubeconfig is None

    def test_flags_override_environment(self):
        config = load_config(
            ["-i", "60", "--node-pool-from", "big-pool", "--node-pool-from-min-node", "2", "--dry-run"],
            environ={**REQUIRED_ENV, "INTERVAL": "120", "DRY_RUN": "false"},
        )

        assert config.interval == 60
        assert config.node_pool_from == "big-pool"
        assert config.node_pool_from_min_node == 2
        assert config.dry_run is True

    def test_environment_overrides_file(self, tmp_path):
        path = tmp_path / "shifter.yml"
        path.write_text("node-pool-from: file-pool\nnode-pool-to: other-pool\ninterval: 30\ndebug: true\n")

        config = load_config(["--config", str(path)], environ={"INTERVAL": "45"})

        assert config.node_pool_from == "file-pool"
        assert config.node_pool_to == "other-pool"
        assert config.interval == 45
        assert config.debug is True

    def test_config_file_from_environment(self, tmp_path):
        path = tmp_path / "shifter.yml"
        path.write_text("node_pool_from: a\nnode_pool_to: b\n")

        config = load_config([], environ={"CONFIG_FILE": str(path)})

        assert (config.node_pool_from, config.node_pool_to) == ("a", "b")

    def test_missing_config_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(["--config", str(tmp_path / "missing.yml")], environ=REQUIRED_ENV)

    def test_non_mapping_config_file(self, tmp_path):
        path = tmp_path / "shifter.yml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError):
            load_config(["--config", str(path)], environ=REQUIRED_ENV)

    def test_missing_pool(self):
        with pytest.raises(ConfigurationError, match="node-pool-to"):
            load_config([], environ={"NODE_POOL_FROM": "default-pool"})

    def test_invalid_integer(self):
        with pytest.raises(ConfigurationError, match="interval"):
            load_config(["--interval", "soon"], environ=REQUIRED_ENV)


class TestShifterConfig:
    def test_is_immutable(self):
        config = ShifterConfig(node_pool_from="a", node_pool_to="b")

        with pytest.raises(AttributeError):
            config.interval = 10

    def test_same_pools_rejected(self):
        with pytest.raises(ConfigurationError):
            ShifterConfig(node_pool_from="a", node_pool_to="a")

    def test_negative_floor_rejected(self):
        with pytest.raises(ConfigurationError):
            ShifterConfig(node_pool_from="a", node_pool_to="b", node_pool_from_min_node=-1)

    def test_negative_interval_rejected(self):
        with pytest.raises(ConfigurationError):
            ShifterConfig(node_pool_from="a", node_pool_to="b", interval=-5)

    def test_metrics_address(self):
        config = ShifterConfig(node_pool_from="a", node_pool_to="b", metrics_listen_address="127.0.0.1:9100")

        assert config.metrics_host == "127.0.0.1"
        assert config.metrics_port == 9100

    @pytest.mark.parametrize("address", ["localhost", "0.0.0.0:http", ":0", ":70000"])
    def test_invalid_metrics_address_rejected(self, address):
        with pytest.raises(ConfigurationError, match="metrics-listen-address"):
            ShifterConfig(node_pool_from="a", node_pool_to="b", metrics_listen_address=address)

    def test_invalid_metrics_address_from_environment(self):
        with pytest.raises(ConfigurationError):
            load_config([], environ={**REQUIRED_ENV, "METRICS_LISTEN_ADDRESS": "localhost"})

    def test_metrics_address_without_host(self):
        config = ShifterConfig(node_pool_from="a", node_pool_to="b")

        assert config.metrics_host == "0.0.0.0"
        assert config.metrics_port == 9001


@pytest.mark.parametrize("value,expected", [
    ("true", True), ("1", True), ("YES", True), (True, True),
    ("false", False), ("0", False), ("", False), (False, False),
])
def test_parse_bool(value, expected):
    assert parse_bool(value) is expected
