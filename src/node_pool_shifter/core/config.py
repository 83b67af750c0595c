"""
config.py
- Builds the immutable ShifterConfig used by every runner and logic module.
- Precedence, highest first: command-line flags, environment variables,
  optional YAML file, defaults.
- The config is constructed once at startup and passed explicitly; nothing
  reads flags or environment variables after that.
"""

import argparse
import os
from dataclasses import dataclass
from typing import Optional

from node_pool_shifter.core.config_loader import load_yaml
from node_pool_shifter.core.constants import (
    DEFAULT_INTERVAL_SECONDS,
    OPERATION_POLL_INTERVAL_SECONDS,
    OPERATION_WAIT_TIMEOUT_SECONDS,
    SHIFT_INTERVAL_SECONDS,
)
from node_pool_shifter.core.errors import ConfigurationError

TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ShifterConfig:
    node_pool_from: str
    node_pool_to: str
    node_pool_from_min_node: int = 0
    interval: int = DEFAULT_INTERVAL_SECONDS
    kubeconfig: Optional[str] = None
    cluster_name: Optional[str] = None
    metrics_listen_address: str = ":9001"
    metrics_path: str = "/metrics"
    dry_run: bool = False
    run_once: bool = False
    debug: bool = False

    # Fixed timings, not exposed as flags
    operation_timeout: int = OPERATION_WAIT_TIMEOUT_SECONDS
    operation_poll_interval: int = OPERATION_POLL_INTERVAL_SECONDS
    shift_interval: int = SHIFT_INTERVAL_SECONDS

    def __post_init__(self):
        if not self.node_pool_from:
            raise ConfigurationError("node-pool-from is required")
        if not self.node_pool_to:
            raise ConfigurationError("node-pool-to is required")
        if self.node_pool_from == self.node_pool_to:
            raise ConfigurationError(f"node-pool-from and node-pool-to must differ, both are {self.node_pool_from}")
        if self.interval < 0:
            raise ConfigurationError(f"interval must be >= 0, got {self.interval}")
        if self.node_pool_from_min_node < 0:
            raise ConfigurationError(f"node-pool-from-min-node must be >= 0, got {self.node_pool_from_min_node}")
        if not self.metrics_path.startswith("/"):
            raise ConfigurationError(f"metrics-path must start with '/', got {self.metrics_path}")
        self.metrics_port  # validates metrics-listen-address

    @property
    def metrics_host(self) -> str:
        host, _, _ = self.metrics_listen_address.rpartition(":")
        return host or "0.0.0.0"

    @property
    def metrics_port(self) -> int:
        _, _, port = self.metrics_listen_address.rpartition(":")
        try:
            value = int(port)
        except ValueError:
            value = -1
        if not 0 < value < 65536:
            raise ConfigurationError(f"Invalid metrics-listen-address: {self.metrics_listen_address}")
        return value


# --- (flag dest, env var, parser) ---
SETTINGS = [
    ("interval", "INTERVAL", int),
    ("kubeconfig", "KUBECONFIG", str),
    ("node_pool_from", "NODE_POOL_FROM", str),
    ("node_pool_to", "NODE_POOL_TO", str),
    ("node_pool_from_min_node", "NODE_POOL_FROM_MIN_NODE", int),
    ("metrics_listen_address", "METRICS_LISTEN_ADDRESS", str),
    ("metrics_path", "METRICS_PATH", str),
    ("cluster_name", "CLUSTER_NAME", str),
    ("dry_run", "DRY_RUN", "bool"),
    ("run_once", "RUN_ONCE", "bool"),
    ("debug", "DEBUG", "bool"),
]


def parse_bool(value):
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUE_VALUES


def _coerce(name, value, kind):
    if kind == "bool":
        return parse_bool(value)
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid value for {name}: {value!r}")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="node-pool-shifter",
        description="Shift nodes one at a time from a GKE node pool to another.",
    )
    parser.add_argument("--config", help="Optional YAML file with default settings (env CONFIG_FILE).")
    parser.add_argument("-i", "--interval", help="Time in second to wait between each node pool check.")
    parser.add_argument("--kubeconfig", help="Path to the kube config, for out of cluster execution.")
    parser.add_argument("--node-pool-from", help="The name of the node pool to shift from.")
    parser.add_argument("--node-pool-to", help="The name of the node pool to shift to.")
    parser.add_argument("--node-pool-from-min-node", help="The minimum number of node to keep for the node pool to shift.")
    parser.add_argument("--metrics-listen-address", help="The address to listen on for Prometheus metrics requests.")
    parser.add_argument("--metrics-path", help="The path to listen for Prometheus metrics requests.")
    parser.add_argument("--cluster-name", help="GKE cluster name; discovered from the metadata server when omitted.")
    parser.add_argument("--dry-run", action="store_true", default=None, help="Log the resizes instead of submitting them.")
    parser.add_argument("--run-once", action="store_true", default=None, help="Run a single cycle and exit.")
    parser.add_argument("--debug", action="store_true", default=None, help="Enable debug logging.")
    return parser


def load_config(argv=None, environ=None):
    """
    Resolve a ShifterConfig from flags, environment and the optional YAML file.

    Args:
        argv (list[str] | None): Command-line arguments, without the program name.
        environ (Mapping | None): Environment, defaults to os.environ.

    Returns:
        ShifterConfig

    Raises:
        ConfigurationError: if a value is missing or invalid.
    """
    environ = os.environ if environ is None else environ
    args = build_parser().parse_args(argv)

    file_values = load_yaml(args.config or environ.get("CONFIG_FILE"))

    values = {}
    for name, env_var, kind in SETTINGS:
        raw = getattr(args, name)
        if raw is None:
            raw = environ.get(env_var)
        if raw is None:
            raw = file_values.get(name)
        if raw is None or raw == "":
            continue
        values[name] = _coerce(name, raw, kind)

    return ShifterConfig(
        node_pool_from=values.pop("node_pool_from", ""),
        node_pool_to=values.pop("node_pool_to", ""),
        **values,
    )
