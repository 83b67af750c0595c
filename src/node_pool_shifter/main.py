#!/usr/bin/env python3
"""
main.py
- Main asynchronous entrypoint for the node-pool-shifter container.
- Launches:
    - Liveness + Prometheus metrics API on a background thread
    - Shift loop: moves one node per cycle from the source pool to the destination pool
- Failure to build the Kubernetes or GKE clients at startup is fatal.
"""

import asyncio
import os
import signal
import sys
from threading import Thread

import sentry_sdk
import uvicorn
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from loguru import logger

from node_pool_shifter.core.errors import ShifterError
from node_pool_shifter.core.gcloud_client import GKENodePoolResizer, discover_cluster
from node_pool_shifter.core.kubernetes_client import KubernetesInventory
from node_pool_shifter.lib import metrics
from node_pool_shifter.runner.shift_loop import ShiftLoop

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


# --- Logging Setup ---
def configure_logging(debug=False):
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if debug else "INFO", colorize=True, format=LOG_FORMAT)

    sentry_dsn = os.getenv("SENTRY_DSN")
    if sentry_dsn:
        sentry_sdk.init(dsn=sentry_dsn, traces_sample_rate=1.0)
        logger.info("[node-pool-shifter] Sentry error reporting enabled.")


# --- FastAPI Server ---
def create_api(config):
    api = FastAPI()

    @api.get("/liveness")
    @api.get("/healthz")
    async def health():
        return {"status": "ok"}

    async def metrics_endpoint():
        return PlainTextResponse(metrics.render_metrics(), media_type="text/plain")

    api.add_api_route(config.metrics_path, metrics_endpoint, methods=["GET"])
    return api


def start_api(config):
    api = create_api(config)
    Thread(
        target=uvicorn.run,
        kwargs={"app": api, "host": config.metrics_host, "port": config.metrics_port, "log_level": "warning"},
        daemon=True,
    ).start()


# --- Client Setup ---
def build_clients(config):
    """
    Create the node inventory and the node pool resizer.

    Raises:
        ShifterError: the clients or the cluster details could not be established.
    """
    try:
        inventory = KubernetesInventory.from_environment(
            os.getenv("KUBERNETES_SERVICE_HOST"),
            os.getenv("KUBERNETES_SERVICE_PORT"),
            config.kubeconfig,
        )
    except ShifterError:
        raise
    except Exception as e:
        raise ShifterError(f"Error initializing Kubernetes client: {e}") from e

    details = discover_cluster(inventory.provider_id(), config.cluster_name)

    try:
        resizer = GKENodePoolResizer(details)
    except Exception as e:
        raise ShifterError(f"Error creating GCloud container client: {e}") from e

    return inventory, resizer


def install_signal_handlers(stop_event):
    loop = asyncio.get_running_loop()

    def handle_exit(signum):
        logger.info(f"[node-pool-shifter] Received {signal.Signals(signum).name}, finishing current cycle...")
        stop_event.set()

    for signum in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(signum, handle_exit, signum)


# --- Main Async Orchestration ---
async def main(config, inventory=None, resizer=None):
    if inventory is None or resizer is None:
        inventory, resizer = build_clients(config)

    stop_event = asyncio.Event()
    install_signal_handlers(stop_event)

    logger.info(
        f"[node-pool-shifter] Shifting nodes from {config.node_pool_from} to {config.node_pool_to}, "
        f"keeping at least {config.node_pool_from_min_node} node(s)"
    )
    await ShiftLoop(config, inventory, resizer).run(stop_event)


def run(config):
    """Blocking entrypoint: API thread, client setup and shift loop. Returns an exit code."""
    configure_logging(config.debug)
    if not config.run_once:
        start_api(config)

    try:
        asyncio.run(main(config))
    except ShifterError as e:
        logger.critical(f"[node-pool-shifter] {e}")
        return 1
    return 0


if __name__ == "__main__":
    from node_pool_shifter.cli.entrypoint import main as cli_main

    sys.exit(cli_main(["run", *sys.argv[1:]]))
