#!/usr/bin/env python3
"""
shift_loop.py
- Control loop shifting one node per cycle from the source pool to the
  destination pool until the source pool reaches its floor.
- Each cycle re-reads both pools; nothing is carried over between cycles.
- Shutdown is cooperative: the stop event is honoured between cycles and
  interrupts the inter-cycle sleep, never a shift in progress.
"""

import asyncio
from enum import Enum
from time import time

from loguru import logger

from node_pool_shifter.core.errors import InventoryQueryError
from node_pool_shifter.core.models import CycleOutcome
from node_pool_shifter.lib import metrics
from node_pool_shifter.lib.jitter import apply_jitter
from node_pool_shifter.lib.shift.shift_decision import should_shift, shift_node


class LoopState(str, Enum):
    IDLE = "idle"
    SHIFTING = "shifting"
    STOPPED = "stopped"


class ShiftLoop:
    def __init__(self, config, inventory, resizer, jitter=apply_jitter, **wait_options):
        self.config = config
        self.inventory = inventory
        self.resizer = resizer
        self.jitter = jitter
        self.wait_options = wait_options or {
            "timeout": config.operation_timeout,
            "poll_interval": config.operation_poll_interval,
        }
        self.state = LoopState.IDLE

    async def _list_nodes(self, pool):
        try:
            return await asyncio.to_thread(self.inventory.list_nodes, pool)
        except InventoryQueryError:
            raise
        except Exception as e:
            raise InventoryQueryError(pool, e) from e

    async def run_cycle(self):
        """
        Run one check-and-maybe-shift cycle.

        Returns:
            tuple[CycleOutcome, float]: the outcome and how long to sleep before
            the next cycle.
        """
        config = self.config
        sleep_time = self.jitter(config.interval)

        try:
            source = await self._list_nodes(config.node_pool_from)
            destination = await self._list_nodes(config.node_pool_to)
        except InventoryQueryError as e:
            logger.bind(node_pool=e.pool).error(f"[shift] {e}")
            return CycleOutcome.FAILED, sleep_time

        logger.bind(node_pool=source.pool).info(
            f"[shift] Node pool {source.pool} has {source.size} node(s), "
            f"minimum wanted: {config.node_pool_from_min_node} node(s)"
        )

        if not should_shift(source.size, config.node_pool_from_min_node):
            return CycleOutcome.SKIPPED, sleep_time

        logger.bind(node_pool=destination.pool).info("[shift] Attempting to shift one node...")
        self.state = LoopState.SHIFTING
        try:
            outcome = await shift_node(
                self.resizer, source, destination, dry_run=config.dry_run, **self.wait_options
            )
        finally:
            self.state = LoopState.IDLE

        if outcome == CycleOutcome.SKIPPED:
            return outcome, sleep_time

        # Shorter pause after a shift, the provider is already operating on the cluster
        return outcome, self.jitter(config.shift_interval)

    async def run_once(self):
        """Run a single cycle, record its outcome and return it with the sleep time."""
        logger.info("[shift] Checking node pool to shift...")
        start_time = time()

        try:
            outcome, sleep_time = await self.run_cycle()
        except Exception as e:
            logger.exception(f"[shift] Unexpected error during shift cycle: {e}")
            outcome, sleep_time = CycleOutcome.FAILED, self.jitter(self.config.interval)

        metrics.record_outcome(outcome, time() - start_time)
        logger.info(f"[shift] Cycle finished: {outcome.value}")
        return outcome, sleep_time

    async def run(self, stop_event=None):
        """
        Run cycles until `stop_event` is set.

        Args:
            stop_event (asyncio.Event | None): cancellation notice; checked before
                each cycle and awaited during the inter-cycle sleep.
        """
        stop_event = stop_event or asyncio.Event()

        while not stop_event.is_set():
            _, sleep_time = await self.run_once()

            if self.config.run_once:
                break

            logger.info(f"[shift] Sleeping for {sleep_time:.1f} seconds...")
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=sleep_time)
            except asyncio.TimeoutError:
                pass

        self.state = LoopState.STOPPED
        logger.info("[shift] Shift loop stopped.")
