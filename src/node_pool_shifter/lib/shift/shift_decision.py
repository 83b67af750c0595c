#!/usr/bin/env python3
"""
shift_decision.py
- Decision and execution logic for moving one node between two pools.
- A shift grows the destination pool first and only then shrinks the source
  pool, so the cluster never has less capacity than before the shift.
- No compensating rollback: if the shrink fails after a successful grow, the
  next cycle re-reads both pools and converges from there.
"""

import asyncio

from loguru import logger

from node_pool_shifter.core.constants import (
    OPERATION_POLL_INTERVAL_SECONDS,
    OPERATION_WAIT_TIMEOUT_SECONDS,
)
from node_pool_shifter.core.errors import ResizeSubmissionError, ShifterError
from node_pool_shifter.core.models import CycleOutcome
from node_pool_shifter.lib.operations import wait_for_operation

# --- Decision Logic ---

def should_shift(source_size, minimum_floor):
    """True when the source pool is above its floor and not empty."""
    return source_size > minimum_floor and source_size > 0


# --- Execution ---

async def resize_node_pool(
    resizer,
    pool,
    size,
    timeout=OPERATION_WAIT_TIMEOUT_SECONDS,
    poll_interval=OPERATION_POLL_INTERVAL_SECONDS,
    wait=wait_for_operation,
):
    """
    Submit a new size for a pool and block until the provider reports DONE.

    Raises:
        ResizeSubmissionError: the resize request was rejected.
        OperationTimeoutError: the resize did not finish in time.
    """
    try:
        operation = await asyncio.to_thread(resizer.submit_resize, pool, size)
    except ResizeSubmissionError:
        raise
    except Exception as e:
        raise ResizeSubmissionError(pool, size, e) from e

    logger.bind(node_pool=pool).debug(f"[shift] Resize of {pool} to {size} started as operation {operation.name}")
    await wait(operation, resizer.poll_operation, timeout=timeout, poll_interval=poll_interval)


async def shift_node(resizer, source, destination, dry_run=False, **wait_options):
    """
    Move one node from `source` to `destination`.

    Args:
        resizer: Object exposing submit_resize(pool, size) and poll_operation(operation).
        source (NodePoolSnapshot): Pool to shrink.
        destination (NodePoolSnapshot): Pool to grow.
        dry_run (bool): Log the intended resizes without submitting them.
        **wait_options: timeout / poll_interval forwarded to the operation waiter.

    Returns:
        CycleOutcome: SHIFTED when both resizes finished, FAILED otherwise,
        SKIPPED in dry-run mode.
    """
    to_size = destination.size + 1
    from_size = source.size - 1
    to_log = logger.bind(node_pool=destination.pool)
    from_log = logger.bind(node_pool=source.pool)

    if dry_run:
        to_log.info(f"[shift] Dry-run: would resize {destination.pool} from {destination.size} to {to_size} node(s)")
        from_log.info(f"[shift] Dry-run: would resize {source.pool} from {source.size} to {from_size} node(s)")
        return CycleOutcome.SKIPPED

    # Grow first
    to_log.info(
        f"[shift] Adding 1 node to the pool {destination.pool}, currently {destination.size} node(s), "
        f"expecting {to_size} node(s)"
    )
    try:
        await resize_node_pool(resizer, destination.pool, to_size, **wait_options)
    except ShifterError as e:
        to_log.error(f"[shift] Error resizing node pool {destination.pool}, source pool left untouched: {e}")
        return CycleOutcome.FAILED

    # Then shrink
    from_log.info(
        f"[shift] Removing 1 node from the pool {source.pool}, currently {source.size} node(s), "
        f"expecting {from_size} node(s)"
    )
    try:
        await resize_node_pool(resizer, source.pool, from_size, **wait_options)
    except ShifterError as e:
        from_log.error(f"[shift] Error resizing node pool {source.pool}: {e}")
        return CycleOutcome.FAILED

    logger.success(f"[shift] Shifted 1 node from {source.pool} to {destination.pool}")
    return CycleOutcome.SHIFTED
