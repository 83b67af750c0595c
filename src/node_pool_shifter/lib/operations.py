"""
operations.py
- Waits for an asynchronous provider operation (a node pool resize) to finish.
- The only retry logic of the shifter: status checks are repeated at a
  jittered interval until the operation is DONE or the wait times out.
"""

import asyncio
import time

from loguru import logger

from node_pool_shifter.core.constants import (
    OPERATION_POLL_INTERVAL_SECONDS,
    OPERATION_WAIT_TIMEOUT_SECONDS,
)
from node_pool_shifter.core.errors import OperationTimeoutError, TransientPollError
from node_pool_shifter.core.models import OperationStatus
from node_pool_shifter.lib.jitter import apply_jitter


async def wait_for_operation(
    operation,
    poll_once,
    timeout=OPERATION_WAIT_TIMEOUT_SECONDS,
    poll_interval=OPERATION_POLL_INTERVAL_SECONDS,
    clock=time.monotonic,
    sleep=asyncio.sleep,
    jitter=apply_jitter,
):
    """
    Poll an operation until it reports DONE.

    Args:
        operation (ResizeOperation): Handle returned by the resize call.
        poll_once (callable): Blocking call returning the current OperationStatus.
            It may raise; a failed check counts as "not done yet".
        timeout (float): Seconds since the start of the wait before giving up.
        poll_interval (float): Base seconds between checks, jittered.
        clock, sleep, jitter: Injectable for tests.

    Raises:
        OperationTimeoutError: the operation was not DONE within `timeout`.
    """
    start = clock()
    log = logger.bind(operation=operation.name)

    while True:
        log.debug(f"[operation] Waiting for operation {operation.name}")

        try:
            status = await asyncio.to_thread(poll_once, operation)
        except Exception as e:
            # Absorbed, never raised: the error type only shapes the log record.
            # The timeout stays anchored to the start of the wait.
            error = TransientPollError(operation, e)
            log.bind(error_type=type(error).__name__, cause=repr(e)).error(f"[operation] {error}")
        else:
            log.debug(f"[operation] Operation {operation.name} status: {status.value}")
            if status == OperationStatus.DONE:
                return

        if clock() - start >= timeout:
            raise OperationTimeoutError(operation, timeout)

        sleep_time = jitter(poll_interval)
        log.info(f"[operation] Sleeping for {sleep_time:.1f} seconds...")
        await sleep(sleep_time)
