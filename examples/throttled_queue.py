#!/usr/bin/env python3
"""
Throttle simulated requests with a TaskQueue.

This example demonstrates:
- Limiting how many jobs run at the same time
- Spacing job starts with a minimum interval
- Per-job failures that do not affect other jobs
"""

import asyncio
import logging
import random
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from dazzleutils import TaskQueueConfig
from dazzleutils.aio import TaskQueue


async def fake_request(request_id):
    await asyncio.sleep(random.uniform(0.05, 0.2))
    if request_id % 7 == 0:
        raise ConnectionError(f"request {request_id} failed")
    return f"response {request_id}"


async def main():
    queue = TaskQueue(TaskQueueConfig(limit=3, interval=0.05, debug=True))
    loop = asyncio.get_running_loop()
    started = loop.time()

    futures = [
        queue.add_task(lambda request_id=request_id: fake_request(request_id), tag=f"request-{request_id}")
        for request_id in range(1, 15)
    ]
    results = await asyncio.gather(*futures, return_exceptions=True)

    for request_id, result in enumerate(results, start=1):
        status = "error" if isinstance(result, Exception) else "ok"
        print(f"  request {request_id:2d}: {status:5s} {result}")

    print(f"\nFinished in {loop.time() - started:.2f}s, stats: {queue.get_stats()}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG, format="%(relativeCreated)6dms %(message)s")
    print("DazzleUtils - Throttled Queue Example")
    print("=" * 50)
    asyncio.run(main())
