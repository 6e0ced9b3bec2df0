"""
Load test for the envelope status endpoint.
Simulates a whole event refreshing their envelopes at once and checks
that every answer agrees on the couple it was asked about.
"""

import asyncio
import random
import time
import aiohttp

# -----------------------------
# CONFIG - ADJUST IF NEEDED
# -----------------------------
BASE_URL = "http://127.0.0.1:5000"

EVENT_ID = 1

# Couple range (from seed_event.py)
MIN_COUPLE_ID = 1
MAX_COUPLE_ID = 12

# Total GET requests to send
TOTAL_REQUESTS = 2000

# How many run simultaneously
MAX_CONCURRENT = 150


# -----------------------------
# Load test functions
# -----------------------------
async def fetch_status(session, couple_id, results):
    params = {"eventId": EVENT_ID, "coupleId": couple_id}

    try:
        async with session.get(f"{BASE_URL}/api/envelope/status", params=params) as resp:
            if resp.status != 200:
                text = await resp.text()
                print(f"[ERROR {resp.status}] couple={couple_id} :: {text[:200]}")
                results["errors"] += 1
                return

            body = await resp.json()
            if body.get("couple_id") != couple_id:
                print(f"[MISMATCH] asked for {couple_id}, got {body.get('couple_id')}")
                results["mismatches"] += 1
            results["ok"] += 1
    except aiohttp.ClientError as e:
        print(f"[EXCEPTION] {e} :: couple={couple_id}")
        results["errors"] += 1


async def worker(session, task_queue, results):
    while True:
        couple_id = await task_queue.get()
        if couple_id is None:
            task_queue.task_done()
            break

        await fetch_status(session, couple_id, results)
        task_queue.task_done()


async def main():
    task_queue = asyncio.Queue()
    results = {"ok": 0, "errors": 0, "mismatches": 0}

    for _ in range(TOTAL_REQUESTS):
        await task_queue.put(random.randint(MIN_COUPLE_ID, MAX_COUPLE_ID))

    # Sentinels to close workers
    for _ in range(MAX_CONCURRENT):
        await task_queue.put(None)

    async with aiohttp.ClientSession() as session:
        workers = [
            asyncio.create_task(worker(session, task_queue, results))
            for _ in range(MAX_CONCURRENT)
        ]

        print(f"Sending {TOTAL_REQUESTS} requests with concurrency {MAX_CONCURRENT}...")
        start = time.time()

        await task_queue.join()
        end = time.time()

        for w in workers:
            await w

        print(f"Completed in {end - start:.2f} seconds: {results}")


if __name__ == "__main__":
    asyncio.run(main())
