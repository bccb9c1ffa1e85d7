"""
Retry, Backoff and Cancellation Examples
"""

import asyncio
import time

from api_client import AsyncAPIClient, ApiError, RequestCancelledError


async def exponential_backoff():
    """503 is retried with delays base, 2*base, 4*base (+ jitter)."""
    print("\n=== Exponential Backoff ===")

    async with AsyncAPIClient("https://httpbin.org", max_retries=3, retry_delay=0.5) as client:
        start = time.monotonic()
        try:
            await client.get("/status/503")
        except ApiError as e:
            elapsed = time.monotonic() - start
            print(f"Failed after {e.attempts} attempts in {elapsed:.1f}s: {e}")

        stats = client.get_stats()
        print(f"total={stats.total_requests} retried={stats.retried_requests} failed={stats.failed_requests}")


async def per_call_overrides():
    """Per-call timeout and retry budget."""
    print("\n=== Per-call overrides ===")

    async with AsyncAPIClient("https://httpbin.org") as client:
        try:
            await client.get("/delay/3", timeout=1, max_retries=0)
        except ApiError as e:
            print(f"code={e.code}: {e}")


async def cancellation():
    """Abort a retry sequence from outside."""
    print("\n=== Cancellation ===")

    cancel = asyncio.Event()
    async with AsyncAPIClient("https://httpbin.org", retry_delay=5) as client:
        asyncio.get_running_loop().call_later(1.0, cancel.set)
        try:
            await client.get("/status/503", cancel_event=cancel)
        except RequestCancelledError as e:
            print(f"{e} (last status: {e.status_code})")


async def main():
    await exponential_backoff()
    await per_call_overrides()
    await cancellation()


if __name__ == "__main__":
    asyncio.run(main())
