"""
Basic Usage Examples

GET/POST with AsyncAPIClient, query parameters and statistics.
"""

import asyncio

from api_client import AsyncAPIClient, ApiError


async def basic_get():
    """Simple GET with query parameters."""
    print("\n=== Basic GET ===")

    async with AsyncAPIClient("https://jsonplaceholder.typicode.com") as client:
        result = await client.get("/posts", query_params={"userId": 1, "tag": None})
        print(f"Status: {result.status_code} {result.status_message}")
        print(f"Posts: {len(result.data)}")


async def post_json():
    """POST with a JSON body."""
    print("\n=== POST ===")

    async with AsyncAPIClient("https://jsonplaceholder.typicode.com") as client:
        result = await client.post("/posts", {"title": "Test Post", "body": "This is a test", "userId": 1})
        print(f"Created ID: {result.data['id']}")


async def error_handling():
    """4xx errors are not retried."""
    print("\n=== Error handling ===")

    async with AsyncAPIClient("https://httpbin.org", retry_delay=0.5) as client:
        try:
            await client.get("/status/404")
        except ApiError as e:
            print(f"Failed: {e} (status={e.status_code}, attempts={e.attempts})")

        print(f"Stats: {client.get_stats().as_dict()}")


async def main():
    await basic_get()
    await post_json()
    await error_handling()


if __name__ == "__main__":
    asyncio.run(main())
