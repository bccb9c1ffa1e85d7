"""
Environment Configuration and Logging Examples.

Demonstrates loading ClientConfig from .env files and API_CLIENT_* variables,
structured logging and the diagnostics predicate.
"""

import asyncio
import os

from api_client import AsyncAPIClient, LoggingConfig, host_contains, load_from_env


async def example_1_load_from_env_file():
    """Example 1: Load from .env."""
    print("\n" + "=" * 60)
    print("EXAMPLE 1: Load from .env")
    print("=" * 60 + "\n")

    with open('.env', 'w') as f:
        f.write("API_CLIENT_BASE_URL=https://httpbin.org\n")
        f.write("API_CLIENT_MAX_RETRIES=2\n")
        f.write("API_CLIENT_LOG_ENABLE_CONSOLE=true\n")
        f.write("API_CLIENT_LOG_FORMAT=colored\n")

    try:
        config = load_from_env()
        print(f"base_url={config.base_url} max_retries={config.max_retries}")

        async with AsyncAPIClient(config=config) as client:
            result = await client.get("/get")
            print(f"Response status: {result.status_code}\n")
    finally:
        os.remove('.env')


async def example_2_json_logging_with_diagnostics():
    """Example 2: JSON logs plus request/response debug records for one upstream."""
    print("\n" + "=" * 60)
    print("EXAMPLE 2: JSON logging + diagnostics")
    print("=" * 60 + "\n")

    client = AsyncAPIClient(
        "https://httpbin.org",
        headers={"Authorization": "Bearer demo-token"},  # masked in logs
        diagnostics=host_contains("httpbin"),
        logging=LoggingConfig.create(level="DEBUG", format="json"),
    )
    try:
        await client.post("/post", {"amount": 100})
    finally:
        await client.close()


async def main():
    await example_1_load_from_env_file()
    await example_2_json_logging_with_diagnostics()


if __name__ == "__main__":
    asyncio.run(main())
