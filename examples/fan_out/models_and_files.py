"""
Example: Parallel lookups
Description: Fetch several models and files at once with bounded concurrency
Use case: Inspecting many resources without issuing requests one by one

This example demonstrates:
- Fan-out lookups that keep the input order
- Limiting concurrency with parallel_tasks
- Handling the first failure, or every outcome with fan_out_settled
"""

import asyncio
import os

from dotenv import load_dotenv

from parallai import Client, ClientConfig, RemoteError, fan_out_settled

load_dotenv()


async def main() -> None:
    config = ClientConfig(
        api_key=os.getenv("OPENAI_API_KEY"),
        parallel_tasks=4,
        show_progress=True,
    )

    async with Client(config) as client:
        # 1. All models with a single request
        models = await client.models()
        print(f"{len(models)} models available")

        # 2. Specific models, one request each, at most 4 in flight
        wanted = ["gpt-4o", "gpt-4o-mini", "text-embedding-3-small"]
        try:
            details = await client.models(*wanted)
        except RemoteError as e:
            print(f"Lookup failed with status {e.status}: {e.message}")
        else:
            for model in details:
                print(f"{model.name}: owned by {model.owned_by}")

        # 3. Every outcome, including failures, with per-key results
        outcomes = await fan_out_settled(
            ["gpt-4o", "no-such-model"], client.parallel_tasks, lambda m: client.models(m)
        )
        for outcome in outcomes:
            status = "ok" if outcome.ok else f"failed ({outcome.error})"
            print(f"{outcome.key}: {status}")

        # 4. Uploaded files
        files = await client.files()
        print("Files:", ", ".join(files.names()) or "none")


if __name__ == "__main__":
    asyncio.run(main())
