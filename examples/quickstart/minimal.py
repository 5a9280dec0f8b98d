"""
Example: Minimal Quickstart
Description: The simplest possible parallai example - one chat completion
Use case: Learning the basics, quick testing

This example demonstrates:
- Client configuration
- Building and sending a request
- Reading the response text
"""

import asyncio
import os

from dotenv import load_dotenv

from parallai import Client, ClientConfig
from parallai.api import ChatCompletionRequest, ChatMessage

load_dotenv()


async def main() -> None:
    # 1. Configure the client (the session is created and closed by the client)
    config = ClientConfig(
        api_key=os.getenv("OPENAI_API_KEY"),
        org_id=os.getenv("OPENAI_ORG_ID"),
        logging_level="INFO",
    )

    async with Client(config) as client:
        # 2. Build the request; it is validated before anything is sent
        request = ChatCompletionRequest(
            model="gpt-4o-mini",
            messages=[
                ChatMessage(role="system", content="Answer in one short sentence."),
                ChatMessage(role="user", content="What is the capital of France?"),
            ],
            max_tokens=64,
        )

        # 3. Send it and read the answer
        response = await client.chat_completion(request)
        print(response.text())
        print(f"Tokens used: {response.usage.total_tokens}")


if __name__ == "__main__":
    asyncio.run(main())
