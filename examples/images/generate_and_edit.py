"""
Example: Images
Description: Generate images, edit one with a mask and save the results locally
Use case: Producing image assets from prompts

This example demonstrates:
- JSON (generation) and multipart (edit) requests
- Requests that own their files and close them on exit
- Saving every generated image concurrently
"""

import asyncio
import os
from pathlib import Path

from dotenv import load_dotenv

from parallai import Client, ClientConfig
from parallai.api import ImageEditRequest, ImageGenerationRequest

load_dotenv()

OUTPUT_DIR = Path("data/images")


async def main() -> None:
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    async with Client(ClientConfig(api_key=os.getenv("OPENAI_API_KEY"))) as client:
        # 1. Generate three images and save them under random names in OUTPUT_DIR
        generated = await client.image_generation(
            ImageGenerationRequest(
                prompt="A watercolor lighthouse at dawn",
                n=3,
                size="512x512",
                response_format="b64_json",
            )
        )
        await generated.save(OUTPUT_DIR)

        # 2. Edit an existing image; the transparent areas of the mask are repainted
        with ImageEditRequest(prompt="Add a red sailboat", size="512x512") as request:
            request.open_image_file(OUTPUT_DIR / "source.png")
            request.open_mask_file(OUTPUT_DIR / "mask.png")
            edited = await client.image_edit(request)

        # Saved as edited.png (or edited_0.png, edited_1.png, ... for several images)
        await edited.save(OUTPUT_DIR / "edited.png", session=client.session)


if __name__ == "__main__":
    asyncio.run(main())
