"""
Studio CLI: drive the studio workflows against a running backend

Workflow "prompt": enhance a brief, approve the result, generate an image.
Workflow "image":  upload an image file, analyze it, generate a variation.

Resulting images are written as PNG files.
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).parent.parent / '.env')

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from workbench.api_client import StudioAPIClient, StudioAPIError  # noqa: E402
from workbench.session import StudioSession, WorkflowError, data_uri_to_bytes  # noqa: E402


async def run_prompt_workflow(session: StudioSession, text: str, output: Path) -> bool:
    session.text_prompt = text
    await session.enhance_prompt()
    print(f"📝 {session.status}")
    if not session.enhanced_prompt:
        return False

    print(f"   Enhanced prompt: {session.enhanced_prompt}")
    session.approve_prompt()
    print(f"✅ {session.status}")

    await session.generate_image()
    print(f"🖼️  {session.status}")
    if not session.generated_image:
        return False

    output.write_bytes(data_uri_to_bytes(session.generated_image))
    print(f"   Saved to {output}")
    return True


async def run_image_workflow(session: StudioSession, image_path: Path, output: Path) -> bool:
    session.upload_image_file(image_path)
    print(f"📤 {session.status}")

    await session.analyze_image()
    print(f"🔍 {session.status}")
    if not session.image_analysis:
        return False

    print(f"   Analysis: {session.image_analysis}")
    await session.generate_variation()
    print(f"🎨 {session.status}")
    if not session.variation_image:
        return False

    output.write_bytes(data_uri_to_bytes(session.variation_image))
    print(f"   Saved to {output}")
    return True


async def run(args) -> bool:
    async with StudioAPIClient(args.api_url) as api:
        try:
            if not await api.health_check():
                print("⚠️  Backend reports GEMINI_API_KEY is not set")
        except StudioAPIError as e:
            print(f"❌ Backend unreachable: {e}")
            return False

        session = StudioSession(api)
        try:
            if args.workflow == "prompt":
                return await run_prompt_workflow(session, args.text, args.output)
            return await run_image_workflow(session, args.image, args.output)
        except WorkflowError as e:
            print(f"❌ {e}")
            return False


def main():
    parser = argparse.ArgumentParser(
        description="Run a Gemini Studio workflow against the backend"
    )
    parser.add_argument(
        "--api-url",
        default=None,
        help="Backend API base URL (default: $STUDIO_API_URL or http://localhost:8000/api)"
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("studio_output.png"),
        help="Where to write the resulting image (default: studio_output.png)"
    )
    subparsers = parser.add_subparsers(dest="workflow", required=True)

    prompt_parser = subparsers.add_parser("prompt", help="Text -> Enhance -> Approve -> Image")
    prompt_parser.add_argument("text", help="Short brief to enhance")

    image_parser = subparsers.add_parser("image", help="Image -> Analysis -> Variation")
    image_parser.add_argument("image", type=Path, help="Image file to analyze")

    args = parser.parse_args()

    if not asyncio.run(run(args)):
        sys.exit(1)


if __name__ == "__main__":
    main()
