"""Command-line entry point for Karigar."""
from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from pydantic import ValidationError

from .capture import FileMediaCapture, MediaCapture, SpeechInput, TextSpeechInput
from .config import VIDEO_DURATION, Config
from .errors import KarigarError
from .media import get_extension_for_mime, parse_data_uri
from .storygen import DEFAULT_LANGUAGES


def _setup_logging() -> None:
    log_dir = Path.home() / ".karigar"
    log_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(log_dir / "karigar.log"),
        level=logging.DEBUG,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _progress(msg: str) -> None:
    print(msg)


def _data_uri(path: str | None) -> str | None:
    if not path:
        return None
    capture: MediaCapture = FileMediaCapture(path)
    return capture.capture().to_data_uri()


def _provider(config: Config):
    from .utils.gemini_client import GeminiProvider

    if not config.gemini_api_key:
        print("⚠  No GEMINI_API_KEY found. Set it in the environment or ~/.karigar/config.json.")
        sys.exit(1)
    return GeminiProvider(config)


def _stamp() -> str:
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def cmd_serve(args: argparse.Namespace, config: Config) -> None:
    import uvicorn

    uvicorn.run("webui.backend.app:app", host=args.host, port=args.port, reload=args.reload)


def cmd_video(args: argparse.Namespace, config: Config) -> None:
    from schemas.media import VideoRequest

    from .utils.gemini_client import download_media
    from .videogen import PollPolicy, generate_short_video

    request = VideoRequest(
        prompt=args.prompt,
        photo_data_uri=_data_uri(args.photo),
        duration_seconds=args.duration,
        aspect_ratio=args.aspect_ratio,
    )
    policy = PollPolicy.from_config(config)
    if args.timeout is not None:
        policy.timeout = args.timeout
    result = generate_short_video(request, _provider(config), config, policy=policy, progress_cb=_progress)

    output = config.output_dir / f"karigar_{_stamp()}{get_extension_for_mime(result.mime_type, '.mp4')}"
    _progress(f"  Video gen: Download ready! Saving to {output.name}...")
    download_media(result.uri, output, config.gemini_api_key)
    print(f"\n✅ Output: {output}")


def cmd_image(args: argparse.Namespace, config: Config) -> None:
    from schemas.media import ImageRequest

    from .imagegen import generate_product_image, placeholder_product_image

    request = ImageRequest(
        product_description=args.description,
        style_preference=args.style,
        view_preference=args.view,
        product_image_uri=_data_uri(args.image),
    )
    if args.test:
        result = placeholder_product_image(request)
    else:
        result = generate_product_image(request, _provider(config), config, progress_cb=_progress)

    image = parse_data_uri(result.image_data_uri)
    output = config.output_dir / f"karigar_{_stamp()}{get_extension_for_mime(image.mime_type, '.png')}"
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(image.data)
    print(f"\n✅ Output: {output}")


def cmd_story(args: argparse.Namespace, config: Config) -> None:
    from schemas.story import StoryInput

    from .storygen import generate_product_stories

    request = StoryInput(
        media_data_uri=_data_uri(args.media),
        product_details=args.details,
        target_languages=args.languages,
    )
    result = generate_product_stories(request, _provider(config), config, progress_cb=_progress)
    print(result.model_dump_json(indent=2))


def cmd_price(args: argparse.Namespace, config: Config) -> None:
    from schemas.pricing import PriceInput

    from .pricing import predict_price

    request = PriceInput(
        product_image_uri=_data_uri(args.image),
        product_description=args.description,
        crafting_time=args.hours,
        material_cost=args.material_cost,
        skill_level=args.skill,
    )
    print(predict_price(request, _provider(config), config).model_dump_json(indent=2))


def cmd_authenticate(args: argparse.Namespace, config: Config) -> None:
    from schemas.authenticity import AuthenticationInput

    from .authenticity import authenticate_design

    request = AuthenticationInput(design_image_uri=_data_uri(args.image), artisan_notes=args.notes)
    print(authenticate_design(request, _provider(config), config).model_dump_json(indent=2))


def cmd_strategy(args: argparse.Namespace, config: Config) -> None:
    from schemas.sales import SalesStrategyInput

    from .sales import suggest_sales_strategy

    request = SalesStrategyInput(
        product_data=args.products,
        business_data=args.business,
        growth_rate=args.growth,
        materials_used=args.materials,
    )
    result = suggest_sales_strategy(request, _provider(config))
    print(f"{result.suggested_strategy}\n\nWhy: {result.reasoning}")


def cmd_chat(args: argparse.Namespace, config: Config) -> None:
    from .chat import ConversationLog, converse

    provider = _provider(config)
    conversation = ConversationLog.with_greeting()
    print(conversation.turns[0].text)
    while True:
        try:
            line = input("\n> ")
        except (EOFError, KeyboardInterrupt):
            print()
            return
        speech: SpeechInput = TextSpeechInput(line)
        message = speech.listen()
        if not message:
            continue
        if message.lower() in ("exit", "quit"):
            return
        reply = converse(conversation, message, provider, config)
        print(f"\n{reply.message}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="karigar", description="AI marketing tools for artisans")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("serve", help="Run the web API")
    p.add_argument("--host", default="0.0.0.0")
    p.add_argument("--port", type=int, default=8000)
    p.add_argument("--reload", action="store_true")
    p.set_defaults(func=cmd_serve)

    p = sub.add_parser("video", help="Generate a short social-media video")
    p.add_argument("--prompt", required=True)
    p.add_argument("--photo", help="Reference photo")
    p.add_argument("--duration", type=int, default=VIDEO_DURATION)
    p.add_argument("--aspect-ratio", choices=["16:9", "9:16"])
    p.add_argument("--timeout", type=float, help="Give up after this many seconds")
    p.set_defaults(func=cmd_video)

    p = sub.add_parser("image", help="Generate a product image")
    p.add_argument("--description", required=True)
    p.add_argument("--style", default="modern")
    p.add_argument("--view", default="front")
    p.add_argument("--image", help="Reference photo")
    p.add_argument("--test", action="store_true", help="Placeholder image, no API calls")
    p.set_defaults(func=cmd_image)

    p = sub.add_parser("story", help="Transcribe and translate a product story")
    p.add_argument("--media", required=True, help="Audio or video recording")
    p.add_argument("--details", required=True)
    p.add_argument("--languages", nargs="+", default=DEFAULT_LANGUAGES)
    p.set_defaults(func=cmd_story)

    p = sub.add_parser("price", help="Predict a fair price")
    p.add_argument("--image", required=True)
    p.add_argument("--description", required=True)
    p.add_argument("--hours", type=float, required=True)
    p.add_argument("--material-cost", type=float, required=True)
    p.add_argument("--skill", choices=["Beginner", "Intermediate", "Advanced", "Expert"], default="Intermediate")
    p.set_defaults(func=cmd_price)

    p = sub.add_parser("authenticate", help="Authenticate a design's cultural roots")
    p.add_argument("--image", required=True)
    p.add_argument("--notes")
    p.set_defaults(func=cmd_authenticate)

    p = sub.add_parser("strategy", help="Suggest a sales strategy")
    p.add_argument("--products", required=True)
    p.add_argument("--business", required=True)
    p.add_argument("--growth", type=float, default=0.0)
    p.add_argument("--materials", required=True)
    p.set_defaults(func=cmd_strategy)

    p = sub.add_parser("chat", help="Chat with the assistant")
    p.set_defaults(func=cmd_chat)
    return parser


def main(argv: list[str] | None = None) -> None:
    _setup_logging()
    args = build_parser().parse_args(argv)
    config = Config.load()
    try:
        args.func(args, config)
    except ValidationError as e:
        print(f"Invalid input: {e}")
        sys.exit(2)
    except (KarigarError, FileNotFoundError) as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
