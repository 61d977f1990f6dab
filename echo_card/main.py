"""Echo Card - render a signal and its historical echo as a PNG card."""

import argparse
import sys
from pathlib import Path
from typing import Optional

from .config import settings
from .utils import get_logger, setup_logging

logger = get_logger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Echo Card - pair a passing thought with a moment in history",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m echo_card.main --signal "三点了，睡不着。"                 # Match via LLM, export at 5x
  python -m echo_card.main --signal "..." --quote "行到水穷处，坐看云起时。" \\
      --author 王维 --era 740年 --place 终南山的溪边                  # Supply the echo yourself
  python -m echo_card.main --signal "..." --quote "..." --height-only  # Print logical height
  python -m echo_card.main --signal "..." --preview                    # Render at preview scale
        """,
    )

    parser.add_argument("--signal", required=True, help="The user's thought (first section)")
    parser.add_argument("--name", help="Signer name (random anonymous identity if omitted)")
    parser.add_argument("--location", help="Signer location")
    parser.add_argument("--time", help="Time shown under the signal (defaults to the current year)")

    parser.add_argument("--quote", help="Quotation text; matched automatically when omitted")
    parser.add_argument("--author", default="", help="Speaker of the quotation")
    parser.add_argument("--era", default="", help="Era of the quotation, e.g. 1633年 or 1940年代")
    parser.add_argument("--place", default="", help="Where the quotation was spoken")

    parser.add_argument(
        "--scale",
        type=float,
        default=None,
        help=f"Pixels per logical unit (default: EXPORT_SCALE={settings.export_scale})",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help=f"Render at PREVIEW_SCALE={settings.preview_scale} instead of export scale",
    )
    parser.add_argument("--output", type=Path, help="Output PNG path")
    parser.add_argument(
        "--height-only",
        action="store_true",
        help="Print the logical card height and exit without drawing",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    return parser.parse_args(argv)


def build_card_data(args: argparse.Namespace):
    """Assemble CardData from arguments, matching the echo when none is given."""
    from .identity import current_user_time, resolve_identity
    from .models import CardData, QuoteMatch

    signal = args.signal.strip()
    name, location = resolve_identity(args.name, args.location)
    user_time = (args.time or "").strip() or current_user_time()

    if args.quote:
        match = QuoteMatch(
            quote=args.quote.strip(),
            author_name=args.author.strip(),
            era=args.era.strip(),
            location=args.place.strip(),
        )
    else:
        from .matcher import QuoteMatcher

        logger.info("No quote given, matching an echo...")
        match = QuoteMatcher().generate_match(signal)

    return CardData.from_match(
        match,
        user_signal=signal,
        user_name=name,
        user_time=user_time,
        user_location=location,
    )


def run(args: argparse.Namespace) -> int:
    """
    Build, lay out and render one card.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 for success)
    """
    from .card_renderer import CardRenderer, export_card
    from .fonts import load_fonts

    try:
        data = build_card_data(args)
        fonts = load_fonts()

        if args.height_only:
            print(f"{CardRenderer().card_height(data, fonts):.2f}")
            return 0

        if args.scale is not None:
            scale = args.scale
        elif args.preview:
            scale = settings.preview_scale
        else:
            scale = settings.export_scale
        if scale <= 0:
            logger.error(f"Scale must be positive, got {scale}")
            return 1

        output = export_card(data, fonts, args.output, scale)
        print(output)
        return 0

    except Exception as e:
        logger.exception(f"Rendering failed: {e}")
        return 1


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    log_level = "DEBUG" if args.debug else settings.log_level
    setup_logging(level=log_level, gcp_project_id=settings.gcp_project_id)

    logger.debug(f"Arguments: {args}")
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
