from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

import cv2
import numpy as np

from .errors import NoMatchError
from .io import load_image
from .matching.template import DEFAULT_CONFIDENCE, TemplateImageFinder
from .types import ColorMode, Image, MatchRequest, MatchResult, Region

logger = logging.getLogger("imgfind")


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Locate a needle image inside a haystack image.")
    parser.add_argument("haystack", type=Path, help="Image to search within.")
    parser.add_argument("needle", type=Path, help="Image to search for.")
    parser.add_argument(
        "--confidence",
        type=float,
        default=DEFAULT_CONFIDENCE,
        help="Minimum confidence (0..1) a window must reach to count as a match.",
    )
    parser.add_argument(
        "--all",
        action="store_true",
        help="Report every match above the threshold instead of only the best one.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write a copy of the haystack with the reported matches outlined.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging verbosity.",
    )
    return parser.parse_args(argv)


def render_matches(haystack: Image, matches: Sequence[MatchResult[Region]]) -> np.ndarray:
    """
    Outline each match on a BGR copy of the haystack.
    """
    data = haystack.data
    flat = data.reshape(-1) if isinstance(data, np.ndarray) else np.frombuffer(data, dtype=np.uint8)
    pixels = flat.reshape(haystack.height, haystack.width, haystack.channels)

    if haystack.channels <= 2:
        annotated = cv2.cvtColor(np.ascontiguousarray(pixels[:, :, 0]), cv2.COLOR_GRAY2BGR)
    else:
        annotated = pixels[:, :, :3].copy()
        if haystack.color_mode == ColorMode.RGB:
            annotated = cv2.cvtColor(annotated, cv2.COLOR_RGB2BGR)

    for match in matches:
        region = match.location
        top_left = (region.left, region.top)
        bottom_right = (region.left + region.width - 1, region.top + region.height - 1)
        cv2.rectangle(annotated, top_left, bottom_right, (0, 0, 255), 1)
        cv2.putText(
            annotated,
            f"{match.confidence:.3f}",
            (region.left, max(region.top - 4, 10)),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.4,
            (0, 255, 0),
            1,
            lineType=cv2.LINE_AA,
        )
    return annotated


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_arguments(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    try:
        haystack = load_image(args.haystack)
        needle = load_image(args.needle)
    except (FileNotFoundError, ValueError) as exc:
        logger.error("%s", exc)
        return 2

    finder = TemplateImageFinder()
    request = MatchRequest(haystack=haystack, needle=needle, confidence=args.confidence)

    matches: List[MatchResult[Region]]
    if args.all:
        try:
            matches = finder.find_matches(request)
        except ValueError as exc:
            logger.error("%s", exc)
            return 2
    else:
        best = finder.find_match(request)
        if isinstance(best.error, NoMatchError):
            logger.error("%s", best.error)
            return 1
        if best.error is not None:
            logger.error("%s", best.error)
            return 2
        matches = [best]

    for match in matches:
        print(f"confidence={match.confidence:.4f} region={match.location}")

    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        cv2.imwrite(str(args.output), render_matches(haystack, matches))
        logger.info("annotated matches written to %s", args.output)

    return 0 if matches else 1


if __name__ == "__main__":
    sys.exit(main())
