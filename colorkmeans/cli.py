"""
Command line interface.

    colorkmeans [-n numcolors | -s seedcolors] [-m maxiters] [-c convergence]
                [-C colorspace] [-v view] infile outfile
"""

from typing import List, Optional
import argparse
import logging
import sys

from .color import Colorspace
from .config import KMeansColorConfig, SeedingMethod, ViewMode
from .errors import KMeansColorError
from .pipeline import segment_image

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    # values stay strings here; KMeansColorConfig validates them
    parser = argparse.ArgumentParser(
        prog='colorkmeans',
        description="Segment an image into K colors with k-means clustering."
    )
    parser.add_argument("infile", nargs='?', help="Input image file.")
    parser.add_argument("outfile", nargs='?', help="Output image file.")
    parser.add_argument("-n", "--numcolors", help="Number of clusters, integer > 1 (default: 5).")
    parser.add_argument(
        "-s", "--seedcolors",
        help="Space-separated seed colors, e.g. \"red blue #00ff00\". Overrides --numcolors."
    )
    parser.add_argument("-m", "--maxiters", help="Maximum iterations, integer > 0 (default: 40).")
    parser.add_argument("-c", "--convergence", help="Stop threshold for 100*rmse, float >= 0 (default: 0.05).")
    parser.add_argument(
        "-C", "--colorspace",
        help=f"Working colorspace: {', '.join(s.value for s in Colorspace)} (default: sRGB)."
    )
    parser.add_argument(
        "-v", "--view",
        help=f"Diagnostics: {', '.join(v.value for v in ViewMode)}."
    )
    parser.add_argument(
        "--seeding",
        help=f"Automatic seeding: {', '.join(m.value for m in SeedingMethod)} (default: median-cut)."
    )
    parser.add_argument("--random-state", help="Random seed for kmeans++ seeding (default: 42).")
    parser.add_argument("-j", "--jobs", help="Worker threads (default: 1).")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", action="store_true", help="Debug logging.")
    verbosity.add_argument("--quiet", action="store_true", help="Warnings and errors only.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.WARNING if args.quiet else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    try:
        config = KMeansColorConfig.from_options(
            numcolors=args.numcolors,
            seedcolors=args.seedcolors,
            maxiters=args.maxiters,
            convergence=args.convergence,
            colorspace=args.colorspace,
            view=args.view,
            seeding=args.seeding,
            random_state=args.random_state,
            n_jobs=args.jobs
        )
        result = segment_image(args.infile, args.outfile, config)
    except KMeansColorError as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        return 1

    logger.info(
        "Wrote %s: %d clusters, %s after %d iteration(s)",
        args.outfile, result.n_clusters, result.status.value, result.n_iter
    )
    return 0


if __name__ == '__main__':
    sys.exit(main())
