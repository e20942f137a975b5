"""
Clustering pipeline: seed → iterate → render, and the file-to-file wrapper.
"""

from pathlib import Path
from typing import Optional, TextIO, Tuple, Union
import threading

from .buffer import PixelBuffer
from .config import KMeansColorConfig
from .engine import ClusteringResult, KMeansColorClusterer
from .io import check_input_path, check_output_path, load_image, save_image
from .seeding import BaseSeedingStrategy, initialize_seeds
from .viz import ViewReporter


def segment_buffer(
    buffer: PixelBuffer,
    config: Optional[KMeansColorConfig] = None,
    reporter: Optional[ViewReporter] = None,
    strategy: Optional[BaseSeedingStrategy] = None,
    cancel_event: Optional[threading.Event] = None
) -> Tuple[PixelBuffer, ClusteringResult]:
    """
    Cluster a buffer's colors and render the segmented buffer.

    Args:
        buffer: Pixels in the working colorspace (buffer.colorspace should
                match config.colorspace)
        config: Clustering configuration. If None, uses defaults.
        reporter: Diagnostic output, if any
        strategy: Seeding strategy override
        cancel_event: Stops the loop early when set

    Returns:
        segmented: Rendered buffer with at most K colors
        result: Clustering result

    Example:
        >>> buf = PixelBuffer.from_srgb(rgb, Colorspace.LAB)
        >>> config = KMeansColorConfig(numcolors=4, colorspace='LAB')
        >>> segmented, result = segment_buffer(buf, config)
    """
    config = config or KMeansColorConfig()

    seeds = initialize_seeds(buffer, config, strategy)
    if reporter is not None:
        reporter.report_seeds(seeds)

    clusterer = KMeansColorClusterer(
        config,
        on_iteration=reporter.on_iteration if reporter is not None else None,
        cancel_event=cancel_event
    )
    result = clusterer.fit(buffer, seeds)

    if reporter is not None:
        reporter.report_final(result)

    return result.render(buffer), result


def segment_image(
    input_path: Optional[Union[str, Path]],
    output_path: Optional[Union[str, Path]],
    config: Optional[KMeansColorConfig] = None,
    stream: Optional[TextIO] = None,
    cancel_event: Optional[threading.Event] = None
) -> ClusteringResult:
    """
    Load an image, cluster its colors and write the segmented image.

    Both paths are validated before any clustering work starts.

    Raises:
        MissingInputFile, MissingOutputFile, UnreadableInput, CodecFailure
    """
    config = config or KMeansColorConfig()
    input_path = check_input_path(input_path)
    output_path = check_output_path(output_path)

    buffer = load_image(input_path, config.colorspace)
    reporter = ViewReporter(
        config.view,
        config.colorspace,
        stream=stream,
        swatch_prefix=output_path.with_suffix('')
    )

    segmented, result = segment_buffer(buffer, config, reporter, cancel_event=cancel_event)
    save_image(segmented, output_path)
    return result
