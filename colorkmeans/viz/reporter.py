"""
Diagnostic view output.

Writes seed and final cluster colors as hex, per-iteration progress lines
and swatch previews, according to the configured view mode.
"""

from pathlib import Path
from typing import Optional, TextIO, Union
import logging
import sys
import numpy as np

from ..color import Colorspace, to_hex
from ..config import ViewMode
from ..engine import ClusteringResult, IterationState
from .swatches import save_swatches

logger = logging.getLogger(__name__)


def format_progress(state: IterationState) -> str:
    return f"iteration={state.iteration} 100*rmse={state.rmse:g}"


class ViewReporter:
    """
    Emits diagnostics for one clustering run.

    Text goes to stream; swatches are written as
    '<swatch_prefix>_seed_swatches.png' and '<swatch_prefix>_final_swatches.png'.
    """

    def __init__(
        self,
        view: Optional[ViewMode],
        colorspace: Colorspace = Colorspace.SRGB,
        stream: Optional[TextIO] = None,
        swatch_prefix: Optional[Union[str, Path]] = None
    ):
        self.view = view
        self.colorspace = colorspace
        self.stream = stream if stream is not None else sys.stdout
        self.swatch_prefix = Path(swatch_prefix) if swatch_prefix is not None else None

    @property
    def enabled(self) -> bool:
        return self.view is not None

    def _write(self, line: str):
        self.stream.write(line + '\n')
        self.stream.flush()

    def _write_colors(self, heading: str, colors: np.ndarray):
        self._write(f"{heading} ({self.colorspace.value}):")
        for idx, color in enumerate(colors):
            self._write(f"  {idx}: {to_hex(color)}")

    def _swatches(self, name: str, colors: np.ndarray, counts=None):
        if self.swatch_prefix is None:
            logger.warning("Swatch view requested without a swatch location; skipping")
            return
        path = self.swatch_prefix.with_name(f"{self.swatch_prefix.name}_{name}_swatches.png")
        save_swatches(colors, path, self.colorspace, title=f"{name} colors", counts=counts)
        logger.info("Wrote %s", path)

    def report_seeds(self, seeds: np.ndarray):
        """Show the initial cluster colors."""
        if not self.enabled:
            return
        if self.view.shows_hexcolors:
            self._write_colors("seed colors", seeds)
        if self.view.shows_swatches:
            self._swatches("seed", seeds)

    def on_iteration(self, state: IterationState):
        """Progress line for a completed iteration."""
        if self.enabled and self.view.shows_progress:
            self._write(format_progress(state))

    def report_final(self, result: ClusteringResult):
        """Show the final cluster colors."""
        if not self.enabled:
            return
        if self.view.shows_hexcolors:
            self._write_colors("final colors", result.colors)
        if self.view.shows_swatches:
            self._swatches("final", result.colors, counts=result.counts)
