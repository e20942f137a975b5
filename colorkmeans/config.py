"""
Clustering Configuration

Immutable, validated configuration for a k-means color clustering run.
All option errors surface here, before any image is touched.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence, Tuple, Union
import math

from .color import Colorspace, parse_color, split_seed_colors
from .errors import InvalidOption


# ============================================================================
# Enums
# ============================================================================

class ViewMode(Enum):
    """Diagnostic output modes."""
    HEXCOLORS = "hexcolors"
    SWATCHES = "swatches"
    PROGRESS = "progress"
    ALL = "all"

    @property
    def shows_hexcolors(self) -> bool:
        return self in (ViewMode.HEXCOLORS, ViewMode.ALL)

    @property
    def shows_swatches(self) -> bool:
        return self in (ViewMode.SWATCHES, ViewMode.ALL)

    @property
    def shows_progress(self) -> bool:
        return self in (ViewMode.PROGRESS, ViewMode.ALL)


class SeedingMethod(Enum):
    """Automatic seed selection strategies used when no seed list is given."""
    MEDIAN_CUT = "median-cut"
    KMEANS_PLUSPLUS = "kmeans++"


def _to_enum(enum_cls, value, option: str):
    if value is None or isinstance(value, enum_cls):
        return value
    for member in enum_cls:
        if str(value).strip().lower() == member.value:
            return member
    choices = ', '.join(member.value for member in enum_cls)
    raise InvalidOption(f"{option} must be one of: {choices}; got '{value}'")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# ============================================================================
# Configuration
# ============================================================================

@dataclass(frozen=True)
class KMeansColorConfig:
    """
    Configuration for k-means color clustering.

    When seedcolors is given, numcolors is replaced by the number of seeds.
    """
    numcolors: int = 5
    """Number of clusters K. Must be > 1."""

    seedcolors: Optional[Tuple[str, ...]] = None
    """Explicit seed color specs, in cluster order. None for automatic seeding."""

    maxiters: int = 40
    """Iteration cap. Must be > 0."""

    convergence: float = 0.05
    """Stop when 100 * aggregate RMSE between iterations drops below this."""

    colorspace: Colorspace = Colorspace.SRGB
    """Working colorspace for distance computation."""

    view: Optional[ViewMode] = None
    """Diagnostic output mode, or None for no diagnostics."""

    seeding: SeedingMethod = SeedingMethod.MEDIAN_CUT
    """Automatic seeding strategy."""

    random_state: int = 42
    """Random seed for kmeans++ seeding."""

    n_jobs: int = 1
    """Worker threads for the assignment and mean update steps."""

    chunk_size: int = 262144
    """Pixels processed per chunk."""

    def __post_init__(self):
        """Normalize option types and validate ranges."""
        # frozen dataclass: normalized values are written with object.__setattr__
        set_ = object.__setattr__

        set_(self, 'colorspace', Colorspace.from_name(self.colorspace))
        set_(self, 'view', _to_enum(ViewMode, self.view, 'view'))
        set_(self, 'seeding', _to_enum(SeedingMethod, self.seeding, 'seeding'))

        if self.seedcolors is not None:
            seeds = tuple(split_seed_colors(self.seedcolors))
            if len(seeds) < 2:
                raise InvalidOption(
                    f"seedcolors must list at least 2 colors, got {len(seeds)}"
                )
            for spec in seeds:
                parse_color(spec)
            set_(self, 'seedcolors', seeds)
            set_(self, 'numcolors', len(seeds))

        if not _is_int(self.numcolors) or self.numcolors < 2:
            raise InvalidOption(f"numcolors must be an integer > 1, got {self.numcolors!r}")
        if not _is_int(self.maxiters) or self.maxiters < 1:
            raise InvalidOption(f"maxiters must be an integer > 0, got {self.maxiters!r}")
        if (isinstance(self.convergence, bool)
                or not isinstance(self.convergence, (int, float))
                or math.isnan(self.convergence)
                or self.convergence < 0):
            raise InvalidOption(f"convergence must be a float >= 0, got {self.convergence!r}")
        set_(self, 'convergence', float(self.convergence))
        if not _is_int(self.random_state):
            raise InvalidOption(f"random_state must be an integer, got {self.random_state!r}")
        if not _is_int(self.n_jobs) or self.n_jobs < 1:
            raise InvalidOption(f"n_jobs must be an integer >= 1, got {self.n_jobs!r}")
        if not _is_int(self.chunk_size) or self.chunk_size < 1:
            raise InvalidOption(f"chunk_size must be an integer >= 1, got {self.chunk_size!r}")

    @classmethod
    def from_options(
        cls,
        numcolors: Optional[str] = None,
        seedcolors: Optional[Union[str, Sequence[str]]] = None,
        maxiters: Optional[str] = None,
        convergence: Optional[str] = None,
        colorspace: Optional[str] = None,
        view: Optional[str] = None,
        seeding: Optional[str] = None,
        random_state: Optional[str] = None,
        n_jobs: Optional[str] = None
    ) -> 'KMeansColorConfig':
        """
        Build a configuration from raw (usually command-line) string values.

        Unset options keep their defaults.

        Raises:
            InvalidOption: If a value is malformed or out of range
            InvalidSeedColor: If a seed color cannot be parsed
            ColorspaceUnsupported: If the colorspace name is unknown
        """
        kwargs = {}
        if numcolors is not None:
            kwargs['numcolors'] = _parse_number(numcolors, int, 'numcolors')
        if seedcolors is not None:
            kwargs['seedcolors'] = seedcolors
        if maxiters is not None:
            kwargs['maxiters'] = _parse_number(maxiters, int, 'maxiters')
        if convergence is not None:
            kwargs['convergence'] = _parse_number(convergence, float, 'convergence')
        if colorspace is not None:
            kwargs['colorspace'] = colorspace
        if view is not None:
            kwargs['view'] = view
        if seeding is not None:
            kwargs['seeding'] = seeding
        if random_state is not None:
            kwargs['random_state'] = _parse_number(random_state, int, 'random_state')
        if n_jobs is not None:
            kwargs['n_jobs'] = _parse_number(n_jobs, int, 'n_jobs')
        return cls(**kwargs)


def _parse_number(value: Any, kind, option: str):
    if isinstance(value, kind) and not isinstance(value, bool):
        return value
    try:
        return kind(str(value).strip())
    except ValueError:
        raise InvalidOption(f"{option} must be {kind.__name__}, got '{value}'") from None
