"""Loading of the heuristic data tables (stop words, amount bands).

The tables live as YAML next to this module so they can be tuned without
touching the scoring code.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, FrozenSet, Optional, Union
import yaml
from logger import get_logger

logger = get_logger()

DATA_DIR = Path(__file__).parent / "data"


@dataclass(frozen=True)
class AmountRange:
    """Inclusive [min, max] band of plausible amounts for a category."""

    min: float
    max: float

    def contains(self, amount: float) -> bool:
        return self.min <= amount <= self.max


def _load_yaml(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"Data table not found: {path}")

    logger.debug(f"Loading data table from {path}")
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


@lru_cache(maxsize=None)
def load_stop_words(path: Optional[Path] = None) -> FrozenSet[str]:
    """Load the combined stop-word set.

    Every list in the YAML file (spanish, english, expense_filler, ...) is
    merged into one set.

    Args:
        path: Optional alternate YAML file. Defaults to data/stop_words.yaml.

    Returns:
        Frozen set of lower-cased stop words.
    """
    data = _load_yaml(path or DATA_DIR / "stop_words.yaml")

    words = set()
    for value in data.values():
        if isinstance(value, list):
            words.update(str(word).strip().lower() for word in value)
    return frozenset(words)


def load_amount_ranges(
    path: Optional[Union[str, Path]] = None,
) -> Dict[str, AmountRange]:
    """Load the per-slug amount bands.

    Args:
        path: Optional alternate YAML file. Defaults to data/amount_ranges.yaml.

    Returns:
        Dictionary of category slug to AmountRange.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If a band is malformed (missing bound or min > max).
    """
    data = _load_yaml(Path(path) if path else DATA_DIR / "amount_ranges.yaml")

    ranges = {}
    for slug, band in (data.get("ranges") or {}).items():
        try:
            amount_range = AmountRange(min=float(band["min"]), max=float(band["max"]))
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid amount range for '{slug}': {band}") from e

        if amount_range.min > amount_range.max:
            raise ValueError(f"Amount range for '{slug}' has min > max")
        ranges[slug] = amount_range

    return ranges
