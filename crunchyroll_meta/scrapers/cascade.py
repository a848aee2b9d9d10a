"""Ordered fallback extraction over raw markup.

Each field of a page is described by a tuple of strategies tried in order.
A strategy is a compiled pattern plus an optional transform; the first one
that yields a non-empty value wins. Adding a fallback or changing priority
means editing the tuple, not the extraction code.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionStrategy:
    """A single pattern-based way of recovering one field from markup."""

    name: str
    pattern: re.Pattern[str]
    group: Union[int, str] = 1
    transform: Optional[Callable[[str], str]] = None

    def __call__(self, markup: str) -> Optional[str]:
        match = self.pattern.search(markup)
        if not match:
            return None

        value = match.group(self.group)
        if value is None:
            return None
        if self.transform is not None:
            value = self.transform(value)
        return value or None


def run_cascade(
    strategies: Sequence[ExtractionStrategy],
    markup: str,
    field: str,
) -> Optional[str]:
    """
    Evaluate strategies in order and return the first value found.

    A strategy that raises is logged and skipped, so one broken pattern
    never takes down the others or the caller.

    Args:
        strategies: Strategies in priority order
        markup: Markup to search (a whole page or a single card)
        field: Field name, used in log messages

    Returns:
        The first non-empty value, or None if every strategy missed
    """
    for strategy in strategies:
        try:
            value = strategy(markup)
        except Exception:
            logger.exception(
                "[HTML Scraper] Strategy '%s' failed while extracting %s", strategy.name, field
            )
            continue

        if value:
            logger.debug("[HTML Scraper] %s extracted by '%s'", field, strategy.name)
            return value

    logger.debug(
        "[HTML Scraper] No strategy matched %s (tried: %s)",
        field,
        ", ".join(strategy.name for strategy in strategies),
    )
    return None
