"""Memoized selectors over immutable state snapshots.

A selector is built from input selectors and a combiner. It recomputes only
when one of its inputs changed since the last call and otherwise returns the
very same result object, so downstream selectors stay cached too.
"""

import logging
import operator
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

EqualityCheck = Callable[[Any, Any], bool]


class Selector:
    """A single-entry memoized derivation."""

    def __init__(
        self,
        input_selectors: tuple[Callable[[Any], Any], ...],
        combiner: Callable[..., Any],
        equal: EqualityCheck = operator.is_,
    ):
        self.input_selectors = input_selectors
        self.combiner = combiner
        self.equal = equal
        self.recomputations = 0
        self._last_args: Optional[tuple] = None
        self._last_result: Any = None

    def __call__(self, state: Any) -> Any:
        args = tuple(select(state) for select in self.input_selectors)
        if self._last_args is not None and all(
            self.equal(new, old) for new, old in zip(args, self._last_args)
        ):
            return self._last_result

        self._last_result = self.combiner(*args)
        self._last_args = args
        self.recomputations += 1
        return self._last_result

    def reset(self) -> None:
        """Drop the cached result."""
        self._last_args = None
        self._last_result = None
        self.recomputations = 0


def create_selector(*selectors: Callable) -> Selector:
    """Create a selector whose inputs are compared by identity.

    The last positional argument is the combiner.
    """
    *inputs, combiner = selectors
    return Selector(tuple(inputs), combiner, operator.is_)


def create_deep_equal_selector(*selectors: Callable) -> Selector:
    """Create a selector whose inputs are compared by value."""
    *inputs, combiner = selectors
    return Selector(tuple(inputs), combiner, operator.eq)
