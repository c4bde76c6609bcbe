"""
Compile free-text filter input into a feature predicate.

Resolution order for a non-empty input:
1. Airline match - any airline whose code or name contains the input
   (case-insensitive). A feature passes if its upper-cased callsign
   contains any of the matched codes.
2. Callsign match - no airline matched, so the input itself is looked
   for inside the upper-cased callsign. Features without a callsign fail.

Empty input compiles to the identity predicate (show everything).

Compiling is pure: the same input and airline table always give an
equivalent predicate, so it is safe to recompile on every keystroke.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from flightmap.airlines import AIRLINES
from flightmap.models.feature import RenderedFeature

KIND_ALL = 'all'
KIND_AIRLINE = 'airline'
KIND_CALLSIGN = 'callsign'


def _callsign_expr() -> list:
    return ['upcase', ['get', 'callsign']]


@dataclass(frozen=True)
class FilterPredicate:
    """
    Compiled filter, callable on a RenderedFeature.

    Attributes:
        raw: Input text the predicate was compiled from
        kind: 'all', 'airline' or 'callsign'
        codes: Airline codes matched (airline kind only)
        term: Upper-cased trimmed input (callsign kind only)
    """
    raw: str
    kind: str = KIND_ALL
    codes: Tuple[str, ...] = ()
    term: str = ''

    @property
    def is_identity(self) -> bool:
        return self.kind == KIND_ALL

    def __call__(self, feature: RenderedFeature) -> bool:
        if self.kind == KIND_ALL:
            return True

        callsign = feature.callsign
        if self.kind == KIND_AIRLINE:
            upper = (callsign or '').upper()
            return any(code in upper for code in self.codes)

        if not callsign:
            return False
        return self.term in callsign.upper()

    def to_expression(self) -> Optional[list]:
        """
        Map-layer filter expression equivalent to this predicate.

        Returns None for the identity predicate, which clears the filter.
        """
        if self.kind == KIND_ALL:
            return None

        if self.kind == KIND_AIRLINE:
            return ['any'] + [
                ['>=', ['index-of', code, _callsign_expr()], 0]
                for code in self.codes
            ]

        return [
            'all',
            ['has', 'callsign'],
            ['>=', ['index-of', self.term, _callsign_expr()], 0],
        ]


def match_airlines(text: str, airlines: Optional[Dict[str, str]] = None) -> List[str]:
    """Codes whose code or name contains text, case-insensitive."""
    airlines = AIRLINES if airlines is None else airlines
    needle = text.strip().upper()
    if not needle:
        return []
    return [
        code for code, name in airlines.items()
        if needle in code.upper() or needle in name.upper()
    ]


def compile_filter(text: Optional[str], airlines: Optional[Dict[str, str]] = None) -> FilterPredicate:
    """Compile raw filter input into a FilterPredicate."""
    raw = text or ''
    term = raw.strip().upper()
    if not term:
        return FilterPredicate(raw=raw)

    codes = match_airlines(term, airlines)
    if codes:
        return FilterPredicate(raw=raw, kind=KIND_AIRLINE, codes=tuple(codes))

    return FilterPredicate(raw=raw, kind=KIND_CALLSIGN, term=term)
