"""Regional lymph node (N) category for lung cancer (9th edition N2a/N2b split)."""

from __future__ import annotations

import logging
from collections import abc
from enum import Enum
from typing import Any, Iterable

from lung_tnm_staging.domain.models import NCategory, NodalInvolvementLevel

logger = logging.getLogger(__name__)


def _known_levels(involvement: Iterable[Any] | None) -> frozenset[NodalInvolvementLevel]:
    if not involvement:
        return frozenset()
    if isinstance(involvement, (str, Enum)) or not isinstance(involvement, abc.Iterable):
        involvement = [involvement]
    levels: set[NodalInvolvementLevel] = set()
    for item in involvement:
        try:
            levels.add(NodalInvolvementLevel(item))
        except ValueError:
            logger.warning("Ignoring unrecognised nodal level %r.", item)
    return frozenset(levels)


def compute_n(
    involvement: Iterable[Any] = (),
    is_multiple_n2_stations: bool = False,
) -> NCategory:
    """Derive the N category; the worst involved level dominates.

    The N2 station multiplicity flag only splits N2 into ``N2a`` (single
    station) and ``N2b`` (multiple stations).  It is ignored when no N2
    involvement is recorded.
    """
    levels = _known_levels(involvement)
    if NodalInvolvementLevel.N3 in levels:
        return NCategory.N3
    if NodalInvolvementLevel.N2 in levels:
        return NCategory.N2B if is_multiple_n2_stations else NCategory.N2A
    if NodalInvolvementLevel.N1 in levels:
        return NCategory.N1
    return NCategory.N0
