"""Primary tumor (T) category for lung cancer.

Reproduces the T descriptors of the IASLC / AJCC-UICC TNM classification,
9th edition (lung), as an ordered, highest-severity-first rule list.  The
first matching rule wins.
"""

from __future__ import annotations

import logging
from collections import abc
from enum import Enum
from typing import Any, Iterable

from lung_tnm_staging.domain.models import (
    NoduleExtent,
    TCategory,
    TumorInvasionSite,
    clamp_size,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Size boundaries in cm; each upper bound is inclusive.
_T1A_MAX_CM: float = 1.0
_T1B_MAX_CM: float = 2.0
_T1C_MAX_CM: float = 3.0
_T2A_MAX_CM: float = 4.0
_T2B_MAX_CM: float = 5.0
_T3_MAX_CM: float = 7.0

T4_INVASIONS: frozenset[TumorInvasionSite] = frozenset({
    TumorInvasionSite.DIAPHRAGM,
    TumorInvasionSite.MEDIASTINUM,
    TumorInvasionSite.HEART_GREAT_VESSELS,
    TumorInvasionSite.TRACHEA_CARINA,
    TumorInvasionSite.RECURRENT_LARYNGEAL_NERVE,
    TumorInvasionSite.ESOPHAGUS_VERTEBRAL_BODY,
})

T3_INVASIONS: frozenset[TumorInvasionSite] = frozenset({
    TumorInvasionSite.CHEST_WALL,
    TumorInvasionSite.PHRENIC_NERVE,
    TumorInvasionSite.PARIETAL_PERICARDIUM,
})

T2_INVASIONS: frozenset[TumorInvasionSite] = frozenset({
    TumorInvasionSite.MAIN_BRONCHUS,
    TumorInvasionSite.VISCERAL_PLEURA,
    TumorInvasionSite.ATELECTASIS,
})


# ---------------------------------------------------------------------------
# Input normalisation
# ---------------------------------------------------------------------------

def _known_invasions(invasions: Iterable[Any] | None) -> frozenset[TumorInvasionSite]:
    """Keep the recognised invasion sites; unknown identifiers carry no information."""
    if not invasions:
        return frozenset()
    if isinstance(invasions, (str, Enum)) or not isinstance(invasions, abc.Iterable):
        invasions = [invasions]
    known: set[TumorInvasionSite] = set()
    for item in invasions:
        try:
            known.add(TumorInvasionSite(item))
        except ValueError:
            logger.warning("Ignoring unrecognised invasion site %r.", item)
    return frozenset(known)


def _known_nodules(nodules: Any) -> NoduleExtent | None:
    if nodules is None:
        return NoduleExtent.NONE
    try:
        return NoduleExtent(nodules)
    except ValueError:
        logger.warning("Ignoring unrecognised nodule extent %r.", nodules)
        return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def compute_t(
    size_cm: Any,
    invasions: Iterable[Any] = (),
    nodules: Any = NoduleExtent.NONE,
) -> TCategory:
    """Derive the T category.

    Precedence (first match wins):

    1. ``TX`` when the size is not assessable (zero, negative or not a
       number).  Without a measured tumor no T descriptor is assigned.
    2. ``T4``: size > 7 cm, nodule(s) in a different ipsilateral lobe, or
       a T4-class invasion.
    3. ``T3``: 5 < size <= 7 cm, separate nodule(s) in the same lobe, or a
       T3-class invasion.
    4. ``T2b``: 4 < size <= 5 cm.  A T2-class invasion on a tumor above
       4 cm lands here too.
    5. ``T2a``: 3 < size <= 4 cm, or a T2-class invasion with size <= 4 cm.
    6. ``T1c`` / ``T1b`` / ``T1a`` for 2-3 / 1-2 / 0-1 cm.

    Parameters
    ----------
    size_cm:
        Greatest tumor dimension in centimetres.
    invasions:
        Invaded structures.  Unrecognised identifiers are ignored.
    nodules:
        Satellite nodule extent.  An unrecognised value is ignored.

    Returns
    -------
    TCategory
        The derived category.  This function never raises.
    """
    size = clamp_size(size_cm)
    if size <= 0.0:
        return TCategory.TX

    sites = _known_invasions(invasions)
    extent = _known_nodules(nodules)

    if (
        size > _T3_MAX_CM
        or extent is NoduleExtent.DIFFERENT_IPSILATERAL_LOBE
        or sites & T4_INVASIONS
    ):
        return TCategory.T4

    if (
        size > _T2B_MAX_CM
        or extent is NoduleExtent.SAME_LOBE
        or sites & T3_INVASIONS
    ):
        return TCategory.T3

    if size > _T2A_MAX_CM:
        return TCategory.T2B

    if size > _T1C_MAX_CM or sites & T2_INVASIONS:
        return TCategory.T2A

    if size > _T1B_MAX_CM:
        return TCategory.T1C
    if size > _T1A_MAX_CM:
        return TCategory.T1B
    return TCategory.T1A
