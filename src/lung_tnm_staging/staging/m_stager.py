"""Distant metastasis (M) category for lung cancer.

M1c1 and M1c2 are kept distinct (9th edition) so that the stage resolver
sees the same granularity as the published stage table.
"""

from __future__ import annotations

import logging
from typing import Any

from lung_tnm_staging.domain.models import MCategory, MetastasisPattern

logger = logging.getLogger(__name__)

_M_TABLE: dict[MetastasisPattern, MCategory] = {
    MetastasisPattern.M0: MCategory.M0,
    MetastasisPattern.M1A: MCategory.M1A,
    MetastasisPattern.M1B: MCategory.M1B,
    MetastasisPattern.M1C1: MCategory.M1C1,
    MetastasisPattern.M1C2: MCategory.M1C2,
}


def compute_m(pattern: Any) -> MCategory:
    """Map a metastasis pattern to its M category.

    Unrecognised input yields ``MX``; this function never raises.
    """
    try:
        return _M_TABLE[MetastasisPattern(pattern)]
    except ValueError:
        logger.warning("Unrecognised metastasis pattern %r; using MX.", pattern)
        return MCategory.MX
