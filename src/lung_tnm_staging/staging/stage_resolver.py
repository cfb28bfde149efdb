"""Overall stage group from T, N and M.

The M0 grid is an explicit lookup table transcribed from the lung cancer
stage groups of the IASLC / AJCC-UICC TNM classification, 9th edition.
Any edit to :data:`M0_STAGE_TABLE` or :data:`M1_STAGE_TABLE` must cite the
edition and table it reproduces.  The ``Unknown`` fallback exists so that
callers never crash; it is not a clinical judgement.
"""

from __future__ import annotations

import logging
from typing import Any

from lung_tnm_staging.domain.models import (
    MCategory,
    NCategory,
    StageGroup,
    TCategory,
)

logger = logging.getLogger(__name__)

_T = TCategory
_S = StageGroup

M1_STAGE_TABLE: dict[MCategory, StageGroup] = {
    MCategory.M1A: _S.IVA,
    MCategory.M1B: _S.IVA,
    MCategory.M1C1: _S.IVB,
    MCategory.M1C2: _S.IVB,
}

M0_STAGE_TABLE: dict[NCategory, dict[TCategory, StageGroup]] = {
    NCategory.N0: {
        _T.T1A: _S.IA1,
        _T.T1B: _S.IA2,
        _T.T1C: _S.IA3,
        _T.T2A: _S.IB,
        _T.T2B: _S.IIA,
        _T.T3: _S.IIB,
        _T.T4: _S.IIIA,
    },
    NCategory.N1: {
        _T.T1A: _S.IIB,
        _T.T1B: _S.IIB,
        _T.T1C: _S.IIB,
        _T.T2A: _S.IIB,
        _T.T2B: _S.IIB,
        _T.T3: _S.IIIA,
        _T.T4: _S.IIIA,
    },
    NCategory.N2A: {
        _T.T1A: _S.IIIA,
        _T.T1B: _S.IIIA,
        _T.T1C: _S.IIIA,
        _T.T2A: _S.IIIA,
        _T.T2B: _S.IIIA,
        _T.T3: _S.IIIA,
        _T.T4: _S.IIIA,
    },
    NCategory.N2B: {
        _T.T1A: _S.IIIA,
        _T.T1B: _S.IIIA,
        _T.T1C: _S.IIIA,
        _T.T2A: _S.IIIB,
        _T.T2B: _S.IIIB,
        _T.T3: _S.IIIB,
        _T.T4: _S.IIIB,
    },
    NCategory.N3: {
        _T.T1A: _S.IIIB,
        _T.T1B: _S.IIIB,
        _T.T1C: _S.IIIB,
        _T.T2A: _S.IIIB,
        _T.T2B: _S.IIIB,
        _T.T3: _S.IIIC,
        _T.T4: _S.IIIC,
    },
}


def _as_member(enum_cls: type, value: Any) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        return None


def compute_stage(t: Any, n: Any, m: Any) -> StageGroup:
    """Look up the stage group for a (T, N, M) combination.

    Parameters
    ----------
    t, n, m:
        Category codes, as enum members or their string values.

    Returns
    -------
    StageGroup
        The stage group, or ``StageGroup.UNKNOWN`` for any combination the
        tables do not cover (``TX``, ``MX``, unrecognised codes).  This
        function never raises.
    """
    m_cat = _as_member(MCategory, m)
    if m_cat in M1_STAGE_TABLE:
        return M1_STAGE_TABLE[m_cat]

    if m_cat is MCategory.M0:
        row = M0_STAGE_TABLE.get(_as_member(NCategory, n), {})
        stage = row.get(_as_member(TCategory, t))
        if stage is not None:
            return stage

    if _as_member(TCategory, t) is TCategory.TX:
        # Expected while a new case has no measured tumor yet.
        logger.debug("T not assessable; stage group is unknown.")
    else:
        logger.warning("Unhandled TNM combination: t=%r, n=%r, m=%r", t, n, m)
    return StageGroup.UNKNOWN
