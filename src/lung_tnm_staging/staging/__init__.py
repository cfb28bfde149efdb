"""Staging sub-package.

The three leaf stagers, the stage resolver, and the classifier that keeps
a case's derived codes in step with its inputs.
"""

from __future__ import annotations

from lung_tnm_staging.staging.m_stager import compute_m
from lung_tnm_staging.staging.n_stager import compute_n
from lung_tnm_staging.staging.orchestrator import (
    TnmClassifier,
    classify,
    stage_record,
)
from lung_tnm_staging.staging.stage_resolver import compute_stage
from lung_tnm_staging.staging.t_stager import compute_t

__all__ = [
    "TnmClassifier",
    "classify",
    "compute_m",
    "compute_n",
    "compute_stage",
    "compute_t",
    "stage_record",
]
