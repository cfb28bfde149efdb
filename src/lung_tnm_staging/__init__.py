"""Lung cancer TNM staging.

Derives the T, N and M categories and the overall stage group of a lung
tumor from measured size, invasion findings, satellite nodules, nodal
involvement and metastasis pattern, following the IASLC / AJCC-UICC TNM
classification (9th edition).

The stage group is an aid for the multidisciplinary team; it never
replaces clinician judgement.
"""

from __future__ import annotations

__version__ = "0.1.0"
