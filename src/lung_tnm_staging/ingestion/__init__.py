"""Ingestion sub-package.

Builds :class:`~lung_tnm_staging.domain.models.TnmRecord` objects from the
embedded form stored by the owning clinical record, or from case files.
"""

from __future__ import annotations

from lung_tnm_staging.ingestion.record_loader import (
    load_case_file,
    record_from_mapping,
    record_to_dict,
)

__all__ = [
    "load_case_file",
    "record_from_mapping",
    "record_to_dict",
]
