"""Domain layer -- vocabularies, the TNM record, labels, events and stager protocols.

Re-exports all public domain types for convenient access::

    from lung_tnm_staging.domain import TnmRecord, StageGroup
"""

from __future__ import annotations

from lung_tnm_staging.domain.events import (
    STAGE_CHANGED,
    TNM_UPDATED,
    Event,
    EventBus,
)
from lung_tnm_staging.domain.labels import (
    VOCABULARIES,
    format_summary,
    label_for,
    stage_family,
)
from lung_tnm_staging.domain.models import (
    DERIVED_FIELDS,
    RAW_FIELDS,
    AppConfig,
    MCategory,
    MetastasisPattern,
    NCategory,
    NodalInvolvementLevel,
    NoduleExtent,
    StageGroup,
    TCategory,
    TnmRecord,
    TnmStaging,
    TumorInvasionSite,
    clamp_size,
)
from lung_tnm_staging.domain.protocols import (
    MStagerProtocol,
    NStagerProtocol,
    StageResolverProtocol,
    TStagerProtocol,
)

__all__ = [
    # Vocabularies
    "MetastasisPattern",
    "NodalInvolvementLevel",
    "NoduleExtent",
    "TumorInvasionSite",
    # Output codes
    "MCategory",
    "NCategory",
    "StageGroup",
    "TCategory",
    # Models
    "AppConfig",
    "DERIVED_FIELDS",
    "RAW_FIELDS",
    "TnmRecord",
    "TnmStaging",
    "clamp_size",
    # Labels
    "VOCABULARIES",
    "format_summary",
    "label_for",
    "stage_family",
    # Events
    "STAGE_CHANGED",
    "TNM_UPDATED",
    "Event",
    "EventBus",
    # Protocols
    "MStagerProtocol",
    "NStagerProtocol",
    "StageResolverProtocol",
    "TStagerProtocol",
]
