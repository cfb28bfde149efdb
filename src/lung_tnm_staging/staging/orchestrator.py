"""Staging pipeline and the classifier that owns a case's TNM record.

:func:`classify` runs the three stagers independently and resolves the
stage group from their outputs.  :class:`TnmClassifier` holds one
:class:`~lung_tnm_staging.domain.models.TnmRecord` and replaces it as a
whole on every edit, so an observer only ever sees a record whose derived
codes match its raw inputs.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Iterable

from lung_tnm_staging.domain.events import STAGE_CHANGED, TNM_UPDATED, EventBus
from lung_tnm_staging.domain.models import (
    DERIVED_FIELDS,
    RAW_FIELDS,
    MetastasisPattern,
    NodalInvolvementLevel,
    NoduleExtent,
    TnmRecord,
    TnmStaging,
    TumorInvasionSite,
)
from lung_tnm_staging.staging.m_stager import compute_m
from lung_tnm_staging.staging.n_stager import compute_n
from lung_tnm_staging.staging.stage_resolver import compute_stage
from lung_tnm_staging.staging.t_stager import compute_t

logger = logging.getLogger(__name__)


def classify(
    size_cm: Any = 0.0,
    invasions: Iterable[Any] = (),
    nodules: Any = NoduleExtent.NONE,
    n_involvement: Iterable[Any] = (),
    is_multiple_n2_stations: bool = False,
    meta_type: Any = MetastasisPattern.M0,
) -> TnmStaging:
    """Derive T, N, M and the stage group from raw inputs.

    Never raises: unrecognised values degrade to ``TX`` / ``MX`` /
    ``Unknown`` as described by the individual stagers.
    """
    t = compute_t(size_cm, invasions, nodules)
    n = compute_n(n_involvement, is_multiple_n2_stations)
    m = compute_m(meta_type)
    stage = compute_stage(t, n, m)
    logger.debug("Staged %s %s %s -> %s", t.value, n.value, m.value, stage.value)
    return TnmStaging(t=t, n=n, m=m, stage=stage)


def stage_record(record: TnmRecord) -> TnmRecord:
    """Return *record* re-derived from its raw inputs.

    A record is always a fixed point: ``stage_record(stage_record(r)) ==
    stage_record(r) == r``.
    """
    return TnmRecord(**record.raw_inputs())


class TnmClassifier:
    """Owns the TNM record of one clinical case.

    Every mutation builds a complete new record (inputs and derived codes)
    before it replaces the current one with a single assignment.  If the
    new inputs are rejected, the current record is left untouched.

    Parameters
    ----------
    record:
        Initial record.  Defaults to a fresh case (size 0, no invasions,
        no nodules, no nodal involvement, M0).
    bus:
        Optional :class:`EventBus`.  ``tnm.updated`` is published after
        every successful mutation; ``tnm.stage_changed`` additionally when
        the stage group changed.
    """

    def __init__(
        self,
        record: TnmRecord | None = None,
        bus: EventBus | None = None,
    ) -> None:
        self._record = record if record is not None else TnmRecord()
        self._bus = bus

    @property
    def record(self) -> TnmRecord:
        """The current, always self-consistent record."""
        return self._record

    # -- mutations ---------------------------------------------------------

    def update(self, **changes: Any) -> TnmRecord:
        """Change one or more raw fields and re-derive the staging.

        Raises
        ------
        ValueError
            If *changes* names a derived field (``t``, ``n``, ``m``,
            ``stage``) or an unknown field, or holds an identifier
            outside a vocabulary.
        """
        forbidden = DERIVED_FIELDS.intersection(changes)
        if forbidden:
            raise ValueError(
                f"Derived fields cannot be written: {', '.join(sorted(forbidden))}."
            )
        unknown = set(changes) - RAW_FIELDS
        if unknown:
            raise ValueError(f"Unknown TNM fields: {', '.join(sorted(unknown))}.")
        previous = self._record
        updated = dataclasses.replace(previous, **changes)
        self._record = updated
        logger.debug("TNM record updated (%s).", ", ".join(sorted(changes)))
        self._publish(previous, updated, changes)
        return updated

    def set_invasion(self, site: TumorInvasionSite | str, present: bool = True) -> TnmRecord:
        """Add or remove one invasion site, as a checkbox edit would."""
        site = TumorInvasionSite(site)
        current = set(self._record.invasions)
        if present:
            current.add(site)
        else:
            current.discard(site)
        return self.update(invasions=frozenset(current))

    def set_nodal_level(
        self,
        level: NodalInvolvementLevel | str,
        present: bool = True,
    ) -> TnmRecord:
        """Add or remove one nodal involvement level."""
        level = NodalInvolvementLevel(level)
        current = set(self._record.n_involvement)
        if present:
            current.add(level)
        else:
            current.discard(level)
        return self.update(n_involvement=frozenset(current))

    def restage(self) -> TnmRecord:
        """Re-derive the current record; a no-op on a consistent record."""
        self._record = stage_record(self._record)
        return self._record

    # -- events ------------------------------------------------------------

    def _publish(
        self,
        previous: TnmRecord,
        updated: TnmRecord,
        changes: dict[str, Any],
    ) -> None:
        if self._bus is None:
            return
        payload = {
            "changed_fields": sorted(changes),
            "before": _staging_dict(previous),
            "after": _staging_dict(updated),
        }
        self._bus.publish(TNM_UPDATED, payload)
        if previous.stage is not updated.stage:
            self._bus.publish(STAGE_CHANGED, payload)


def _staging_dict(record: TnmRecord) -> dict[str, str]:
    return {
        "t": record.t.value,
        "n": record.n.value,
        "m": record.m.value,
        "stage": record.stage.value,
    }
