"""Tests for the staging pipeline, the record invariant and the classifier."""

from __future__ import annotations

import dataclasses

import pytest

from lung_tnm_staging.domain.events import STAGE_CHANGED, TNM_UPDATED
from lung_tnm_staging.domain.models import (
    MCategory,
    NCategory,
    NoduleExtent,
    StageGroup,
    TCategory,
    TnmRecord,
    TnmStaging,
    TumorInvasionSite,
)
from lung_tnm_staging.staging.orchestrator import (
    TnmClassifier,
    classify,
    stage_record,
)


# =====================================================================
# classify
# =====================================================================


class TestClassify:
    """The pure pipeline: T, N, M independently, then the stage group."""

    def test_reference_case(self):
        staging = classify(size_cm=4.5, n_involvement={"n1"}, meta_type="m0")
        assert staging == TnmStaging(
            t=TCategory.T2B,
            n=NCategory.N1,
            m=MCategory.M0,
            stage=StageGroup.IIB,
        )

    def test_defaults(self):
        assert classify() == TnmStaging(
            t=TCategory.TX, n=NCategory.N0, m=MCategory.M0, stage=StageGroup.UNKNOWN,
        )

    def test_never_raises_on_garbage(self):
        staging = classify(
            size_cm="large",
            invasions=[object()],
            nodules=3.5,
            n_involvement=17,
            is_multiple_n2_stations="yes",
            meta_type={"m": 1},
        )
        assert staging.t is TCategory.TX
        assert staging.n is NCategory.N0
        assert staging.m is MCategory.MX
        assert staging.stage is StageGroup.UNKNOWN

    def test_metastatic_case(self):
        staging = classify(size_cm=2.2, invasions=["chest_wall"], meta_type="m1c2")
        assert staging.t is TCategory.T3
        assert staging.stage is StageGroup.IVB


# =====================================================================
# TnmRecord invariant
# =====================================================================


class TestTnmRecord:
    """Derived codes are a pure function of the raw fields."""

    def test_blank_defaults(self, blank_record):
        assert blank_record.size_cm == 0.0
        assert blank_record.invasions == frozenset()
        assert blank_record.nodules is NoduleExtent.NONE
        assert blank_record.n_involvement == frozenset()
        assert blank_record.is_multiple_n2_stations is False
        assert blank_record.t is TCategory.TX
        assert blank_record.n is NCategory.N0
        assert blank_record.m is MCategory.M0
        assert blank_record.stage is StageGroup.UNKNOWN

    def test_reference_record(self, reference_record):
        assert reference_record.t == "T2b"
        assert reference_record.n == "N1"
        assert reference_record.m == "M0"
        assert reference_record.stage == "IIB"

    def test_derived_fields_not_constructor_arguments(self):
        with pytest.raises(TypeError):
            TnmRecord(size_cm=1.0, stage="IA1")

    def test_frozen(self, reference_record):
        with pytest.raises(dataclasses.FrozenInstanceError):
            reference_record.stage = StageGroup.IVB
        with pytest.raises(dataclasses.FrozenInstanceError):
            reference_record.size_cm = 9.0

    def test_strings_coerced_to_enums(self):
        rec = TnmRecord(
            size_cm="3.5",
            invasions=["chest_wall"],
            nodules="same_lobe",
            n_involvement=("n2",),
            is_multiple_n2_stations=1,
            meta_type="m1a",
        )
        assert rec.size_cm == 3.5
        assert rec.invasions == frozenset({TumorInvasionSite.CHEST_WALL})
        assert rec.nodules is NoduleExtent.SAME_LOBE
        assert rec.is_multiple_n2_stations is True
        assert rec.stage is StageGroup.IVA

    @pytest.mark.parametrize("size", [-3.0, None, "n/a", float("nan")])
    def test_invalid_size_clamped(self, size):
        rec = TnmRecord(size_cm=size)
        assert rec.size_cm == 0.0
        assert rec.t is TCategory.TX

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"invasions": ["spleen"]},
            {"nodules": "contralateral"},
            {"n_involvement": ["n4"]},
            {"meta_type": "m1c"},
            {"invasions": 5},
        ],
    )
    def test_unknown_identifiers_rejected(self, kwargs):
        with pytest.raises(ValueError):
            TnmRecord(size_cm=2.0, **kwargs)

    def test_equal_inputs_equal_records(self):
        a = TnmRecord(size_cm=2.0, invasions=["diaphragm", "mediastinum"])
        b = TnmRecord(size_cm=2.0, invasions=["mediastinum", "diaphragm"])
        assert a == b
        assert hash(a) == hash(b)


# =====================================================================
# stage_record
# =====================================================================


class TestStageRecord:
    """Re-deriving a record is idempotent."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {},
            {"size_cm": 4.5, "n_involvement": {"n1"}},
            {"size_cm": 8.0, "n_involvement": {"n3"}, "meta_type": "m0"},
            {"size_cm": 1.2, "invasions": {"visceral_pleura"}, "meta_type": "m1b"},
            {"size_cm": 2.9, "n_involvement": {"n2"}, "is_multiple_n2_stations": True},
        ],
    )
    def test_fixed_point(self, kwargs):
        once = stage_record(TnmRecord(**kwargs))
        twice = stage_record(once)
        assert twice == once
        assert once == TnmRecord(**kwargs)

    def test_descriptive_fields_preserved(self, reference_record):
        again = stage_record(reference_record)
        assert again.tumor_location == "Right upper lobe"
        assert again == reference_record


# =====================================================================
# TnmClassifier
# =====================================================================


class TestTnmClassifier:
    """Mutations replace the whole record and publish events."""

    def test_starts_blank(self, classifier):
        assert classifier.record == TnmRecord()

    def test_update_recomputes(self, classifier):
        rec = classifier.update(size_cm=4.5, n_involvement={"n1"})
        assert rec is classifier.record
        assert (rec.t, rec.n, rec.m, rec.stage) == ("T2b", "N1", "M0", "IIB")

    def test_each_mutation_consistent(self, classifier):
        steps = [
            {"size_cm": 2.5},
            {"invasions": {"visceral_pleura"}},
            {"n_involvement": {"n2"}},
            {"is_multiple_n2_stations": True},
            {"meta_type": "m1a"},
            {"meta_type": "m0"},
            {"nodules": "different_ipsi_lobe"},
        ]
        for change in steps:
            rec = classifier.update(**change)
            assert rec.staging == classify(**{
                k: v for k, v in rec.raw_inputs().items()
                if k not in ("tumor_location", "tumor_description")
            })
        assert classifier.record.stage is StageGroup.IIIB

    @pytest.mark.parametrize("field", ["t", "n", "m", "stage"])
    def test_derived_field_write_rejected(self, classifier, field):
        before = classifier.record
        with pytest.raises(ValueError):
            classifier.update(**{field: "IVB"})
        assert classifier.record is before

    def test_unknown_field_rejected(self, classifier):
        before = classifier.record
        with pytest.raises(ValueError):
            classifier.update(size=3.0)
        assert classifier.record is before

    def test_invalid_identifier_leaves_record(self, classifier):
        classifier.update(size_cm=3.5)
        before = classifier.record
        with pytest.raises(ValueError):
            classifier.update(size_cm=6.0, meta_type="m2")
        assert classifier.record is before
        assert classifier.record.size_cm == 3.5

    def test_set_invasion_toggles(self, classifier):
        classifier.update(size_cm=1.5)
        rec = classifier.set_invasion("chest_wall")
        assert rec.t is TCategory.T3
        rec = classifier.set_invasion(TumorInvasionSite.CHEST_WALL, present=False)
        assert rec.t is TCategory.T1B
        assert rec.invasions == frozenset()

    def test_set_invasion_unknown_site(self, classifier):
        with pytest.raises(ValueError):
            classifier.set_invasion("spleen")

    def test_set_nodal_level(self, classifier):
        classifier.update(size_cm=1.5)
        classifier.set_nodal_level("n1")
        rec = classifier.set_nodal_level("n3")
        assert rec.n is NCategory.N3
        rec = classifier.set_nodal_level("n3", present=False)
        assert rec.n is NCategory.N1

    def test_multiplicity_flag_kept_without_n2(self, classifier):
        classifier.update(size_cm=2.0, is_multiple_n2_stations=True)
        assert classifier.record.n is NCategory.N0
        rec = classifier.set_nodal_level("n2")
        assert rec.n is NCategory.N2B

    def test_restage_is_noop(self, classifier):
        classifier.update(size_cm=6.0, n_involvement={"n1"})
        before = classifier.record
        assert classifier.restage() == before
        assert classifier.restage() == before

    def test_initial_record(self, reference_record):
        clf = TnmClassifier(record=reference_record)
        assert clf.record is reference_record


# =====================================================================
# Events
# =====================================================================


class TestClassifierEvents:
    """tnm.updated always; tnm.stage_changed only when the stage moves."""

    def test_updated_published(self, classifier, bus):
        received = []
        bus.subscribe(TNM_UPDATED, received.append)
        classifier.update(size_cm=4.5, n_involvement={"n1"})
        assert len(received) == 1
        payload = received[0].payload
        assert payload["changed_fields"] == ["n_involvement", "size_cm"]
        assert payload["before"]["stage"] == "Unknown"
        assert payload["after"] == {"t": "T2b", "n": "N1", "m": "M0", "stage": "IIB"}

    def test_stage_changed_only_on_change(self, classifier, bus):
        changes = []
        bus.subscribe(STAGE_CHANGED, changes.append)
        classifier.update(size_cm=1.5)
        classifier.update(size_cm=1.8)
        classifier.update(tumor_location="Left lower lobe")
        assert len(changes) == 1
        assert changes[0].payload["after"]["stage"] == "IA2"

    def test_handler_sees_new_record(self, classifier, bus):
        seen = []
        bus.subscribe(TNM_UPDATED, lambda event: seen.append(classifier.record.stage))
        classifier.update(size_cm=0.5)
        assert seen == [StageGroup.IA1]

    def test_no_event_on_rejected_update(self, classifier, bus):
        received = []
        bus.subscribe(TNM_UPDATED, received.append)
        with pytest.raises(ValueError):
            classifier.update(nodules="elsewhere")
        assert received == []

    def test_no_bus(self):
        clf = TnmClassifier()
        assert clf.update(size_cm=2.0).stage is StageGroup.IA2
