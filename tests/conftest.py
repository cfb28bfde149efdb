"""Shared pytest fixtures for the lung TNM staging test suite."""

from __future__ import annotations

import pytest

from lung_tnm_staging.domain.events import EventBus
from lung_tnm_staging.domain.models import TnmRecord
from lung_tnm_staging.staging.orchestrator import TnmClassifier


# ---------------------------------------------------------------------------
# Record fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def blank_record() -> TnmRecord:
    """A freshly opened case: every raw field at its default."""
    return TnmRecord()


@pytest.fixture()
def reference_record() -> TnmRecord:
    """4.5 cm tumor, no invasion, no nodules, N1, M0 (T2b N1 M0, IIB)."""
    return TnmRecord(
        size_cm=4.5,
        n_involvement={"n1"},
        tumor_location="Right upper lobe",
        tumor_description="Spiculated mass without parietal contact.",
    )


# ---------------------------------------------------------------------------
# Classifier fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def bus() -> EventBus:
    return EventBus()


@pytest.fixture()
def classifier(bus) -> TnmClassifier:
    """A classifier on a blank case wired to an event bus."""
    return TnmClassifier(bus=bus)
