"""Structural interfaces for the staging steps.

Each stager is a plain function; these protocols describe the callable
shape an alternative implementation must have to be swapped in.  Using
:class:`typing.Protocol` keeps the check structural, so the functions in
:mod:`lung_tnm_staging.staging` satisfy them without inheriting anything.
"""

from __future__ import annotations

from typing import Any, Iterable, Protocol, runtime_checkable

from lung_tnm_staging.domain.models import (
    MCategory,
    NCategory,
    StageGroup,
    TCategory,
)


@runtime_checkable
class TStagerProtocol(Protocol):
    """Derive the primary tumor category from size, invasions and nodules."""

    def __call__(
        self,
        size_cm: Any,
        invasions: Iterable[Any] = (),
        nodules: Any = ...,
    ) -> TCategory:
        ...


@runtime_checkable
class NStagerProtocol(Protocol):
    """Derive the regional node category from the involved levels."""

    def __call__(
        self,
        involvement: Iterable[Any] = (),
        is_multiple_n2_stations: bool = False,
    ) -> NCategory:
        ...


@runtime_checkable
class MStagerProtocol(Protocol):
    """Map a metastasis pattern to its M category."""

    def __call__(self, pattern: Any) -> MCategory:
        ...


@runtime_checkable
class StageResolverProtocol(Protocol):
    """Combine T, N and M into an overall stage group."""

    def __call__(self, t: Any, n: Any, m: Any) -> StageGroup:
        ...
