"""Domain models for lung cancer TNM staging.

The vocabularies are closed ``str``-valued enumerations so that decision
tables can be checked for exhaustiveness and so that members compare equal
to the plain strings stored in the owning clinical record.

:class:`TnmRecord` is a frozen dataclass.  Its derived fields (``t``, ``n``,
``m``, ``stage``) are not constructor arguments: they are computed while
the record is built, so a record can never disagree with its own inputs.
"""

from __future__ import annotations

import math
from collections import abc
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Iterable

import yaml


# ---------------------------------------------------------------------------
# Input vocabularies
# ---------------------------------------------------------------------------

class TumorInvasionSite(str, Enum):
    """Anatomical structure invaded by the primary tumor."""

    # T2-class
    MAIN_BRONCHUS = "main_bronchus"
    VISCERAL_PLEURA = "visceral_pleura"
    ATELECTASIS = "atelectasis"
    # T3-class
    CHEST_WALL = "chest_wall"
    PHRENIC_NERVE = "phrenic_nerve"
    PARIETAL_PERICARDIUM = "parietal_pericardium"
    # T4-class
    DIAPHRAGM = "diaphragm"
    MEDIASTINUM = "mediastinum"
    HEART_GREAT_VESSELS = "heart_great_vessels"
    TRACHEA_CARINA = "trachea_carina"
    RECURRENT_LARYNGEAL_NERVE = "recurrent_laryngeal_nerve"
    ESOPHAGUS_VERTEBRAL_BODY = "esophagus_vertebral_body"


# Long spelling of ``different_ipsi_lobe`` accepted on input.
NODULE_EXTENT_ALIAS = "different_ipsilateral_lobe"


class NoduleExtent(str, Enum):
    """Location of separate tumor nodules relative to the primary."""

    NONE = "none"
    SAME_LOBE = "same_lobe"
    DIFFERENT_IPSILATERAL_LOBE = "different_ipsi_lobe"

    @classmethod
    def _missing_(cls, value: object) -> NoduleExtent | None:
        if value == NODULE_EXTENT_ALIAS:
            return cls.DIFFERENT_IPSILATERAL_LOBE
        return None


class NodalInvolvementLevel(str, Enum):
    """Regional lymph node level with tumor involvement."""

    N1 = "n1"
    N2 = "n2"
    N3 = "n3"


class MetastasisPattern(str, Enum):
    """Distant metastasis pattern recorded by the clinician."""

    M0 = "m0"
    M1A = "m1a"
    M1B = "m1b"
    M1C1 = "m1c1"
    M1C2 = "m1c2"


# ---------------------------------------------------------------------------
# Output codes
# ---------------------------------------------------------------------------

class TCategory(str, Enum):
    """Primary tumor category."""

    TX = "TX"
    T1A = "T1a"
    T1B = "T1b"
    T1C = "T1c"
    T2A = "T2a"
    T2B = "T2b"
    T3 = "T3"
    T4 = "T4"

    @property
    def rank(self) -> int:
        """Severity rank, ``TX`` lowest and ``T4`` highest."""
        return _T_ORDER.index(self)


_T_ORDER: tuple[TCategory, ...] = tuple(TCategory)


class NCategory(str, Enum):
    """Regional lymph node category."""

    N0 = "N0"
    N1 = "N1"
    N2A = "N2a"
    N2B = "N2b"
    N3 = "N3"


class MCategory(str, Enum):
    """Distant metastasis category."""

    M0 = "M0"
    M1A = "M1a"
    M1B = "M1b"
    M1C1 = "M1c1"
    M1C2 = "M1c2"
    MX = "MX"


class StageGroup(str, Enum):
    """Overall stage group."""

    IA1 = "IA1"
    IA2 = "IA2"
    IA3 = "IA3"
    IB = "IB"
    IIA = "IIA"
    IIB = "IIB"
    IIIA = "IIIA"
    IIIB = "IIIB"
    IIIC = "IIIC"
    IVA = "IVA"
    IVB = "IVB"
    UNKNOWN = "Unknown"


# ---------------------------------------------------------------------------
# Staging result / aggregate
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TnmStaging:
    """The four derived codes, always produced together."""

    t: TCategory = TCategory.TX
    n: NCategory = NCategory.N0
    m: MCategory = MCategory.M0
    stage: StageGroup = StageGroup.UNKNOWN


DERIVED_FIELDS: frozenset[str] = frozenset({"t", "n", "m", "stage"})
RAW_FIELDS: frozenset[str] = frozenset({
    "size_cm",
    "invasions",
    "nodules",
    "n_involvement",
    "is_multiple_n2_stations",
    "meta_type",
    "tumor_location",
    "tumor_description",
})


def clamp_size(value: Any) -> float:
    """Coerce a tumor size to a finite, non-negative float.

    Anything that is not a usable number (``None``, text, NaN, infinity,
    negative values) becomes ``0.0``, the "not assessable" size.
    """
    if isinstance(value, bool):
        return 0.0
    try:
        size = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(size) or size < 0.0:
        return 0.0
    return size


def _coerce_set(values: Iterable[Any] | None, enum_cls: type[Enum]) -> frozenset:
    if values is None:
        return frozenset()
    if isinstance(values, (str, Enum)):
        values = [values]
    elif not isinstance(values, abc.Iterable):
        raise ValueError(f"Expected a collection of {enum_cls.__name__}, got {values!r}.")
    return frozenset(enum_cls(v) for v in values)


_TRUE_WORDS = frozenset({"true", "yes", "1"})
_FALSE_WORDS = frozenset({"false", "no", "0", ""})


def _coerce_flag(value: Any) -> bool:
    """Parse a yes/no flag; text such as ``"false"`` is read, not truth-tested."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise ValueError(f"Expected a yes/no flag, got {value!r}.")


@dataclass(frozen=True)
class TnmRecord:
    """Raw staging inputs together with the codes derived from them.

    Construction validates the enumerated fields: an identifier outside the
    vocabulary raises :class:`ValueError`.  The size is sanitised with
    :func:`clamp_size` and never rejected.

    Example
    -------
    >>> rec = TnmRecord(size_cm=4.5, n_involvement={"n1"})
    >>> [code.value for code in (rec.t, rec.n, rec.m, rec.stage)]
    ['T2b', 'N1', 'M0', 'IIB']
    """

    size_cm: float = 0.0
    invasions: frozenset[TumorInvasionSite] = frozenset()
    nodules: NoduleExtent = NoduleExtent.NONE
    n_involvement: frozenset[NodalInvolvementLevel] = frozenset()
    is_multiple_n2_stations: bool = False
    meta_type: MetastasisPattern = MetastasisPattern.M0
    tumor_location: str = ""
    tumor_description: str = ""

    t: TCategory = field(init=False, default=TCategory.TX)
    n: NCategory = field(init=False, default=NCategory.N0)
    m: MCategory = field(init=False, default=MCategory.M0)
    stage: StageGroup = field(init=False, default=StageGroup.UNKNOWN)

    def __post_init__(self) -> None:
        from lung_tnm_staging.staging.orchestrator import classify

        _set = object.__setattr__
        _set(self, "size_cm", clamp_size(self.size_cm))
        _set(self, "invasions", _coerce_set(self.invasions, TumorInvasionSite))
        _set(self, "nodules", NoduleExtent(self.nodules or NoduleExtent.NONE))
        _set(
            self,
            "n_involvement",
            _coerce_set(self.n_involvement, NodalInvolvementLevel),
        )
        _set(self, "is_multiple_n2_stations", _coerce_flag(self.is_multiple_n2_stations))
        _set(self, "meta_type", MetastasisPattern(self.meta_type or MetastasisPattern.M0))
        _set(self, "tumor_location", str(self.tumor_location or ""))
        _set(self, "tumor_description", str(self.tumor_description or ""))

        staging = classify(
            size_cm=self.size_cm,
            invasions=self.invasions,
            nodules=self.nodules,
            n_involvement=self.n_involvement,
            is_multiple_n2_stations=self.is_multiple_n2_stations,
            meta_type=self.meta_type,
        )
        _set(self, "t", staging.t)
        _set(self, "n", staging.n)
        _set(self, "m", staging.m)
        _set(self, "stage", staging.stage)

    @property
    def staging(self) -> TnmStaging:
        """The derived codes as a single value."""
        return TnmStaging(t=self.t, n=self.n, m=self.m, stage=self.stage)

    def raw_inputs(self) -> dict[str, Any]:
        """Return the constructor arguments that reproduce this record."""
        return {
            "size_cm": self.size_cm,
            "invasions": self.invasions,
            "nodules": self.nodules,
            "n_involvement": self.n_involvement,
            "is_multiple_n2_stations": self.is_multiple_n2_stations,
            "meta_type": self.meta_type,
            "tumor_location": self.tumor_location,
            "tumor_description": self.tumor_description,
        }


# ---------------------------------------------------------------------------
# Infrastructure configuration models
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AppConfig:
    """Application configuration loaded from YAML with environment overlays.

    Configuration is resolved in order:
      1. ``config/default.yaml``
      2. Optional overlay file (path in ``LUNG_TNM_CONFIG``)
      3. Environment variables prefixed with ``LTS_``
    """

    data: dict[str, Any] = field(default_factory=dict)

    # -- factory -----------------------------------------------------------

    @staticmethod
    def load(
        default_path: str | Path = "config/default.yaml",
        overlay_path: str | Path | None = None,
        env_prefix: str = "LTS_",
    ) -> AppConfig:
        """Load configuration from YAML files and environment variables.

        Parameters
        ----------
        default_path:
            Path to the base configuration file.
        overlay_path:
            Optional path to a site-specific overlay.
        env_prefix:
            Prefix for environment variable overrides.  A variable named
            ``LTS_LOGGING__LEVEL`` maps to ``config["logging"]["level"]``.

        Returns
        -------
        AppConfig
            Frozen configuration object exposing the merged dictionary via
            ``data`` and typed helpers.
        """
        import os

        merged: dict[str, Any] = {}

        for path in (default_path, overlay_path):
            if path is None:
                continue
            candidate = Path(path)
            if candidate.exists():
                with open(candidate, "r", encoding="utf-8") as fh:
                    raw = yaml.safe_load(fh) or {}
                merged = _deep_merge(merged, raw)

        for key, value in os.environ.items():
            if key.startswith(env_prefix):
                parts = key[len(env_prefix):].lower().split("__")
                _set_nested(merged, parts, _coerce(value))

        return AppConfig(data=merged)

    # -- typed accessors ---------------------------------------------------

    def get(self, dotted_key: str, default: Any = None) -> Any:
        """Retrieve a value using dot-separated path, e.g. ``output.language``."""
        node: Any = self.data
        for part in dotted_key.split("."):
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge *overlay* into *base* (non-destructive)."""
    merged = dict(base)
    for key, value in overlay.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _set_nested(d: dict[str, Any], parts: list[str], value: Any) -> None:
    """Set a value in a nested dict using a list of keys."""
    for part in parts[:-1]:
        d = d.setdefault(part, {})
    if parts:
        d[parts[-1]] = value


def _coerce(value: str) -> Any:
    """Best-effort coercion from string to bool / int / float / str."""
    if value.lower() in ("true", "yes"):
        return True
    if value.lower() in ("false", "no"):
        return False
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    return value
