"""Reading and writing the embedded TNM form of a clinical record.

Clinical records arrive in several shapes: the TNM block nested under a
``tnm`` key or given directly, snake_case or camelCase keys, and the flat
``tnm*`` keys of older imports.  Stored derived codes are never trusted;
the record recomputes them from the raw fields.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

import yaml

from lung_tnm_staging.domain.models import TnmRecord

logger = logging.getLogger(__name__)

# Accepted spellings per raw field, in lookup order.
_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "size_cm": ("size_cm", "size", "sizeCm"),
    "invasions": ("invasions",),
    "nodules": ("nodules",),
    "n_involvement": ("n_involvement", "nInvolvement"),
    "is_multiple_n2_stations": (
        "is_multiple_n2_stations",
        "isMultipleN2Stations",
    ),
    "meta_type": ("meta_type", "metaType"),
    "tumor_location": ("tumor_location", "tumorLocation"),
    "tumor_description": ("tumor_description", "tumorDescription"),
}

# Flat keys stored on the clinical record itself by older imports.
_LEGACY_FLAT_KEYS: dict[str, str] = {
    "size_cm": "tnmSize",
    "invasions": "tnmInvasions",
    "nodules": "tnmNodules",
    "n_involvement": "tnmNInvolvement",
    "is_multiple_n2_stations": "isMultipleN2Stations",
    "meta_type": "tnmMetaType",
}


def _lookup(block: Mapping[str, Any], names: tuple[str, ...]) -> Any:
    for name in names:
        value = block.get(name)
        if value not in (None, "", [], ()):
            return value
    return None


def record_from_mapping(raw: Mapping[str, Any]) -> TnmRecord:
    """Build a :class:`TnmRecord` from a clinical-record mapping.

    Parameters
    ----------
    raw:
        Either a clinical record holding a ``tnm`` block (and possibly the
        legacy flat ``tnm*`` keys) or a TNM block on its own.

    Returns
    -------
    TnmRecord
        Record with freshly derived codes.  Missing fields take the
        new-case defaults.

    Raises
    ------
    ValueError
        If an enumerated field holds an identifier outside its vocabulary.
    """
    nested = raw.get("tnm")
    block: Mapping[str, Any] = nested if isinstance(nested, Mapping) else raw

    kwargs: dict[str, Any] = {}
    for field_name, aliases in _FIELD_ALIASES.items():
        value = _lookup(block, aliases)
        if value is None and field_name in _LEGACY_FLAT_KEYS:
            value = _lookup(raw, (_LEGACY_FLAT_KEYS[field_name],))
        if value is not None:
            kwargs[field_name] = value

    record = TnmRecord(**kwargs)
    stored = {k: block[k] for k in ("t", "n", "m", "stage") if block.get(k)}
    derived = {k: getattr(record, k).value for k in stored}
    if stored != derived:
        logger.info(
            "Stored TNM codes %s differ from recomputed %s; using recomputed.",
            stored,
            derived,
        )
    return record


def record_to_dict(record: TnmRecord) -> dict[str, Any]:
    """Return the embedded, persistable form of *record*.

    Sets are emitted as sorted lists and enum members as their string
    values, so the result serialises cleanly to JSON or YAML.
    """
    return {
        "size_cm": record.size_cm,
        "invasions": sorted(site.value for site in record.invasions),
        "nodules": record.nodules.value,
        "n_involvement": sorted(level.value for level in record.n_involvement),
        "is_multiple_n2_stations": record.is_multiple_n2_stations,
        "meta_type": record.meta_type.value,
        "tumor_location": record.tumor_location,
        "tumor_description": record.tumor_description,
        "t": record.t.value,
        "n": record.n.value,
        "m": record.m.value,
        "stage": record.stage.value,
    }


def load_case_file(path: str | Path) -> TnmRecord:
    """Load a YAML or JSON case file and build its record.

    Raises
    ------
    ValueError
        If the document is not a mapping or holds unknown identifiers.
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)
    if not isinstance(raw, Mapping):
        raise ValueError(f"Case file {path} must contain a mapping at the top level.")
    logger.debug("Loaded case file %s", path)
    return record_from_mapping(raw)
