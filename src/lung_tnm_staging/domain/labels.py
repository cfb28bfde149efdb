"""Human-readable labels for the staging vocabularies.

Labels are kept apart from the enumerations so that the decision tables
only ever see closed codes.  English and French tables are provided; any
other language falls back to English.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from lung_tnm_staging.domain.models import (
    MetastasisPattern,
    NodalInvolvementLevel,
    NoduleExtent,
    StageGroup,
    TumorInvasionSite,
)

if TYPE_CHECKING:
    from lung_tnm_staging.domain.models import TnmRecord

DEFAULT_LANGUAGE = "en"

_LABELS: dict[str, dict[Enum, str]] = {
    "en": {
        TumorInvasionSite.MAIN_BRONCHUS: "Invasion of a main bronchus",
        TumorInvasionSite.VISCERAL_PLEURA: "Visceral pleura invasion",
        TumorInvasionSite.ATELECTASIS: "Atelectasis or obstructive pneumonitis",
        TumorInvasionSite.CHEST_WALL: "Chest wall (including superior sulcus tumor)",
        TumorInvasionSite.PHRENIC_NERVE: "Phrenic nerve",
        TumorInvasionSite.PARIETAL_PERICARDIUM: "Parietal pericardium",
        TumorInvasionSite.DIAPHRAGM: "Diaphragm",
        TumorInvasionSite.MEDIASTINUM: "Mediastinum",
        TumorInvasionSite.HEART_GREAT_VESSELS: "Heart or great vessels",
        TumorInvasionSite.TRACHEA_CARINA: "Trachea or carina",
        TumorInvasionSite.RECURRENT_LARYNGEAL_NERVE: "Recurrent laryngeal nerve",
        TumorInvasionSite.ESOPHAGUS_VERTEBRAL_BODY: "Esophagus or vertebral body",
        NoduleExtent.NONE: "None",
        NoduleExtent.SAME_LOBE: "Separate tumor nodule(s) in the same lobe",
        NoduleExtent.DIFFERENT_IPSILATERAL_LOBE: "Nodule(s) in a different ipsilateral lobe",
        NodalInvolvementLevel.N1: "N1: ipsilateral peribronchial / hilar nodes",
        NodalInvolvementLevel.N2: "N2: ipsilateral mediastinal / subcarinal nodes",
        NodalInvolvementLevel.N3: "N3: contralateral / supraclavicular / scalene nodes",
        MetastasisPattern.M0: "M0: no distant metastasis",
        MetastasisPattern.M1A: (
            "M1a: contralateral nodule, pleural/pericardial nodules, "
            "or malignant effusion"
        ),
        MetastasisPattern.M1B: "M1b: single extrathoracic metastasis in a single organ",
        MetastasisPattern.M1C1: "M1c1: multiple extrathoracic metastases in a single organ",
        MetastasisPattern.M1C2: "M1c2: multiple extrathoracic metastases in multiple organs",
        StageGroup.UNKNOWN: "Unknown",
    },
    "fr": {
        TumorInvasionSite.MAIN_BRONCHUS: "Envahissement d'une bronche souche",
        TumorInvasionSite.VISCERAL_PLEURA: "Envahissement de la plèvre viscérale",
        TumorInvasionSite.ATELECTASIS: "Atélectasie ou pneumonie obstructive",
        TumorInvasionSite.CHEST_WALL: "Paroi thoracique (incluant tumeur du sommet)",
        TumorInvasionSite.PHRENIC_NERVE: "Nerf phrénique",
        TumorInvasionSite.PARIETAL_PERICARDIUM: "Péricarde pariétal",
        TumorInvasionSite.DIAPHRAGM: "Diaphragme",
        TumorInvasionSite.MEDIASTINUM: "Médiastin",
        TumorInvasionSite.HEART_GREAT_VESSELS: "Cœur ou gros vaisseaux",
        TumorInvasionSite.TRACHEA_CARINA: "Trachée ou carène",
        TumorInvasionSite.RECURRENT_LARYNGEAL_NERVE: "Nerf récurrent",
        TumorInvasionSite.ESOPHAGUS_VERTEBRAL_BODY: "Œsophage ou corps vertébral",
        NoduleExtent.NONE: "Aucun",
        NoduleExtent.SAME_LOBE: "Nodule(s) tumoral(aux) distinct(s) dans le même lobe",
        NoduleExtent.DIFFERENT_IPSILATERAL_LOBE: "Nodule(s) dans un lobe homolatéral différent",
        NodalInvolvementLevel.N1: "Atteinte N1 : Ggl péri-bronchiques / hilaires homolatéraux",
        NodalInvolvementLevel.N2: "Atteinte N2 : Ggl médiastinaux homolatéraux / sous-carénaires",
        NodalInvolvementLevel.N3: "Atteinte N3 : Ggl controlatéraux / sus-claviculaires / scalènes",
        MetastasisPattern.M0: "M0 : Pas de métastase à distance",
        MetastasisPattern.M1A: (
            "M1a : Nodule controlatéral, nodules pleuraux/péricardiques, "
            "ou épanchement malin"
        ),
        MetastasisPattern.M1B: "M1b : Une seule métastase extra-thoracique dans un seul organe",
        MetastasisPattern.M1C1: "M1c1 : Plusieurs métastases extra-thoraciques dans un seul organe",
        MetastasisPattern.M1C2: (
            "M1c2 : Plusieurs métastases extra-thoraciques dans plusieurs organes"
        ),
        StageGroup.UNKNOWN: "Inconnu",
    },
}

VOCABULARIES: dict[str, type[Enum]] = {
    "invasions": TumorInvasionSite,
    "nodules": NoduleExtent,
    "n_involvement": NodalInvolvementLevel,
    "meta_type": MetastasisPattern,
}

_STAGE_FAMILIES: dict[StageGroup, str] = {
    StageGroup.IA1: "I",
    StageGroup.IA2: "I",
    StageGroup.IA3: "I",
    StageGroup.IB: "I",
    StageGroup.IIA: "II",
    StageGroup.IIB: "II",
    StageGroup.IIIA: "III",
    StageGroup.IIIB: "III",
    StageGroup.IIIC: "III",
    StageGroup.IVA: "IV",
    StageGroup.IVB: "IV",
}


def label_for(value: Enum | str, language: str = DEFAULT_LANGUAGE) -> str:
    """Return the display label of *value*.

    A plain string is matched against the labelled values.  Anything
    without a dedicated label (T/N/M categories, stage groups other than
    ``Unknown``, unrecognised text) is displayed as its own code.
    """
    table = _LABELS.get(language, _LABELS[DEFAULT_LANGUAGE])
    if not isinstance(value, Enum):
        value = next((key for key in table if key.value == value), value)
    return table.get(value, str(getattr(value, "value", value)))


def stage_family(stage: StageGroup | str) -> str | None:
    """Map a stage group to its roman-numeral family (``"I"`` .. ``"IV"``).

    Returns ``None`` for ``Unknown`` or anything outside the vocabulary.
    """
    try:
        return _STAGE_FAMILIES.get(StageGroup(stage))
    except ValueError:
        return None


def format_summary(record: TnmRecord, language: str = DEFAULT_LANGUAGE) -> str:
    """Render ``"IIB (T2b N1 M0)"`` for *record*."""
    return (
        f"{label_for(record.stage, language)} "
        f"({record.t.value} {record.n.value} {record.m.value})"
    )
