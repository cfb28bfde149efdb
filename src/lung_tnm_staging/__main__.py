"""Command-line entry point for lung TNM staging.

Stage a case from a YAML/JSON file or from individual findings::

    python -m lung_tnm_staging --input case.yaml
    python -m lung_tnm_staging --size 4.5 --node n1
    python -m lung_tnm_staging --size 3.2 --invasion visceral_pleura --format yaml
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

import yaml

from lung_tnm_staging.config import get_typed_config
from lung_tnm_staging.domain.labels import VOCABULARIES, format_summary, label_for
from lung_tnm_staging.domain.models import (
    NODULE_EXTENT_ALIAS,
    MetastasisPattern,
    NodalInvolvementLevel,
    NoduleExtent,
    TnmRecord,
    TumorInvasionSite,
)
from lung_tnm_staging.ingestion.record_loader import load_case_file, record_to_dict

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line argument parser.

    Returns
    -------
    argparse.ArgumentParser
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="lung_tnm_staging",
        description="Derive lung cancer T, N, M categories and stage group.",
    )
    parser.add_argument(
        "--input",
        type=str,
        default=None,
        help="YAML or JSON case file; individual finding flags are ignored.",
    )
    parser.add_argument(
        "--size",
        type=float,
        default=0.0,
        help="Greatest tumor dimension in cm (default: 0, not assessable).",
    )
    parser.add_argument(
        "--invasion",
        action="append",
        default=[],
        choices=[site.value for site in TumorInvasionSite],
        help="Invaded structure; repeat for several.",
    )
    parser.add_argument(
        "--nodules",
        default=NoduleExtent.NONE.value,
        choices=[extent.value for extent in NoduleExtent] + [NODULE_EXTENT_ALIAS],
        help="Separate tumor nodule extent (default: none).",
    )
    parser.add_argument(
        "--node",
        action="append",
        default=[],
        choices=[level.value for level in NodalInvolvementLevel],
        help="Involved nodal level; repeat for several.",
    )
    parser.add_argument(
        "--multiple-n2",
        action="store_true",
        default=False,
        help="N2 disease spans more than one station.",
    )
    parser.add_argument(
        "--meta",
        default=MetastasisPattern.M0.value,
        choices=[pattern.value for pattern in MetastasisPattern],
        help="Distant metastasis pattern (default: m0).",
    )
    parser.add_argument(
        "--format",
        choices=["text", "yaml"],
        default=None,
        help="Output format (default from config: output.format).",
    )
    parser.add_argument(
        "--language",
        choices=["en", "fr"],
        default=None,
        help="Label language (default from config: output.language).",
    )
    parser.add_argument(
        "--list-vocabulary",
        action="store_true",
        default=False,
        help="Print the accepted identifiers with their labels and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable debug logging.",
    )
    return parser


def _configure_logging(debug: bool, level: str, fmt: str, datefmt: str) -> None:
    """Set up root logger; ``--debug`` wins over the configured level."""
    logging.basicConfig(
        level=logging.DEBUG if debug else getattr(logging, str(level).upper(), logging.INFO),
        format=fmt,
        datefmt=datefmt,
    )


def _vocabulary_text(language: str) -> str:
    lines: list[str] = []
    for field_name, enum_cls in VOCABULARIES.items():
        lines.append(f"{field_name}:")
        for member in enum_cls:
            lines.append(f"  {member.value:<28} {label_for(member, language)}")
    return "\n".join(lines)


def _record_from_args(args: argparse.Namespace) -> TnmRecord:
    if args.input:
        return load_case_file(args.input)
    return TnmRecord(
        size_cm=args.size,
        invasions=args.invasion,
        nodules=args.nodules,
        n_involvement=args.node,
        is_multiple_n2_stations=args.multiple_n2,
        meta_type=args.meta,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, stage the case and print the result."""
    parser = build_parser()
    args = parser.parse_args(argv)

    cfg = get_typed_config()
    _configure_logging(
        args.debug,
        cfg.get("logging.level", "INFO"),
        cfg.get("logging.format", "%(asctime)s [%(levelname)s] %(name)s: %(message)s"),
        cfg.get("logging.datefmt", "%Y-%m-%d %H:%M:%S"),
    )
    language = args.language or cfg.get("output.language", "en")
    output_format = args.format or cfg.get("output.format", "text")

    if args.list_vocabulary:
        print(_vocabulary_text(language))
        return 0

    try:
        record = _record_from_args(args)
    except (OSError, ValueError) as exc:
        parser.error(str(exc))

    logger.debug("Staging edition: %s", cfg.get("staging.edition", "9th"))
    if output_format == "yaml":
        sys.stdout.write(
            yaml.safe_dump(record_to_dict(record), sort_keys=False, allow_unicode=True)
        )
    else:
        print(format_summary(record, language))
    return 0


if __name__ == "__main__":
    sys.exit(main())
