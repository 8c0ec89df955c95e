import argparse
import logging
import sys
from typing import List, Optional, Sequence

from stylematch import (
    check_selectors,
    format_header,
    format_subst,
    load_facts,
    load_json,
    load_style,
    load_vocabulary,
    LoadError,
    match_style,
    SelectorWarning,
    StyleMatchError,
    validate,
    ValidationError,
)
from stylematch.matcher import MatchOptions, exact_type_match, subtype_match

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Match style selectors against a fact program")
    parser.add_argument("vocabulary", help="Path to the vocabulary JSON document")
    parser.add_argument("facts", help="Path to the fact program JSON document")
    parser.add_argument("style", help="Path to the style program JSON document")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--no-prefilter",
        action="store_true",
        help="Disable the statement pre-filter of the relational stage",
    )
    parser.add_argument(
        "--subtypes",
        action="store_true",
        help="Match declared types through the vocabulary's subtype table",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only validate and report selector warnings",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    try:
        var_env = load_vocabulary(load_json(args.vocabulary))
        facts = load_facts(load_json(args.facts))
        style = load_style(load_json(args.style))
        validate(style, facts, var_env)
    except (LoadError, ValidationError) as exc:
        logger.error("%s", exc)
        raise SystemExit(1)
    logger.info("Validation succeeded")

    warnings: List[SelectorWarning] = check_selectors(var_env, style, facts)
    for warning in warnings:
        logger.warning("Selector warning: %s", warning)

    if args.check:
        print("Warnings:")
        if warnings:
            for warning in warnings:
                print(f"  - {warning}")
        else:
            print("  (none)")
        return

    options = MatchOptions(
        type_matcher=subtype_match if args.subtypes else exact_type_match,
        prefilter=not args.no_prefilter,
    )
    try:
        substitutions = match_style(var_env, facts, style, options)
    except StyleMatchError as exc:
        logger.error("%s", exc)
        raise SystemExit(1)

    for idx, (block, substs) in enumerate(zip(style.blocks, substitutions)):
        print(f"[{idx}] {format_header(block.header)}")
        if not substs:
            print("  (no matches)")
        for subst in substs:
            print(f"  {format_subst(subst)}")


if __name__ == "__main__":
    main(sys.argv[1:])
