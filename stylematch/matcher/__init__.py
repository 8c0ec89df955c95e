"""Selector matching façade: environments, substitution search, diagnostics."""

from __future__ import annotations

import logging
from typing import List, Optional

from ..ast import FactProgram, StyleProgram, VarEnv
from .config import get_match_options, set_match_options
from .declarations import match_decl, match_decl_line, match_decls, merge, types_match
from .driver import check_relation, find_substs_prog, find_substs_sel
from .environment import build_selector_env, build_selector_envs
from .model import (
    ALL,
    EMPTY_SUBST,
    MatchOptions,
    MatchSetting,
    ProgType,
    ProgramMatch,
    SelEnv,
    SelectorDiagnostic,
    StructuralError,
    StyleMatchError,
    Substitution,
    exact_type_match,
    subtype_match,
)
from .relations import all_rels_match, could_match_rels, filter_rels, rel_matches_prog
from .substitution import full_subst, substitute_rel, substitute_rels, unique_keys_and_vals

logger = logging.getLogger(__name__)


def match_style(
    var_env: VarEnv,
    facts: FactProgram,
    style: StyleProgram,
    options: Optional[MatchOptions] = None,
) -> List[List[Substitution]]:
    """Return the accepted substitutions of every block of ``style``.

    Raises :class:`StyleMatchError` listing every selector that hit a
    structural violation; ordinary non-matches only shrink the result.
    """

    logger.info(
        "Matching %d style block(s) against %d fact statement(s)",
        len(style.blocks),
        len(facts.stmts),
    )
    sel_envs = build_selector_envs(var_env, style)
    result = find_substs_prog(var_env, facts, style, sel_envs, options)
    if not result.ok:
        raise StyleMatchError(result.diagnostics)
    logger.info(
        "Matched %d selector(s), %d substitution(s) in total",
        sum(1 for substs in result.substitutions if substs),
        sum(len(substs) for substs in result.substitutions),
    )
    return result.substitutions


__all__ = [
    "ALL",
    "EMPTY_SUBST",
    "MatchOptions",
    "MatchSetting",
    "ProgType",
    "ProgramMatch",
    "SelEnv",
    "SelectorDiagnostic",
    "StructuralError",
    "StyleMatchError",
    "Substitution",
    "all_rels_match",
    "build_selector_env",
    "build_selector_envs",
    "check_relation",
    "could_match_rels",
    "exact_type_match",
    "filter_rels",
    "find_substs_prog",
    "find_substs_sel",
    "full_subst",
    "get_match_options",
    "match_decl",
    "match_decl_line",
    "match_decls",
    "match_style",
    "merge",
    "rel_matches_prog",
    "set_match_options",
    "substitute_rel",
    "substitute_rels",
    "subtype_match",
    "types_match",
    "unique_keys_and_vals",
]
