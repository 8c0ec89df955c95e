"""Matching declared patterns against fact-program declarations.

Each declared pattern yields a list of single-entry substitutions; the
selector's candidates are the cartesian merge of those lists, folded from
``[{}]``.  The merge concatenates bindings and never checks for conflicts,
so the candidate count is the product of the per-pattern counts.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from ..ast import (
    ApplyPred,
    Bind,
    Decl,
    DeclPattern,
    FactProgram,
    FactStmt,
    StyVar,
    SubVar,
    TypeRef,
    VarEnv,
    unknown_variant,
)
from .model import EMPTY_SUBST, MatchOptions, Substitution, Var

logger = logging.getLogger(__name__)


def types_match(
    var_env: VarEnv, fact_type: TypeRef, style_type: TypeRef, options: MatchOptions
) -> bool:
    if fact_type.name not in options.setting.types:
        return False
    return options.type_matcher(var_env, fact_type, style_type)


def match_bvar(sub_var: Var, decl: DeclPattern) -> Optional[Substitution]:
    bform = decl.bform
    if isinstance(bform, StyVar):
        return Substitution(((bform.name, sub_var),))
    if isinstance(bform, SubVar):
        # an empty substitution is a match, ``None`` is not
        return EMPTY_SUBST if bform.name == sub_var else None
    unknown_variant(bform, 'binding form')


def match_decl_line(
    var_env: VarEnv, stmt: FactStmt, decl: DeclPattern, options: MatchOptions
) -> Optional[Substitution]:
    """Match one fact statement against one declared pattern."""

    if isinstance(stmt, (Bind, ApplyPred)):
        return None
    if not isinstance(stmt, Decl):
        unknown_variant(stmt, 'fact statement')
    if not types_match(var_env, stmt.type, decl.type, options):
        return None
    return match_bvar(stmt.name, decl)


def combine(left: Substitution, right: Substitution) -> Substitution:
    return left.combine(right)


def merge(left: Sequence[Substitution], right: Sequence[Substitution]) -> List[Substitution]:
    """Cartesian merge of two candidate lists."""

    return [combine(a, b) for a in left for b in right]


def decl_candidates(
    var_env: VarEnv, facts: FactProgram, decl: DeclPattern, options: MatchOptions
) -> List[Substitution]:
    matched = (match_decl_line(var_env, stmt, decl, options) for stmt in facts.stmts)
    return [subst for subst in matched if subst is not None]


def match_decl(
    var_env: VarEnv,
    facts: FactProgram,
    substs: Sequence[Substitution],
    decl: DeclPattern,
    options: MatchOptions,
) -> List[Substitution]:
    return merge(substs, decl_candidates(var_env, facts, decl, options))


def match_decls(
    var_env: VarEnv,
    facts: FactProgram,
    decls: Iterable[DeclPattern],
    options: MatchOptions,
) -> List[Substitution]:
    """Fold every declared pattern into the running candidate list."""

    substs: List[Substitution] = [EMPTY_SUBST]
    warned = False
    for decl in decls:
        substs = match_decl(var_env, facts, substs, decl, options)
        if not substs:
            break
        if not warned and len(substs) > options.warn_candidates:
            logger.warning(
                "Declaration merge produced %d candidates (threshold %d)",
                len(substs),
                options.warn_candidates,
            )
            warned = True
    return substs
