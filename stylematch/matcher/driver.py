"""Per-selector substitution search and the program-level driver."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..ast import (
    AppKind,
    FactProgram,
    Header,
    HeaderBlock,
    Namespace,
    RelBind,
    RelPred,
    RelationPattern,
    SEApp,
    SEBind,
    SelExpr,
    Selector,
    StyleProgram,
    UnknownVariantError,
    VarEnv,
    unknown_variant,
)
from ..logging_utils import apply_debug_logging
from ..printer import format_rel
from .config import get_match_options
from .declarations import match_decls
from .environment import undeclared_rel_vars
from .model import MatchOptions, ProgramMatch, SelEnv, SelectorDiagnostic, StructuralError, Substitution
from .relations import filter_rels
from .substitution import full_subst, unique_keys_and_vals

logger = logging.getLogger(__name__)


def _unresolved_apps(expr: SelExpr) -> List[str]:
    if isinstance(expr, SEBind):
        return []
    if isinstance(expr, SEApp):
        found = [expr.name] if expr.kind is AppKind.UNRESOLVED else []
        for arg in expr.args:
            found.extend(_unresolved_apps(arg))
        return found
    unknown_variant(expr, 'selector expression')


def check_relation(sel_env: SelEnv, rel: RelationPattern) -> None:
    """Raise :class:`StructuralError` if ``rel`` cannot be matched by construction."""

    missing = undeclared_rel_vars(sel_env, rel)
    if missing:
        raise StructuralError(
            f"pattern variable(s) {', '.join(missing)} used but never declared", rel=rel
        )
    if isinstance(rel, RelBind):
        unresolved = _unresolved_apps(rel.expr)
        if unresolved:
            raise StructuralError(
                f"application(s) {', '.join(unresolved)} not resolved to function or constructor",
                rel=rel,
            )
    elif not isinstance(rel, RelPred):
        unknown_variant(rel, 'relational constraint')


def find_substs_sel(
    var_env: VarEnv,
    facts: FactProgram,
    header: Header,
    sel_env: SelEnv,
    options: MatchOptions,
) -> List[Substitution]:
    """Return the accepted substitutions for one selector."""

    if isinstance(header, Namespace):
        return []
    if not isinstance(header, Selector):
        unknown_variant(header, 'style header')

    for rel in header.where:
        check_relation(sel_env, rel)

    raw = match_decls(var_env, facts, header.decls, options)
    candidates = [subst for subst in raw if full_subst(sel_env, subst)]
    filtered = filter_rels(var_env, facts, header.where, candidates, options)
    accepted = [subst for subst in filtered if unique_keys_and_vals(subst)]
    logger.debug(
        "Selector candidates: raw=%d full=%d related=%d accepted=%d",
        len(raw),
        len(candidates),
        len(filtered),
        len(accepted),
    )
    return accepted


def _diagnostic(index: int, block: HeaderBlock, exc: Exception) -> SelectorDiagnostic:
    rel = getattr(exc, 'rel', None)
    constraint = None
    if rel is not None:
        try:
            constraint = format_rel(rel)
        except (UnknownVariantError, ValueError):
            constraint = repr(rel)
    return SelectorDiagnostic(
        index=index,
        message=str(exc),
        constraint=constraint,
        line=block.span.line,
        col=block.span.col,
    )


def find_substs_prog(
    var_env: VarEnv,
    facts: FactProgram,
    style: StyleProgram,
    sel_envs: Sequence[SelEnv],
    options: Optional[MatchOptions] = None,
) -> ProgramMatch:
    """Find the substitutions of every selector, in block order.

    A structural violation in one selector is recorded as a diagnostic and
    leaves that selector with no substitutions; the others still run.
    """

    if len(sel_envs) != len(style.blocks):
        raise ValueError(
            f"expected one selector environment per block, got {len(sel_envs)} for {len(style.blocks)}"
        )
    if options is None:
        options = get_match_options()

    result = ProgramMatch()
    for index, (block, sel_env) in enumerate(zip(style.blocks, sel_envs)):
        try:
            substs = find_substs_sel(var_env, facts, block.header, sel_env, options)
        except (StructuralError, UnknownVariantError) as exc:
            diag = _diagnostic(index, block, exc)
            logger.warning("Structural error: %s", diag)
            result.diagnostics.append(diag)
            substs = []
        result.substitutions.append(substs)
    return result


apply_debug_logging(globals(), logger=logger)
