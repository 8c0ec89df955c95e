"""Relational filtering of candidate substitutions.

A constraint holds when some statement of the fact program matches it once
the substitution has been applied; a selector's constraints hold when every
one of them does.  Bind constraints are compared against ``Bind`` statements
and predicate constraints against ``ApplyPred`` statements, nothing else.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from ..ast import (
    AppKind,
    ApplyCons,
    ApplyFunc,
    ApplyPred,
    Bind,
    BindingForm,
    Decl,
    FactExpr,
    FactProgram,
    FactStmt,
    Predicate,
    PredArg,
    PredExpr,
    PredNested,
    RelBind,
    RelPred,
    RelPredArg,
    RelationPattern,
    SEApp,
    SEBind,
    SelExpr,
    StyVar,
    SubVar,
    VarE,
    VarEnv,
    unknown_variant,
)
from .model import MatchOptions, MatchSetting, StructuralError, Substitution, Var
from .substitution import substitute_rels

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Conversion of substituted constraints into fact-side trees


def to_sub_var(bform: BindingForm) -> Var:
    if isinstance(bform, SubVar):
        return bform.name
    if isinstance(bform, StyVar):
        raise StructuralError(
            f"pattern variable '{bform.name}' left in a constraint after substitution"
        )
    unknown_variant(bform, 'binding form')


def to_sub_expr(expr: SelExpr) -> FactExpr:
    if isinstance(expr, SEBind):
        return VarE(to_sub_var(expr.bform))
    if isinstance(expr, SEApp):
        args = tuple(to_sub_expr(arg) for arg in expr.args)
        if expr.kind is AppKind.FUNC:
            return ApplyFunc(expr.name, args)
        if expr.kind is AppKind.CONS:
            return ApplyCons(expr.name, args)
        if expr.kind is AppKind.UNRESOLVED:
            raise StructuralError(
                f"application '{expr.name}' was not resolved to a function or constructor"
            )
        unknown_variant(expr.kind, 'application kind')
    unknown_variant(expr, 'selector expression')


def to_sub_pred_arg(arg: RelPredArg) -> PredArg:
    if isinstance(arg, SEBind):
        return PredExpr(VarE(to_sub_var(arg.bform)))
    if isinstance(arg, RelPred):
        return PredNested(to_sub_pred(arg))
    unknown_variant(arg, 'predicate argument')


def to_sub_pred(rel: RelPred) -> Predicate:
    return Predicate(rel.name, tuple(to_sub_pred_arg(arg) for arg in rel.args))


# ----------------------------------------------------------------------
# Matching


def exprs_match_cons(var_env: VarEnv, fact_expr: ApplyCons, sel_expr: ApplyCons) -> bool:
    # applications of the same constructor are equal whatever their arguments
    return fact_expr.name == sel_expr.name


def exprs_match(var_env: VarEnv, fact_expr: FactExpr, sel_expr: FactExpr) -> bool:
    """Match a fact expression against an already-substituted selector expression.

    Constructor applications are plain data and go through
    :func:`exprs_match_cons`; function applications only match when they are
    the very same call.
    """

    if isinstance(fact_expr, VarE) and isinstance(sel_expr, VarE):
        return fact_expr.name == sel_expr.name
    if isinstance(fact_expr, ApplyFunc) and isinstance(sel_expr, ApplyFunc):
        return fact_expr == sel_expr
    if isinstance(fact_expr, ApplyCons) and isinstance(sel_expr, ApplyCons):
        return exprs_match_cons(var_env, fact_expr, sel_expr)
    return False


def _bind_matches(var_env: VarEnv, stmt: FactStmt, name: Var, expr: FactExpr) -> bool:
    return isinstance(stmt, Bind) and stmt.name == name and exprs_match(var_env, stmt.expr, expr)


def _pred_matches(stmt: FactStmt, pred: Predicate) -> bool:
    return isinstance(stmt, ApplyPred) and stmt.pred == pred


def rel_matches_stmt(var_env: VarEnv, stmt: FactStmt, rel: RelationPattern) -> bool:
    return rel_matches_prog(var_env, (stmt,), rel)


def rel_matches_prog(var_env: VarEnv, stmts: Sequence[FactStmt], rel: RelationPattern) -> bool:
    # convert before scanning so a malformed constraint fails regardless of the facts
    try:
        if isinstance(rel, RelBind):
            name = to_sub_var(rel.bform)
            expr = to_sub_expr(rel.expr)
            return any(_bind_matches(var_env, stmt, name, expr) for stmt in stmts)
        if isinstance(rel, RelPred):
            pred = to_sub_pred(rel)
            return any(_pred_matches(stmt, pred) for stmt in stmts)
    except StructuralError as exc:
        if exc.rel is None:
            exc.rel = rel
        raise
    unknown_variant(rel, 'relational constraint')


def all_rels_match(var_env: VarEnv, stmts: Sequence[FactStmt], rels: Sequence[RelationPattern]) -> bool:
    # ``all`` stops at the first unsatisfied constraint
    return all(rel_matches_prog(var_env, stmts, rel) for rel in rels)


# ----------------------------------------------------------------------
# Statement admissibility


def _expr_admitted(expr: FactExpr, setting: MatchSetting) -> bool:
    if isinstance(expr, VarE):
        return True
    if isinstance(expr, ApplyFunc):
        names = setting.functions
    elif isinstance(expr, ApplyCons):
        names = setting.constructors
    else:
        unknown_variant(expr, 'fact expression')
    return expr.name in names and all(_expr_admitted(arg, setting) for arg in expr.args)


def _pred_admitted(pred: Predicate, setting: MatchSetting) -> bool:
    if pred.name not in setting.predicates:
        return False
    for arg in pred.args:
        if isinstance(arg, PredExpr):
            ok = _expr_admitted(arg.expr, setting)
        elif isinstance(arg, PredNested):
            ok = _pred_admitted(arg.pred, setting)
        else:
            unknown_variant(arg, 'predicate argument')
        if not ok:
            return False
    return True


def stmt_admitted(stmt: FactStmt, setting: MatchSetting) -> bool:
    """Whether ``setting`` allows relational matching to use ``stmt``."""

    if isinstance(stmt, Decl):
        return stmt.type.name in setting.types
    if isinstance(stmt, Bind):
        return _expr_admitted(stmt.expr, setting)
    if isinstance(stmt, ApplyPred):
        return _pred_admitted(stmt.pred, setting)
    unknown_variant(stmt, 'fact statement')


def could_match_rels(rels: Sequence[RelationPattern], stmt: FactStmt) -> bool:
    """Cheap admissibility test: can any constraint in ``rels`` match ``stmt`` at all?"""

    for rel in rels:
        if isinstance(rel, RelBind):
            if isinstance(stmt, Bind):
                return True
        elif isinstance(rel, RelPred):
            if isinstance(stmt, ApplyPred) and stmt.pred.name == rel.name:
                return True
        else:
            unknown_variant(rel, 'relational constraint')
    return False


def candidate_stmts(
    facts: FactProgram, rels: Sequence[RelationPattern], options: MatchOptions
) -> List[FactStmt]:
    stmts = [stmt for stmt in facts.stmts if stmt_admitted(stmt, options.setting)]
    if options.prefilter:
        stmts = [stmt for stmt in stmts if could_match_rels(rels, stmt)]
    return stmts


def filter_rels(
    var_env: VarEnv,
    facts: FactProgram,
    rels: Sequence[RelationPattern],
    substs: Sequence[Substitution],
    options: MatchOptions,
) -> List[Substitution]:
    """Keep the substitutions under which every constraint in ``rels`` holds."""

    if not rels:
        return list(substs)
    stmts = candidate_stmts(facts, rels, options)
    logger.debug(
        "Relational filter: %d constraint(s), %d/%d candidate statement(s)",
        len(rels),
        len(stmts),
        len(facts.stmts),
    )
    return [
        subst
        for subst in substs
        if all_rels_match(var_env, stmts, substitute_rels(subst, rels))
    ]
