"""Substitution validity checks and application to relational constraints."""

from __future__ import annotations

from typing import List, Sequence

from ..ast import (
    BindingForm,
    RelBind,
    RelPred,
    RelPredArg,
    RelationPattern,
    SEApp,
    SEBind,
    SelExpr,
    StyVar,
    SubVar,
    unknown_variant,
)
from .model import SelEnv, Substitution


def full_subst(sel_env: SelEnv, subst: Substitution) -> bool:
    """A substitution is full when it binds exactly the selector's pattern variables.

    Both sides are compared as sets.
    """

    return sel_env.style_vars == frozenset(subst.bound_names())


def unique_keys_and_vals(subst: Substitution) -> bool:
    """No pattern variable is bound twice and no two bind the same fact."""

    names = subst.bound_names()
    values = subst.bound_values()
    return len(set(names)) == len(names) and len(set(values)) == len(values)


def substitute_bform(subst: Substitution, bform: BindingForm) -> BindingForm:
    if isinstance(bform, SubVar):
        return bform
    if isinstance(bform, StyVar):
        if bform.name in subst:
            return SubVar(subst[bform.name])
        return bform
    unknown_variant(bform, 'binding form')


def substitute_expr(subst: Substitution, expr: SelExpr) -> SelExpr:
    if isinstance(expr, SEBind):
        return SEBind(substitute_bform(subst, expr.bform))
    if isinstance(expr, SEApp):
        return SEApp(expr.kind, expr.name, tuple(substitute_expr(subst, arg) for arg in expr.args))
    unknown_variant(expr, 'selector expression')


def substitute_pred_arg(subst: Substitution, arg: RelPredArg) -> RelPredArg:
    if isinstance(arg, RelPred):
        return RelPred(arg.name, tuple(substitute_pred_arg(subst, a) for a in arg.args))
    if isinstance(arg, SEBind):
        return SEBind(substitute_bform(subst, arg.bform))
    unknown_variant(arg, 'predicate argument')


def substitute_rel(subst: Substitution, rel: RelationPattern) -> RelationPattern:
    if isinstance(rel, RelBind):
        return RelBind(substitute_bform(subst, rel.bform), substitute_expr(subst, rel.expr))
    if isinstance(rel, RelPred):
        return RelPred(rel.name, tuple(substitute_pred_arg(subst, arg) for arg in rel.args))
    unknown_variant(rel, 'relational constraint')


def substitute_rels(subst: Substitution, rels: Sequence[RelationPattern]) -> List[RelationPattern]:
    return [substitute_rel(subst, rel) for rel in rels]
