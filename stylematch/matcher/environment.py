"""Selector environment construction."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Set, Tuple

from ..ast import (
    BindingForm,
    DeclPattern,
    Header,
    Namespace,
    RelBind,
    RelPred,
    RelationPattern,
    SEApp,
    SEBind,
    SelExpr,
    Selector,
    StyleProgram,
    StyVar,
    SubVar,
    TypeRef,
    VarEnv,
    unknown_variant,
)
from .model import ProgType, SelEnv

logger = logging.getLogger(__name__)

_Entry = Tuple[str, TypeRef, ProgType, BindingForm]


def origin_of(bform: BindingForm) -> ProgType:
    if isinstance(bform, StyVar):
        return ProgType.STYLE
    if isinstance(bform, SubVar):
        return ProgType.SUBSTANCE
    unknown_variant(bform, 'binding form')


def _add_decl_patterns(entries: Dict[str, _Entry], decls: Iterable[DeclPattern]) -> None:
    for decl in decls:
        bform = decl.bform
        entries[bform.name] = (bform.name, decl.type, origin_of(bform), bform)


def build_selector_env(var_env: VarEnv, header: Header) -> SelEnv:
    """Record every declared binding form of ``header`` with its type and origin."""

    if isinstance(header, Selector):
        entries: Dict[str, _Entry] = {}
        _add_decl_patterns(entries, header.head)
        _add_decl_patterns(entries, header.with_)
        return SelEnv(entries=tuple(entries.values()), header=header)
    if isinstance(header, Namespace):
        return SelEnv(header=header)
    unknown_variant(header, 'style header')


def build_selector_envs(var_env: VarEnv, style: StyleProgram) -> List[SelEnv]:
    """Return one environment per block of ``style``, in block order."""

    envs = [build_selector_env(var_env, block.header) for block in style.blocks]
    logger.debug("Built %d selector environment(s)", len(envs))
    return envs


def _expr_style_vars(expr: SelExpr, out: List[str]) -> None:
    if isinstance(expr, SEBind):
        if isinstance(expr.bform, StyVar):
            out.append(expr.bform.name)
        elif not isinstance(expr.bform, SubVar):
            unknown_variant(expr.bform, 'binding form')
    elif isinstance(expr, SEApp):
        for arg in expr.args:
            _expr_style_vars(arg, out)
    else:
        unknown_variant(expr, 'selector expression')


def rel_style_vars(rel: RelationPattern) -> List[str]:
    """Pattern-side names used by ``rel``, in occurrence order."""

    out: List[str] = []
    if isinstance(rel, RelBind):
        if isinstance(rel.bform, StyVar):
            out.append(rel.bform.name)
        _expr_style_vars(rel.expr, out)
    elif isinstance(rel, RelPred):
        for arg in rel.args:
            if isinstance(arg, RelPred):
                out.extend(rel_style_vars(arg))
            else:
                _expr_style_vars(arg, out)
    else:
        unknown_variant(rel, 'relational constraint')
    return out


def undeclared_rel_vars(sel_env: SelEnv, rel: RelationPattern) -> List[str]:
    """Pattern-side names used in ``rel`` that the selector never declared."""

    declared: Set[str] = set(sel_env.style_vars)
    missing = [name for name in rel_style_vars(rel) if name not in declared]
    return list(dict.fromkeys(missing))
