"""Decoding of already-parsed vocabulary, fact and style trees from JSON.

Every node object carries a ``kind`` tag that selects its variant; an
unknown tag is a :class:`LoadError`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from .ast import (
    AppKind,
    ApplyCons,
    ApplyFunc,
    ApplyPred,
    Bind,
    BindingForm,
    Decl,
    DeclPattern,
    FactExpr,
    FactProgram,
    FactStmt,
    HeaderBlock,
    Namespace,
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
    Selector,
    Span,
    StyleProgram,
    StyVar,
    SubVar,
    TypeInfo,
    TypeRef,
    VarE,
    VarEnv,
)

logger = logging.getLogger(__name__)

Json = Dict[str, Any]


class LoadError(ValueError):
    pass


def _require(node: Mapping[str, Any], key: str, where: str) -> Any:
    if not isinstance(node, Mapping):
        raise LoadError(f'{where}: expected an object, got {type(node).__name__}')
    try:
        return node[key]
    except KeyError as exc:
        raise LoadError(f'{where}: missing "{key}"') from exc


def _kind(node: Mapping[str, Any], where: str) -> str:
    kind = _require(node, 'kind', where)
    if not isinstance(kind, str):
        raise LoadError(f'{where}: "kind" must be a string')
    return kind


def _name(node: Mapping[str, Any], where: str, key: str = 'name') -> str:
    value = _require(node, key, where)
    if not isinstance(value, str) or not value:
        raise LoadError(f'{where}: "{key}" must be a non-empty string')
    return value


def _list(node: Mapping[str, Any], key: str, where: str) -> List[Any]:
    value = node.get(key) or []
    if not isinstance(value, list):
        raise LoadError(f'{where}: "{key}" must be a list')
    return value


def _span(node: Mapping[str, Any], where: str) -> Optional[Span]:
    if 'line' not in node:
        return None
    try:
        return Span(int(node['line']), int(node.get('col', 1)))
    except (TypeError, ValueError) as exc:
        raise LoadError(f'{where}: "line" and "col" must be integers') from exc


def load_type(value: Union[str, Json]) -> TypeRef:
    if isinstance(value, str):
        return TypeRef(value)
    name = _name(value, 'type')
    return TypeRef(name, tuple(load_type(arg) for arg in _list(value, 'args', 'type')))


# ----------------------------------------------------------------------
# Vocabulary


def load_vocabulary(data: Json) -> VarEnv:
    types_node = data.get('types') or {}
    if isinstance(types_node, list):
        if not all(isinstance(name, str) for name in types_node):
            raise LoadError('vocabulary: "types" list must hold type names')
        types_node = {name: {} for name in types_node}
    if not isinstance(types_node, Mapping):
        raise LoadError('vocabulary: "types" must be an object or a list')
    types: Dict[str, TypeInfo] = {}
    for name, meta in types_node.items():
        meta = meta or {}
        if not isinstance(meta, Mapping):
            raise LoadError(f'vocabulary: type "{name}" must map to an object, got {type(meta).__name__}')
        params = tuple(str(p) for p in _list(meta, 'params', f'type "{name}"'))
        extra = tuple(sorted((str(k), str(v)) for k, v in meta.items() if k != 'params'))
        types[name] = TypeInfo(name=name, params=params, meta=extra)

    subtypes = []
    for pair in _list(data, 'subtypes', 'vocabulary'):
        if not isinstance(pair, list) or len(pair) != 2:
            raise LoadError(f'vocabulary: subtype entry must be [sub, super], got {pair!r}')
        subtypes.append((str(pair[0]), str(pair[1])))

    return VarEnv(
        types=types,
        constructors=frozenset(str(n) for n in _list(data, 'constructors', 'vocabulary')),
        functions=frozenset(str(n) for n in _list(data, 'functions', 'vocabulary')),
        predicates=frozenset(str(n) for n in _list(data, 'predicates', 'vocabulary')),
        subtypes=tuple(subtypes),
    )


# ----------------------------------------------------------------------
# Fact program


def load_fact_expr(node: Json) -> FactExpr:
    kind = _kind(node, 'fact expression')
    if kind == 'var':
        return VarE(_name(node, 'fact expression'))
    args = tuple(load_fact_expr(arg) for arg in _list(node, 'args', 'fact expression'))
    if kind == 'func':
        return ApplyFunc(_name(node, 'fact expression'), args)
    if kind == 'cons':
        return ApplyCons(_name(node, 'fact expression'), args)
    raise LoadError(f'fact expression: unknown kind "{kind}"')


def load_predicate(node: Json) -> Predicate:
    args: List[PredArg] = []
    for arg in _list(node, 'args', 'predicate'):
        if _kind(arg, 'predicate argument') == 'pred':
            args.append(PredNested(load_predicate(arg)))
        else:
            args.append(PredExpr(load_fact_expr(arg)))
    return Predicate(_name(node, 'predicate'), tuple(args))


def load_fact_stmt(node: Json) -> FactStmt:
    kind = _kind(node, 'fact statement')
    if kind == 'decl':
        return Decl(load_type(_require(node, 'type', 'decl')), _name(node, 'decl'), _span(node, kind))
    if kind == 'bind':
        return Bind(_name(node, 'bind'), load_fact_expr(_require(node, 'expr', 'bind')), _span(node, kind))
    if kind == 'pred':
        return ApplyPred(load_predicate(node), _span(node, kind))
    raise LoadError(f'fact statement: unknown kind "{kind}"')


def load_facts(data: Json) -> FactProgram:
    stmts = tuple(load_fact_stmt(node) for node in _list(data, 'statements', 'facts'))
    logger.debug("Loaded %d fact statement(s)", len(stmts))
    return FactProgram(stmts)


# ----------------------------------------------------------------------
# Style program

_APP_KINDS = {kind.value: kind for kind in AppKind}


def load_bform(node: Json) -> BindingForm:
    kind = _kind(node, 'binding form')
    if kind == 'style':
        return StyVar(_name(node, 'binding form'))
    if kind == 'sub':
        return SubVar(_name(node, 'binding form'))
    raise LoadError(f'binding form: unknown kind "{kind}"')


def load_sel_expr(node: Json) -> SelExpr:
    kind = _kind(node, 'selector expression')
    if kind == 'var':
        return SEBind(load_bform(_require(node, 'var', 'selector expression')))
    if kind in _APP_KINDS:
        args = tuple(load_sel_expr(arg) for arg in _list(node, 'args', 'selector expression'))
        return SEApp(_APP_KINDS[kind], _name(node, 'selector expression'), args)
    raise LoadError(f'selector expression: unknown kind "{kind}"')


def load_rel_pred(node: Json) -> RelPred:
    args: List[RelPredArg] = []
    for arg in _list(node, 'args', 'relational predicate'):
        kind = _kind(arg, 'relational predicate argument')
        if kind == 'pred':
            args.append(load_rel_pred(arg))
        elif kind == 'var':
            args.append(SEBind(load_bform(_require(arg, 'var', 'relational predicate argument'))))
        else:
            raise LoadError(f'relational predicate argument: unknown kind "{kind}"')
    return RelPred(_name(node, 'relational predicate'), tuple(args))


def load_relation(node: Json) -> RelationPattern:
    kind = _kind(node, 'relational constraint')
    if kind == 'bind':
        return RelBind(
            load_bform(_require(node, 'var', 'relational binding')),
            load_sel_expr(_require(node, 'expr', 'relational binding')),
        )
    if kind == 'pred':
        return load_rel_pred(node)
    raise LoadError(f'relational constraint: unknown kind "{kind}"')


def load_decl_pattern(node: Json) -> DeclPattern:
    return DeclPattern(
        load_type(_require(node, 'type', 'declared pattern')),
        load_bform(_require(node, 'var', 'declared pattern')),
    )


def load_block(node: Json) -> HeaderBlock:
    kind = _kind(node, 'style block')
    span = _span(node, 'style block') or Span(0, 0)
    if kind == 'namespace':
        return HeaderBlock(Namespace(_name(node, 'namespace')), span)
    if kind == 'selector':
        header = Selector(
            head=tuple(load_decl_pattern(d) for d in _list(node, 'head', 'selector')),
            with_=tuple(load_decl_pattern(d) for d in _list(node, 'with', 'selector')),
            where=tuple(load_relation(r) for r in _list(node, 'where', 'selector')),
            namespace=node.get('namespace'),
        )
        return HeaderBlock(header, span)
    raise LoadError(f'style block: unknown kind "{kind}"')


def load_style(data: Json) -> StyleProgram:
    blocks = tuple(load_block(node) for node in _list(data, 'blocks', 'style'))
    logger.debug("Loaded %d style block(s)", len(blocks))
    return StyleProgram(blocks)


def load_json(path: Union[str, Path]) -> Json:
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding='utf-8'))
    except json.JSONDecodeError as exc:
        raise LoadError(f'{path}: invalid JSON ({exc})') from exc
    if not isinstance(data, dict):
        raise LoadError(f'{path}: top-level value must be an object')
    return data
