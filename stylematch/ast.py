"""Typed trees for the vocabulary, fact and style programs.

All nodes are frozen dataclasses.  Each syntactic category is a closed union
(``FactExpr``, ``FactStmt``, ``BindingForm``, ``SelExpr``, ``RelationPattern``,
``Header``); code walking these trees dispatches with ``isinstance`` and ends
in :func:`unknown_variant` so an unexpected node is never silently ignored.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, NoReturn, Optional, Tuple, Union


@dataclass(frozen=True)
class Span:
    line: int
    col: int


class UnknownVariantError(TypeError):
    """A node outside the closed union expected at this position."""


def unknown_variant(node: object, where: str) -> NoReturn:
    raise UnknownVariantError(f'unknown {where} variant: {type(node).__name__}')


# ----------------------------------------------------------------------
# Vocabulary


@dataclass(frozen=True)
class TypeRef:
    name: str
    args: Tuple['TypeRef', ...] = ()

    @property
    def is_nullary(self) -> bool:
        return not self.args


@dataclass(frozen=True)
class TypeInfo:
    name: str
    params: Tuple[str, ...] = ()
    meta: Tuple[Tuple[str, str], ...] = ()


@dataclass(frozen=True)
class VarEnv:
    """Vocabulary: known types, constructors, functions, predicates."""

    types: Dict[str, TypeInfo] = field(default_factory=dict)
    constructors: FrozenSet[str] = frozenset()
    functions: FrozenSet[str] = frozenset()
    predicates: FrozenSet[str] = frozenset()
    subtypes: Tuple[Tuple[str, str], ...] = ()

    def has_type(self, name: str) -> bool:
        return name in self.types

    def is_subtype(self, sub: str, sup: str) -> bool:
        """Reflexive-transitive closure over the declared subtype edges."""

        if sub == sup:
            return True
        seen = {sub}
        frontier = [sub]
        while frontier:
            current = frontier.pop()
            for child, parent in self.subtypes:
                if child != current or parent in seen:
                    continue
                if parent == sup:
                    return True
                seen.add(parent)
                frontier.append(parent)
        return False


# ----------------------------------------------------------------------
# Fact program


@dataclass(frozen=True)
class VarE:
    name: str


@dataclass(frozen=True)
class ApplyFunc:
    name: str
    args: Tuple['FactExpr', ...] = ()


@dataclass(frozen=True)
class ApplyCons:
    name: str
    args: Tuple['FactExpr', ...] = ()


FactExpr = Union[VarE, ApplyFunc, ApplyCons]


@dataclass(frozen=True)
class Predicate:
    name: str
    args: Tuple['PredArg', ...] = ()


@dataclass(frozen=True)
class PredExpr:
    expr: FactExpr


@dataclass(frozen=True)
class PredNested:
    pred: Predicate


PredArg = Union[PredExpr, PredNested]


@dataclass(frozen=True)
class Decl:
    type: TypeRef
    name: str
    span: Optional[Span] = None


@dataclass(frozen=True)
class Bind:
    name: str
    expr: FactExpr
    span: Optional[Span] = None


@dataclass(frozen=True)
class ApplyPred:
    pred: Predicate
    span: Optional[Span] = None


FactStmt = Union[Decl, Bind, ApplyPred]


@dataclass(frozen=True)
class FactProgram:
    stmts: Tuple[FactStmt, ...] = ()

    @property
    def decls(self) -> Tuple[Decl, ...]:
        return tuple(s for s in self.stmts if isinstance(s, Decl))

    def without(self, index: int) -> 'FactProgram':
        """Return a copy with the statement at ``index`` removed."""

        return FactProgram(self.stmts[:index] + self.stmts[index + 1:])


# ----------------------------------------------------------------------
# Style program


@dataclass(frozen=True)
class StyVar:
    """Pattern-side variable, bound by substitution."""

    name: str


@dataclass(frozen=True)
class SubVar:
    """Fact-side variable: a backtick-quoted literal fact reference."""

    name: str


BindingForm = Union[StyVar, SubVar]


class AppKind(enum.Enum):
    FUNC = 'func'
    CONS = 'cons'
    UNRESOLVED = 'app'


@dataclass(frozen=True)
class SEBind:
    bform: BindingForm


@dataclass(frozen=True)
class SEApp:
    kind: AppKind
    name: str
    args: Tuple['SelExpr', ...] = ()


SelExpr = Union[SEBind, SEApp]


@dataclass(frozen=True)
class DeclPattern:
    type: TypeRef
    bform: BindingForm


@dataclass(frozen=True)
class RelBind:
    bform: BindingForm
    expr: SelExpr


@dataclass(frozen=True)
class RelPred:
    name: str
    args: Tuple['RelPredArg', ...] = ()


RelPredArg = Union[SEBind, RelPred]
RelationPattern = Union[RelBind, RelPred]


@dataclass(frozen=True)
class Selector:
    head: Tuple[DeclPattern, ...] = ()
    with_: Tuple[DeclPattern, ...] = ()
    where: Tuple[RelationPattern, ...] = ()
    namespace: Optional[str] = None

    @property
    def decls(self) -> Tuple[DeclPattern, ...]:
        return self.head + self.with_


@dataclass(frozen=True)
class Namespace:
    name: str


Header = Union[Selector, Namespace]


@dataclass(frozen=True)
class HeaderBlock:
    header: Header
    span: Span = Span(0, 0)


@dataclass(frozen=True)
class StyleProgram:
    blocks: Tuple[HeaderBlock, ...] = ()

    @property
    def headers(self) -> Tuple[Header, ...]:
        return tuple(block.header for block in self.blocks)
