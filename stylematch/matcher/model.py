"""Core data structures for the matching pipeline."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, Iterator, List, Optional, Tuple, Union

from ..ast import BindingForm, Header, TypeRef, VarEnv

Var = str
StyName = str


class StructuralError(RuntimeError):
    """Raised when a tree violates an invariant an earlier phase should guarantee."""

    def __init__(self, message: str, *, rel: Optional[object] = None):
        super().__init__(message)
        self.rel = rel


class ProgType(enum.Enum):
    STYLE = 'style'
    SUBSTANCE = 'substance'


@dataclass(frozen=True)
class SelEnv:
    """Per-selector environment: binding-form name -> (declared type, origin).

    ``entries`` holds one entry per name in first-declaration order; the
    builder lets a later declaration of the same name replace the entry.
    """

    entries: Tuple[Tuple[str, TypeRef, ProgType, BindingForm], ...] = ()
    header: Optional[Header] = None

    def __post_init__(self) -> None:
        seen: Dict[str, int] = {}
        for idx, (name, _typ, _origin, _bform) in enumerate(self.entries):
            if name in seen:
                raise ValueError(f"duplicate selector environment entry '{name}'")
            seen[name] = idx

    def __contains__(self, name: object) -> bool:
        return any(entry[0] == name for entry in self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def type_of(self, name: str) -> TypeRef:
        for entry_name, typ, _origin, _bform in self.entries:
            if entry_name == name:
                return typ
        raise KeyError(name)

    def origin_of(self, name: str) -> ProgType:
        for entry_name, _typ, origin, _bform in self.entries:
            if entry_name == name:
                return origin
        raise KeyError(name)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(entry[0] for entry in self.entries)

    @property
    def style_vars(self) -> FrozenSet[str]:
        return frozenset(name for name, _t, origin, _b in self.entries if origin is ProgType.STYLE)

    @property
    def sub_vars(self) -> FrozenSet[str]:
        return frozenset(name for name, _t, origin, _b in self.entries if origin is ProgType.SUBSTANCE)


class Substitution(Mapping):
    """Immutable mapping from pattern variables to fact identifiers.

    Bindings are stored as ordered pairs so that a name bound twice by the
    cartesian merge stays visible; lookups return the last binding.
    Equality ignores pair order, so it agrees with comparison against a dict
    whenever no name is bound twice.
    """

    __slots__ = ('_pairs',)

    def __init__(self, pairs: Union[Mapping, Tuple[Tuple[StyName, Var], ...], List[Tuple[StyName, Var]]] = ()):
        if isinstance(pairs, Mapping):
            items = tuple((str(k), str(v)) for k, v in pairs.items())
        else:
            items = tuple((str(k), str(v)) for k, v in pairs)
        object.__setattr__(self, '_pairs', items)

    def __setattr__(self, name, value):
        raise AttributeError('Substitution is immutable')

    @property
    def pairs(self) -> Tuple[Tuple[StyName, Var], ...]:
        return self._pairs

    def __getitem__(self, key: StyName) -> Var:
        for name, value in reversed(self._pairs):
            if name == key:
                return value
        raise KeyError(key)

    def __iter__(self) -> Iterator[StyName]:
        seen = set()
        for name, _value in self._pairs:
            if name not in seen:
                seen.add(name)
                yield name

    def __len__(self) -> int:
        return len({name for name, _value in self._pairs})

    def bound_names(self) -> List[StyName]:
        return [name for name, _value in self._pairs]

    def bound_values(self) -> List[Var]:
        return [value for _name, value in self._pairs]

    def combine(self, other: 'Substitution') -> 'Substitution':
        return Substitution(self._pairs + other._pairs)

    def as_dict(self) -> Dict[StyName, Var]:
        return dict(self.items())

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Substitution):
            return sorted(self._pairs) == sorted(other._pairs)
        if isinstance(other, Mapping):
            return len(self._pairs) == len(other) and self.as_dict() == dict(other.items())
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(sorted(self._pairs)))

    def __repr__(self) -> str:
        body = ', '.join(f'{k!r}: {v!r}' for k, v in self._pairs)
        return f'Substitution({{{body}}})'


EMPTY_SUBST = Substitution()


class _AllNames:
    def __contains__(self, name: object) -> bool:
        return True

    def __repr__(self) -> str:
        return 'ALL'


ALL = _AllNames()
NameFilter = Union[_AllNames, FrozenSet[str]]


@dataclass(frozen=True)
class MatchSetting:
    """Vocabulary entries the matcher is allowed to use, per category."""

    types: NameFilter = ALL
    predicates: NameFilter = ALL
    constructors: NameFilter = ALL
    functions: NameFilter = ALL

    @classmethod
    def only(cls, **categories) -> 'MatchSetting':
        return cls(**{key: frozenset(names) for key, names in categories.items()})


TypeMatcher = Callable[[VarEnv, TypeRef, TypeRef], bool]


def _require_nullary(fact_type: TypeRef, style_type: TypeRef) -> None:
    if not (fact_type.is_nullary and style_type.is_nullary):
        raise StructuralError(
            f'expected two nullary types, got {fact_type.name} and {style_type.name}'
        )


def exact_type_match(var_env: VarEnv, fact_type: TypeRef, style_type: TypeRef) -> bool:
    """Nullary types match only when their names are equal."""

    _require_nullary(fact_type, style_type)
    return fact_type.name == style_type.name


def subtype_match(var_env: VarEnv, fact_type: TypeRef, style_type: TypeRef) -> bool:
    """Nullary types match when the fact type is a declared subtype of the style type."""

    _require_nullary(fact_type, style_type)
    return var_env.is_subtype(fact_type.name, style_type.name)


@dataclass
class MatchOptions:
    """Matcher configuration passed into every stage."""

    type_matcher: TypeMatcher = exact_type_match
    prefilter: bool = True
    warn_candidates: int = 10000
    setting: MatchSetting = field(default_factory=MatchSetting)


@dataclass(frozen=True)
class SelectorDiagnostic:
    """Structural violation recorded for one selector."""

    index: int
    message: str
    constraint: Optional[str] = None
    line: Optional[int] = None
    col: Optional[int] = None

    def __str__(self) -> str:
        where = f'selector {self.index}'
        if self.line is not None:
            where = f'[line {self.line}, col {self.col}] {where}'
        if self.constraint:
            return f'{where}: {self.message} (in {self.constraint})'
        return f'{where}: {self.message}'


@dataclass
class ProgramMatch:
    substitutions: List[List[Substitution]] = field(default_factory=list)
    diagnostics: List[SelectorDiagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics


class StyleMatchError(RuntimeError):
    """Raised by ``match_style`` when any selector hit a structural violation."""

    def __init__(self, diagnostics: List[SelectorDiagnostic]):
        lines = '\n'.join(f'  - {diag}' for diag in diagnostics)
        super().__init__(f'{len(diagnostics)} selector(s) failed to match:\n{lines}')
        self.diagnostics = list(diagnostics)
