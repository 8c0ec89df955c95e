from dataclasses import dataclass
from typing import Iterable, List, Optional, Set

from .ast import (
    Bind,
    DeclPattern,
    FactProgram,
    HeaderBlock,
    RelBind,
    RelPred,
    RelationPattern,
    Selector,
    StyleProgram,
    SubVar,
    VarEnv,
)
from .printer import format_rel


@dataclass
class SelectorWarning:
    line: int
    col: int
    index: int
    kind: str
    message: str

    def __str__(self) -> str:
        return self.message


def _warning(block: HeaderBlock, index: int, kind: str, text: str) -> SelectorWarning:
    sp = block.span
    return SelectorWarning(
        line=sp.line,
        col=sp.col,
        index=index,
        kind=kind,
        message=f'[line {sp.line}, col {sp.col}] selector {index} {text}',
    )


def _rel_predicate_names(rel: RelationPattern) -> List[str]:
    if isinstance(rel, RelPred):
        names = [rel.name]
        for arg in rel.args:
            if isinstance(arg, RelPred):
                names.extend(_rel_predicate_names(arg))
        return names
    return []


def _duplicate_names(decls: Iterable[DeclPattern]) -> List[str]:
    seen: Set[str] = set()
    dups: List[str] = []
    for decl in decls:
        name = decl.bform.name
        if name in seen:
            dups.append(name)
        seen.add(name)
    return list(dict.fromkeys(dups))


def check_selectors(
    var_env: VarEnv, style: StyleProgram, facts: Optional[FactProgram] = None
) -> List[SelectorWarning]:
    """Report selectors that are legal but suspicious.

    Duplicate pattern declarations, types and predicates the vocabulary does
    not define, and literal fact references the fact program never declares.
    None of these stop matching.
    """

    warnings: List[SelectorWarning] = []
    fact_names = None
    if facts is not None:
        fact_names = {decl.name for decl in facts.decls}
        fact_names.update(s.name for s in facts.stmts if isinstance(s, Bind))

    for idx, block in enumerate(style.blocks):
        header = block.header
        if not isinstance(header, Selector):
            continue
        decls = header.decls

        dups = _duplicate_names(decls)
        if dups:
            warnings.append(
                _warning(block, idx, 'duplicate_declaration', f"declares {', '.join(dups)} more than once")
            )

        if var_env.types:
            unknown = [d.type.name for d in decls if not var_env.has_type(d.type.name)]
            if unknown:
                unknown = list(dict.fromkeys(unknown))
                warnings.append(
                    _warning(block, idx, 'unknown_type', f"uses unknown type(s): {', '.join(unknown)}")
                )

        if var_env.predicates:
            for rel in header.where:
                missing = [n for n in _rel_predicate_names(rel) if n not in var_env.predicates]
                if missing:
                    warnings.append(
                        _warning(
                            block,
                            idx,
                            'unknown_predicate',
                            f"uses unknown predicate(s) {', '.join(dict.fromkeys(missing))} in {format_rel(rel)}",
                        )
                    )

        if fact_names is not None:
            literals = [d.bform.name for d in decls if isinstance(d.bform, SubVar)]
            literals.extend(
                rel.bform.name
                for rel in header.where
                if isinstance(rel, RelBind) and isinstance(rel.bform, SubVar)
            )
            missing_facts = [name for name in dict.fromkeys(literals) if name not in fact_names]
            if missing_facts:
                warnings.append(
                    _warning(
                        block,
                        idx,
                        'unknown_fact',
                        f"references undeclared fact(s): {', '.join(missing_facts)}",
                    )
                )
    return warnings
