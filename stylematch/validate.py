from typing import Optional

from .ast import Decl, FactProgram, HeaderBlock, Selector, Span, StyleProgram, VarEnv
from .matcher import StructuralError, build_selector_env, check_relation
from .printer import format_rel, format_type


class ValidationError(Exception):
    pass


def _loc(sp: Optional[Span]) -> str:
    if sp is None:
        return ''
    return f'[line {sp.line}, col {sp.col}] '


def _validate_block(var_env: VarEnv, idx: int, block: HeaderBlock) -> None:
    header = block.header
    if not isinstance(header, Selector):
        return
    sp = block.span
    for decl in header.decls:
        if not decl.type.is_nullary:
            raise ValidationError(
                f'{_loc(sp)}selector {idx} declares non-nullary type {format_type(decl.type)}'
            )
    sel_env = build_selector_env(var_env, header)
    for rel in header.where:
        try:
            check_relation(sel_env, rel)
        except StructuralError as exc:
            raise ValidationError(f'{_loc(sp)}selector {idx}: {exc} in {format_rel(rel)}') from exc


def validate_style(style: StyleProgram, var_env: Optional[VarEnv] = None) -> None:
    var_env = var_env or VarEnv()
    for idx, block in enumerate(style.blocks):
        _validate_block(var_env, idx, block)


def validate_facts(facts: FactProgram) -> None:
    for s in facts.stmts:
        if isinstance(s, Decl) and not s.type.is_nullary:
            raise ValidationError(f'{_loc(s.span)}fact {s.name} has non-nullary type {format_type(s.type)}')


def validate(style: StyleProgram, facts: Optional[FactProgram] = None, var_env: Optional[VarEnv] = None) -> None:
    validate_style(style, var_env)
    if facts is not None:
        validate_facts(facts)
