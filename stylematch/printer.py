from typing import Iterable, Mapping, Sequence

from .ast import (
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
    Header,
    Namespace,
    Predicate,
    PredExpr,
    PredNested,
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
    VarE,
    unknown_variant,
)


def format_type(typ: TypeRef) -> str:
    if typ.is_nullary:
        return typ.name
    return f"{typ.name}({', '.join(format_type(arg) for arg in typ.args)})"


def format_bform(bform: BindingForm, *, quote: bool = False) -> str:
    if isinstance(bform, StyVar):
        return bform.name
    if isinstance(bform, SubVar):
        return f"`{bform.name}`" if quote else bform.name
    unknown_variant(bform, 'binding form')


# ----------------------------------------------------------------------
# Fact side


def format_expr(expr: FactExpr) -> str:
    if isinstance(expr, VarE):
        return expr.name
    if isinstance(expr, (ApplyFunc, ApplyCons)):
        return f"{expr.name}({', '.join(format_expr(arg) for arg in expr.args)})"
    unknown_variant(expr, 'fact expression')


def format_pred(pred: Predicate) -> str:
    parts = []
    for arg in pred.args:
        if isinstance(arg, PredExpr):
            parts.append(format_expr(arg.expr))
        elif isinstance(arg, PredNested):
            parts.append(format_pred(arg.pred))
        else:
            unknown_variant(arg, 'predicate argument')
    return f"{pred.name}({', '.join(parts)})"


def format_stmt(stmt: FactStmt) -> str:
    """Return a single-line representation of a fact statement."""

    if isinstance(stmt, Decl):
        return f"{format_type(stmt.type)} {stmt.name}"
    if isinstance(stmt, Bind):
        return f"{stmt.name} := {format_expr(stmt.expr)}"
    if isinstance(stmt, ApplyPred):
        return format_pred(stmt.pred)
    unknown_variant(stmt, 'fact statement')


def print_facts(facts: FactProgram) -> str:
    return "".join(format_stmt(stmt) + "\n" for stmt in facts.stmts)


# ----------------------------------------------------------------------
# Style side


def format_sel_expr(expr: SelExpr) -> str:
    if isinstance(expr, SEBind):
        return format_bform(expr.bform)
    if isinstance(expr, SEApp):
        args = ', '.join(format_sel_expr(arg) for arg in expr.args)
        return f"{expr.name}({args})"
    unknown_variant(expr, 'selector expression')


def _format_rel_pred(rel: RelPred) -> str:
    parts = []
    for arg in rel.args:
        if isinstance(arg, RelPred):
            parts.append(_format_rel_pred(arg))
        else:
            parts.append(format_sel_expr(arg))
    return f"{rel.name}({', '.join(parts)})"


def format_rel(rel: RelationPattern) -> str:
    """``In(v, U)`` for predicates, ``z := Sum(v, w)`` for bindings."""

    if isinstance(rel, RelBind):
        return f"{format_bform(rel.bform)} := {format_sel_expr(rel.expr)}"
    if isinstance(rel, RelPred):
        return _format_rel_pred(rel)
    unknown_variant(rel, 'relational constraint')


def _format_decls(decls: Sequence[DeclPattern]) -> str:
    return "; ".join(f"{format_type(d.type)} {format_bform(d.bform, quote=True)}" for d in decls)


def format_header(header: Header) -> str:
    if isinstance(header, Namespace):
        return header.name
    if isinstance(header, Selector):
        text = f"forall {_format_decls(header.head)}"
        if header.with_:
            text += f" with {_format_decls(header.with_)}"
        if header.where:
            text += " where " + "; ".join(format_rel(rel) for rel in header.where)
        if header.namespace:
            text += f" as {header.namespace}"
        return text
    unknown_variant(header, 'style header')


def print_style(style: StyleProgram) -> str:
    return "".join(format_header(block.header) + "\n" for block in style.blocks)


def format_subst(subst: Mapping[str, str]) -> str:
    if not subst:
        return "{}"
    return "{" + ", ".join(f"{key} -> {value}" for key, value in subst.items()) + "}"


def format_substs(substs: Iterable[Mapping[str, str]]) -> str:
    return "[" + ", ".join(format_subst(s) for s in substs) + "]"
