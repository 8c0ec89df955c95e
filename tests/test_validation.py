import pytest

from stylematch.ast import (
    AppKind,
    Decl,
    DeclPattern,
    FactProgram,
    HeaderBlock,
    RelBind,
    RelPred,
    SEApp,
    SEBind,
    Selector,
    Span,
    StyleProgram,
    StyVar,
    TypeRef,
)
from stylematch.validate import ValidationError, validate, validate_facts, validate_style


def block(selector, line=1, col=1):
    return HeaderBlock(selector, Span(line, col))


def test_validate_accepts_linear_algebra_program(la_vocab, la_facts, la_style):
    validate(la_style, la_facts, la_vocab)


def test_non_nullary_selector_type():
    style = StyleProgram((block(Selector(head=(DeclPattern(TypeRef('List', (TypeRef('Vector'),)), StyVar('l')),))),))

    with pytest.raises(ValidationError) as exc:
        validate_style(style)

    assert 'non-nullary type List(Vector)' in str(exc.value)


def test_undeclared_variable_reports_position_and_constraint():
    v = StyVar('v')
    sel = Selector(
        head=(DeclPattern(TypeRef('Vector'), v),),
        where=(RelPred('Orthogonal', (SEBind(v), SEBind(StyVar('w')))),),
    )
    style = StyleProgram((block(Selector(), line=1), block(sel, line=4, col=3)))

    with pytest.raises(ValidationError) as exc:
        validate_style(style)

    message = str(exc.value)
    assert message.startswith('[line 4, col 3] selector 1:')
    assert 'w' in message
    assert message.endswith('in Orthogonal(v, w)')


def test_unresolved_application_is_rejected():
    u, v = StyVar('u'), StyVar('v')
    sel = Selector(
        head=(DeclPattern(TypeRef('Vector'), u), DeclPattern(TypeRef('Vector'), v)),
        where=(RelBind(u, SEApp(AppKind.UNRESOLVED, 'neg', (SEBind(v),))),),
    )

    with pytest.raises(ValidationError, match='neg'):
        validate_style(StyleProgram((block(sel),)))


def test_non_nullary_fact_declaration():
    facts = FactProgram((Decl(TypeRef('List', (TypeRef('Vector'),)), 'xs', Span(2, 1)),))

    with pytest.raises(ValidationError) as exc:
        validate_facts(facts)

    assert str(exc.value) == '[line 2, col 1] fact xs has non-nullary type List(Vector)'
