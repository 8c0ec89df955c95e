from stylematch.ast import (
    DeclPattern,
    HeaderBlock,
    RelBind,
    RelPred,
    SEBind,
    Selector,
    Span,
    StyleProgram,
    StyVar,
    SubVar,
    TypeRef,
    VarEnv,
)
from stylematch.consistency import check_selectors


def style_of(*selectors):
    return StyleProgram(tuple(HeaderBlock(sel, Span(idx + 1, 1)) for idx, sel in enumerate(selectors)))


def test_linear_algebra_program_is_clean(la_vocab, la_facts, la_style):
    assert check_selectors(la_vocab, la_style, la_facts) == []


def test_duplicate_declaration_warns():
    v = StyVar('v')
    style = style_of(Selector(head=(DeclPattern(TypeRef('Vector'), v),), with_=(DeclPattern(TypeRef('Vector'), v),)))

    (warning,) = check_selectors(VarEnv(), style)

    assert warning.kind == 'duplicate_declaration'
    assert warning.index == 0
    assert warning.message == '[line 1, col 1] selector 0 declares v more than once'


def test_unknown_type_and_predicate(la_vocab):
    v = StyVar('v')
    style = style_of(
        Selector(
            head=(DeclPattern(TypeRef('Matrix'), v),),
            where=(RelPred('Not', (RelPred('Unit', (SEBind(v),)),)), RelPred('Symmetric', (SEBind(v),))),
        )
    )

    warnings = check_selectors(la_vocab, style)

    assert [w.kind for w in warnings] == ['unknown_type', 'unknown_predicate', 'unknown_predicate']
    assert 'Matrix' in warnings[0].message
    assert 'Not in Not(Unit(v))' in warnings[1].message
    assert 'Symmetric' in warnings[2].message


def test_empty_vocabulary_skips_name_checks():
    style = style_of(
        Selector(head=(DeclPattern(TypeRef('Matrix'), StyVar('m')),), where=(RelPred('Symmetric', (SEBind(StyVar('m')),)),))
    )

    assert check_selectors(VarEnv(), style) == []


def test_unknown_fact_reference(la_vocab, la_facts):
    style = style_of(
        Selector(
            head=(DeclPattern(TypeRef('Vector'), SubVar('y9')), DeclPattern(TypeRef('Vector'), StyVar('v'))),
            where=(RelBind(SubVar('q'), SEBind(StyVar('v'))),),
        )
    )

    (warning,) = check_selectors(la_vocab, style, la_facts)

    assert warning.kind == 'unknown_fact'
    assert warning.message.endswith('references undeclared fact(s): y9, q')


def test_fact_references_not_checked_without_facts(la_vocab):
    style = style_of(Selector(head=(DeclPattern(TypeRef('Vector'), SubVar('y9')),)))

    assert check_selectors(la_vocab, style) == []
