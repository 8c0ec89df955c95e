import pytest

from stylematch.ast import (
    DeclPattern,
    FactProgram,
    Selector,
    StyVar,
    TypeRef,
    UnknownVariantError,
    unknown_variant,
)


def test_type_arity():
    assert TypeRef('Vector').is_nullary
    assert not TypeRef('List', (TypeRef('Vector'),)).is_nullary


def test_fact_program_without_statement(la_facts):
    reduced = la_facts.without(0)

    assert len(reduced.stmts) == len(la_facts.stmts) - 1
    assert [d.name for d in reduced.decls] == ['x1', 'x2', 'z']
    assert la_facts.decls[0].name == 'X'


def test_selector_decls_are_head_then_with():
    head = DeclPattern(TypeRef('Vector'), StyVar('v'))
    extra = DeclPattern(TypeRef('VectorSpace'), StyVar('U'))

    assert Selector(head=(head,), with_=(extra,)).decls == (head, extra)


def test_unknown_variant_is_a_type_error():
    with pytest.raises(TypeError) as exc:
        unknown_variant(FactProgram(), 'fact statement')

    assert isinstance(exc.value, UnknownVariantError)
    assert 'FactProgram' in str(exc.value)
