import pytest

from stylematch.ast import (
    AppKind,
    ApplyFunc,
    ApplyPred,
    Bind,
    Decl,
    DeclPattern,
    FactProgram,
    HeaderBlock,
    Namespace,
    Predicate,
    PredExpr,
    RelBind,
    RelPred,
    SEApp,
    SEBind,
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


def _pred(name, *args):
    return ApplyPred(Predicate(name, tuple(PredExpr(VarE(a)) for a in args)))


def _rel(name, *args):
    return RelPred(name, tuple(SEBind(a) for a in args))


def _d(typ, bform):
    return DeclPattern(TypeRef(typ), bform)


@pytest.fixture
def la_vocab():
    return VarEnv(
        types={name: TypeInfo(name) for name in ('VectorSpace', 'Vector', 'Scalar')},
        functions=frozenset({'addV'}),
        constructors=frozenset({'MkVector'}),
        predicates=frozenset({'In', 'Unit', 'Orthogonal'}),
    )


@pytest.fixture
def la_facts():
    return FactProgram(
        (
            Decl(TypeRef('VectorSpace'), 'X'),
            Decl(TypeRef('Vector'), 'x1'),
            Decl(TypeRef('Vector'), 'x2'),
            Decl(TypeRef('Vector'), 'z'),
            _pred('In', 'x1', 'X'),
            _pred('In', 'x2', 'X'),
            _pred('Unit', 'x1'),
            _pred('Orthogonal', 'x1', 'x2'),
            Bind('z', ApplyFunc('addV', (VarE('x1'), VarE('x2')))),
        )
    )


@pytest.fixture
def la_style():
    v, w, u, U = StyVar('v'), StyVar('w'), StyVar('u'), StyVar('U')
    selectors = [
        Namespace('Colors'),
        Selector(head=(_d('VectorSpace', U),)),
        Selector(head=(_d('Vector', v),)),
        Selector(head=(_d('Vector', v), _d('VectorSpace', U)), where=(_rel('In', v, U),)),
        Selector(head=(_d('Vector', v), _d('Vector', w)), where=(_rel('Orthogonal', v, w),)),
        Selector(
            head=(_d('Vector', u), _d('Vector', v), _d('Vector', w)),
            where=(
                RelBind(u, SEApp(AppKind.FUNC, 'addV', (SEBind(v), SEBind(w)))),
            ),
        ),
        Selector(
            head=(_d('Vector', v), _d('VectorSpace', U)),
            with_=(_d('Vector', w),),
            where=(_rel('In', v, U), _rel('Unit', v), _rel('Orthogonal', v, w)),
        ),
        Selector(
            head=(_d('Vector', SubVar('x1')), _d('Vector', w)),
            where=(_rel('Orthogonal', SubVar('x1'), w),),
        ),
    ]
    return StyleProgram(tuple(HeaderBlock(sel, Span(idx + 1, 1)) for idx, sel in enumerate(selectors)))


@pytest.fixture
def la_expected():
    return [
        [],
        [{'U': 'X'}],
        [{'v': 'x1'}, {'v': 'x2'}, {'v': 'z'}],
        [{'v': 'x1', 'U': 'X'}, {'v': 'x2', 'U': 'X'}],
        [{'v': 'x1', 'w': 'x2'}],
        [{'u': 'z', 'v': 'x1', 'w': 'x2'}],
        [{'v': 'x1', 'U': 'X', 'w': 'x2'}],
        [{'w': 'x2'}],
    ]
