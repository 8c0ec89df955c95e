import logging

from stylematch.logging_utils import _safe_repr, apply_debug_logging
from stylematch.matcher import build_selector_envs, find_substs_prog, MatchOptions


def test_driver_calls_are_logged_at_debug(la_vocab, la_facts, la_style, caplog):
    envs = build_selector_envs(la_vocab, la_style)

    with caplog.at_level(logging.DEBUG, logger='stylematch.matcher.driver'):
        find_substs_prog(la_vocab, la_facts, la_style, envs, MatchOptions())

    assert 'Entering find_substs_prog' in caplog.text
    assert 'FactProgram(stmts=9)' in caplog.text
    assert 'Exiting find_substs_prog' in caplog.text


def test_safe_repr_summarises_selector_envs(la_vocab, la_style):
    env = build_selector_envs(la_vocab, la_style)[6]

    assert _safe_repr(env) == 'SelEnv(names=[v, U, w])'
    assert _safe_repr(list(range(8))) == '[0, 1, 2, 3, 4, ... (8 items)]'


def test_apply_debug_logging_skips_private_and_listed_names():
    def public():
        return 1

    def _private():
        return 2

    def skipped():
        return 3

    namespace = {
        '__name__': __name__,
        'public': public,
        '_private': _private,
        'skipped': skipped,
    }

    apply_debug_logging(namespace, logger=logging.getLogger('test'), skip=['skipped'])

    assert getattr(namespace['public'], '_debug_logging_wrapped', False)
    assert namespace['_private'] is _private
    assert namespace['skipped'] is skipped
    assert namespace['public']() == 1
