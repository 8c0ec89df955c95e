from .ast import (
    FactProgram,
    HeaderBlock,
    Namespace,
    Selector,
    Span,
    StyleProgram,
    TypeRef,
    VarEnv,
)
from .loader import LoadError, load_facts, load_json, load_style, load_vocabulary
from .printer import format_header, format_rel, format_stmt, format_subst, print_facts, print_style
from .validate import validate, validate_facts, validate_style, ValidationError
from .consistency import check_selectors, SelectorWarning
from .matcher import (
    MatchOptions,
    MatchSetting,
    ProgramMatch,
    SelEnv,
    SelectorDiagnostic,
    StructuralError,
    StyleMatchError,
    Substitution,
    build_selector_envs,
    find_substs_prog,
    get_match_options,
    match_style,
    set_match_options,
)

__all__ = [
    'FactProgram',
    'HeaderBlock',
    'Namespace',
    'Selector',
    'Span',
    'StyleProgram',
    'TypeRef',
    'VarEnv',
    'LoadError',
    'load_facts',
    'load_json',
    'load_style',
    'load_vocabulary',
    'format_header',
    'format_rel',
    'format_stmt',
    'format_subst',
    'print_facts',
    'print_style',
    'validate',
    'validate_facts',
    'validate_style',
    'ValidationError',
    'check_selectors',
    'SelectorWarning',
    'MatchOptions',
    'MatchSetting',
    'ProgramMatch',
    'SelEnv',
    'SelectorDiagnostic',
    'StructuralError',
    'StyleMatchError',
    'Substitution',
    'build_selector_envs',
    'find_substs_prog',
    'get_match_options',
    'match_style',
    'set_match_options',
]
