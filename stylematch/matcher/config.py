"""Process-wide default matcher options."""

from __future__ import annotations

import copy

from .model import MatchOptions

_MATCH_OPTIONS = MatchOptions()


def get_match_options() -> MatchOptions:
    return copy.deepcopy(_MATCH_OPTIONS)


def set_match_options(options: MatchOptions) -> None:
    global _MATCH_OPTIONS
    _MATCH_OPTIONS = copy.deepcopy(options)
