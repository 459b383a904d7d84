"""
Lonelog notation tooling.

Extracts characters, locations, threads and progress trackers from solo
roleplaying journals written in Lonelog notation, colors notation spans, and
completes partially typed tags.
"""

from .exceptions import ConfigError, DocumentReadError, InvalidCursorError, LonelogError
from .notation import NotationParser, SuggestionEngine, parse_notation, tokenize_line

__all__ = [
    'ConfigError',
    'DocumentReadError',
    'InvalidCursorError',
    'LonelogError',
    'NotationParser',
    'SuggestionEngine',
    'parse_notation',
    'tokenize_line',
]

__version__ = '0.1.0'
