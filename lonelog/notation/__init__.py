"""
Lonelog notation core.

Tokenizes lines for highlighting, extracts story elements from bracket tags,
and ranks completions for partially typed tags.
"""

from .models import (
    EntityKind,
    NamedEntity,
    ParsedDocument,
    ProgressElement,
    ProgressKind,
    Thread,
)
from .parser import NotationParser, parse_notation, parse_notation_file, read_document
from .scenes import Scene, Session, next_scene_number, next_session_number, parse_sessions
from .suggestions import (
    Candidate,
    Completion,
    SuggestionEngine,
    TriggerInfo,
    apply_suggestion,
    compose,
    detect_trigger,
    rank_names,
    suggest,
)
from .tokenizer import Token, TokenType, tokenize, tokenize_line

__all__ = [
    'EntityKind',
    'NamedEntity',
    'ParsedDocument',
    'ProgressElement',
    'ProgressKind',
    'Thread',
    'NotationParser',
    'parse_notation',
    'parse_notation_file',
    'read_document',
    'Scene',
    'Session',
    'next_scene_number',
    'next_session_number',
    'parse_sessions',
    'Candidate',
    'Completion',
    'SuggestionEngine',
    'TriggerInfo',
    'apply_suggestion',
    'compose',
    'detect_trigger',
    'rank_names',
    'suggest',
    'Token',
    'TokenType',
    'tokenize',
    'tokenize_line',
]
