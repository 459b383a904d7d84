"""
Line tokenizer for Lonelog notation highlighting.

Every line decomposes into typed spans that tile it exactly:
- line-level types (@ action, ? question, d: dice, => consequence) color
  the whole line
- inline tokens (-> result arrows, [N:...] style bracket tags) override the
  line color for their own span
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple


class TokenType(str, Enum):
    """Token types produced by the tokenizer."""
    ACTION = "action"
    QUESTION = "question"
    DICE = "dice"
    CONSEQUENCE = "consequence"
    RESULT = "result"
    TAG = "tag"
    TEXT = "text"


@dataclass(frozen=True)
class Token:
    """A typed span of one line; offsets are relative to the line start."""
    type: TokenType
    start: int
    end: int
    text: str

    def __repr__(self):
        return f"Token({self.type.value}:{self.start}-{self.end} {self.text!r})"


# Checked in order against the line with leading whitespace removed
LINE_START_PATTERNS: Tuple[Tuple[str, TokenType], ...] = (
    ('@', TokenType.ACTION),
    ('?', TokenType.QUESTION),
    ('d:', TokenType.DICE),
    ('=>', TokenType.CONSEQUENCE),
)

TAG_PREFIXES = ('N', '#N', 'L', 'PC', 'Thread', 'E', 'Track', 'Timer')

RESULT_ARROW_PATTERN = r'(?<!=)->'
BRACKET_TAG_PATTERN = r'\[(?:%s):[^\]]*\]' % '|'.join(
    re.escape(prefix) for prefix in TAG_PREFIXES
)

_result_arrow_regex = re.compile(RESULT_ARROW_PATTERN)
_bracket_tag_regex = re.compile(BRACKET_TAG_PATTERN)


def line_type(line: str) -> Optional[TokenType]:
    """Return the line-level token type of ``line``, if any."""
    trimmed = line.lstrip()
    for prefix, token_type in LINE_START_PATTERNS:
        if trimmed.startswith(prefix):
            return token_type
    return None


def _inline_spans(line: str, level: Optional[TokenType]) -> List[Tuple[int, int, TokenType]]:
    spans = []

    if level is not TokenType.CONSEQUENCE:
        for match in _result_arrow_regex.finditer(line):
            spans.append((match.start(), match.end(), TokenType.RESULT))

    for match in _bracket_tag_regex.finditer(line):
        spans.append((match.start(), match.end(), TokenType.TAG))

    # Leftmost wins, longer span wins a tie; anything starting inside an
    # accepted span is dropped.
    spans.sort(key=lambda span: (span[0], -(span[1] - span[0])))
    accepted = []
    pos = 0
    for start, end, token_type in spans:
        if start < pos:
            continue
        accepted.append((start, end, token_type))
        pos = end
    return accepted


def tokenize_line(line: str) -> List[Token]:
    """
    Tokenize a single line of Lonelog notation.

    Args:
        line: One line of text, without its trailing newline

    Returns:
        Tokens ordered by position whose texts concatenate to ``line``
    """
    level = line_type(line)
    fill = level or TokenType.TEXT

    tokens = []
    pos = 0
    for start, end, token_type in _inline_spans(line, level):
        if start > pos:
            tokens.append(Token(fill, pos, start, line[pos:start]))
        tokens.append(Token(token_type, start, end, line[start:end]))
        pos = end

    if pos < len(line):
        tokens.append(Token(fill, pos, len(line), line[pos:]))

    return tokens


def tokenize(text: str) -> List[List[Token]]:
    """Tokenize every line of a document, one token list per line."""
    return [tokenize_line(line) for line in text.split('\n')]
