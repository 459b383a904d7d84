"""
Auto-completion for partially typed Lonelog tags.

Flow for a host editor:
1. ``detect_trigger`` decides whether the cursor sits inside an unclosed
   [N:, [#N:, [L:, [Thread: or [PC: tag and which text to replace
2. ``suggest`` filters and ranks known names of that kind
3. ``compose`` / ``apply_suggestion`` build the replacement for the pick
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from lonelog.exceptions import InvalidCursorError

from .models import DEFAULT_THREAD_STATE, EntityKind, ParsedDocument
from .parser import NotationParser

logger = logging.getLogger(__name__)

# Opening prefixes that trigger completion, and the kind each completes
TRIGGER_PREFIXES = {
    '#N': EntityKind.NPC,
    'N': EntityKind.NPC,
    'L': EntityKind.LOCATION,
    'Thread': EntityKind.THREAD,
    'PC': EntityKind.PC,
}
REFERENCE_PREFIX = '#N'

TRIGGER_PATTERN = r'\[(%s):([^\[\]|]*)$' % '|'.join(
    re.escape(prefix) for prefix in TRIGGER_PREFIXES
)
_trigger_regex = re.compile(TRIGGER_PATTERN)


@dataclass(frozen=True)
class TriggerInfo:
    """Where a completion applies within one line."""
    kind: EntityKind
    query: str
    start: int
    end: int
    is_reference: bool = False


@dataclass(frozen=True)
class Candidate:
    """A completion candidate drawn from a parsed document."""
    name: str
    kind: EntityKind
    tags: Tuple[str, ...] = ()
    state: Optional[str] = None

    @property
    def display_text(self) -> str:
        if self.kind is EntityKind.THREAD:
            return f"{self.name} [{self.state or DEFAULT_THREAD_STATE}]"
        if self.tags:
            return f"{self.name} ({', '.join(self.tags)})"
        return self.name


@dataclass(frozen=True)
class Completion:
    """Replacement text and the cursor position within it."""
    text: str
    cursor_offset: int


def _check_cursor(line: str, position: int) -> None:
    if position < 0 or position > len(line):
        raise InvalidCursorError(
            f"Cursor {position} is outside line of length {len(line)}"
        )


def detect_trigger(line: str, cursor: int) -> Optional[TriggerInfo]:
    """
    Decide whether the cursor is inside an unclosed, completable tag.

    Args:
        line: Text of the line holding the cursor
        cursor: Cursor column within ``line``

    Returns:
        TriggerInfo for the query to replace, or None

    Raises:
        InvalidCursorError: If ``cursor`` is outside the line
    """
    _check_cursor(line, cursor)

    match = _trigger_regex.search(line[:cursor])
    if not match:
        return None

    prefix, query = match.group(1), match.group(2)
    return TriggerInfo(
        kind=TRIGGER_PREFIXES[prefix],
        query=query,
        start=cursor - len(query),
        end=cursor,
        is_reference=prefix == REFERENCE_PREFIX,
    )


def _rank(name: str, query: str) -> Tuple[int, str, str]:
    lowered = name.lower()
    if lowered == query:
        tier = 0
    elif lowered.startswith(query):
        tier = 1
    else:
        tier = 2
    return (tier, name.casefold(), name)


def rank_names(names: Sequence[str], query: str) -> List[str]:
    """
    Filter names containing ``query`` and order them by relevance.

    Exact (case-insensitive) matches come first, then names starting with
    the query, then the rest; each tier is alphabetical.
    """
    query = query.lower()
    matching = [name for name in names if query in name.lower()]
    return sorted(matching, key=lambda name: _rank(name, query))


def suggest(document: ParsedDocument, kind: EntityKind, query: str) -> List[Candidate]:
    """
    Rank known elements of one kind against a partial name.

    Args:
        document: Parsed document supplying the known names
        kind: Kind of element being completed
        query: Text typed so far (empty matches everything)

    Returns:
        Ranked candidates
    """
    kind = EntityKind(kind)
    candidates = []
    for name in rank_names(document.names(kind), query):
        element = document.get(kind, name)
        if kind is EntityKind.THREAD:
            candidates.append(Candidate(name=name, kind=kind, state=element.state))
        else:
            candidates.append(Candidate(name=name, kind=kind, tags=element.tags))
    return candidates


def compose(candidate: Candidate, is_reference: bool = False) -> Completion:
    """
    Build the text that replaces the query for a chosen candidate.

    References only close the tag. Defining tags carry the entity's known
    tags (or an empty tag slot), threads restart at ``Open``, and the cursor
    lands just before the closing bracket.
    """
    if is_reference:
        text = f"{candidate.name}]"
        return Completion(text=text, cursor_offset=len(text))

    if candidate.kind is EntityKind.THREAD:
        text = f"{candidate.name}|{DEFAULT_THREAD_STATE}]"
    elif candidate.tags:
        text = f"{candidate.name}|{'|'.join(candidate.tags)}]"
    else:
        text = f"{candidate.name}|]"

    return Completion(text=text, cursor_offset=len(text) - 1)


def apply_suggestion(line: str, trigger: TriggerInfo,
                     candidate: Candidate) -> Tuple[str, int]:
    """
    Splice a chosen candidate into a line.

    Args:
        line: The line the trigger was detected on
        trigger: Result of ``detect_trigger`` for that line
        candidate: The selected candidate

    Returns:
        (new line, new cursor column)

    Raises:
        InvalidCursorError: If the trigger range does not fit the line
    """
    _check_cursor(line, trigger.start)
    _check_cursor(line, trigger.end)
    if trigger.start > trigger.end:
        raise InvalidCursorError(
            f"Replacement range {trigger.start}-{trigger.end} is reversed"
        )

    completion = compose(candidate, trigger.is_reference)
    new_line = line[:trigger.start] + completion.text + line[trigger.end:]
    return new_line, trigger.start + completion.cursor_offset


class SuggestionEngine:
    """Completion front end that keeps its own parser cache.

    One engine per open document keeps the cache warm while the user types.
    """

    def __init__(self, parser: Optional[NotationParser] = None):
        self.parser = parser or NotationParser()

    def complete(self, document: str, line: str,
                 cursor: int) -> Optional[Tuple[TriggerInfo, List[Candidate]]]:
        """
        Detect a trigger at the cursor and rank candidates for it.

        Args:
            document: Full document text
            line: The line holding the cursor
            cursor: Cursor column within ``line``

        Returns:
            (trigger, candidates), or None when the cursor is not in a tag
        """
        trigger = detect_trigger(line, cursor)
        if trigger is None:
            return None

        parsed = self.parser.parse(document)
        candidates = suggest(parsed, trigger.kind, trigger.query)
        logger.debug("%d %s candidates for %r", len(candidates),
                     trigger.kind.value, trigger.query)
        return trigger, candidates
