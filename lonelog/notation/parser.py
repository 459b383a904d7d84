"""
Parser for Lonelog notation elements.

Extracts structured story elements from bracket tags:
- [N:Name|tag|tag], [L:Name|tag], [PC:Name|tag]  named entities
- [Thread:Name|State]                            narrative threads
- [E:Name X/Y], [Track:Name X/Y], [Timer:Name X] progress elements
"""

import bisect
import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from lonelog.exceptions import DocumentReadError

from .models import (
    DEFAULT_THREAD_STATE,
    NamedEntity,
    ParsedDocument,
    ProgressElement,
    ProgressKind,
    Thread,
)

logger = logging.getLogger(__name__)


class _LineIndex:
    """Maps character offsets to 0-indexed line numbers."""

    def __init__(self, text: str):
        self._newlines = [m.start() for m in re.finditer('\n', text)]

    def line_of(self, offset: int) -> int:
        # number of newlines strictly before offset
        return bisect.bisect_left(self._newlines, offset)


def _split_tags(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [tag.strip() for tag in raw.split('|') if tag.strip()]


class NotationParser:
    """Parser for Lonelog bracket notation.

    Each instance remembers the last text it parsed and the resulting
    document, so repeated calls with unchanged text skip the scans. Use one
    parser per document to keep documents from evicting each other.
    """

    # Regex patterns for each element kind
    NPC_PATTERN = r'\[N:([^\]|]+)(\|([^\]]*))?\]'
    LOCATION_PATTERN = r'\[L:([^\]|]+)(\|([^\]]*))?\]'
    PC_PATTERN = r'\[PC:([^\]|]+)(\|([^\]]*))?\]'
    THREAD_PATTERN = r'\[Thread:([^\]|]+)(\|([^\]]*))?\]'
    CLOCK_PATTERN = r'\[E:([^\]]+)\s+([0-9]+)/([0-9]+)\]'
    TRACK_PATTERN = r'\[Track:([^\]]+)\s+([0-9]+)/([0-9]+)\]'
    TIMER_PATTERN = r'\[Timer:([^\]]+)\s+([0-9]+)\]'

    def __init__(self):
        """Initialize parser with compiled regex patterns."""
        self._npc_regex = re.compile(self.NPC_PATTERN)
        self._location_regex = re.compile(self.LOCATION_PATTERN)
        self._pc_regex = re.compile(self.PC_PATTERN)
        self._thread_regex = re.compile(self.THREAD_PATTERN)
        self._progress_regexes = (
            (ProgressKind.CLOCK, re.compile(self.CLOCK_PATTERN)),
            (ProgressKind.TRACK, re.compile(self.TRACK_PATTERN)),
            (ProgressKind.TIMER, re.compile(self.TIMER_PATTERN)),
        )

        self._last_text: Optional[str] = None
        self._last_result: Optional[ParsedDocument] = None
        self.scan_count = 0

    def parse(self, text: str) -> ParsedDocument:
        """
        Parse all notation elements from a document.

        Args:
            text: Full document text

        Returns:
            ParsedDocument snapshot; the cached one if ``text`` is unchanged
        """
        if self._last_result is not None and self._last_text == text:
            logger.debug("Parse cache hit (%d chars)", len(text))
            return self._last_result

        lines = _LineIndex(text)
        result = ParsedDocument(
            npcs=self._scan_entities(self._npc_regex, text, lines),
            locations=self._scan_entities(self._location_regex, text, lines),
            pcs=self._scan_entities(self._pc_regex, text, lines),
            threads=self._scan_threads(text, lines),
            progress=self._scan_progress(text, lines),
        )
        self.scan_count += 1
        logger.debug("Parsed %d chars: %r", len(text), result)

        self._last_text = text
        self._last_result = result
        return result

    def clear_cache(self) -> None:
        """Forget the cached document."""
        self._last_text = None
        self._last_result = None

    def _scan_entities(self, regex: "re.Pattern", text: str,
                       lines: _LineIndex) -> Dict[str, NamedEntity]:
        """
        Collect named entities for one prefix.

        Repeated names accumulate mentions and gain any tags not seen yet;
        existing tags are never removed or reordered.
        """
        tags_by_name: Dict[str, List[str]] = {}
        mentions_by_name: Dict[str, List[int]] = {}

        for match in regex.finditer(text):
            name = match.group(1).strip()
            if not name:
                continue
            line = lines.line_of(match.start())

            if name in tags_by_name:
                mentions = mentions_by_name[name]
                if mentions[-1] != line:
                    mentions.append(line)
                known = tags_by_name[name]
                for tag in _split_tags(match.group(3)):
                    if tag not in known:
                        known.append(tag)
            else:
                tags_by_name[name] = list(dict.fromkeys(_split_tags(match.group(3))))
                mentions_by_name[name] = [line]

        return {
            name: NamedEntity(
                name=name,
                tags=tuple(tags),
                mentions=tuple(mentions_by_name[name]),
            )
            for name, tags in tags_by_name.items()
        }

    def _scan_threads(self, text: str, lines: _LineIndex) -> Dict[str, Thread]:
        """Collect threads; the latest mention's state replaces earlier ones."""
        states: Dict[str, str] = {}
        mentions_by_name: Dict[str, List[int]] = {}

        for match in self._thread_regex.finditer(text):
            name = match.group(1).strip()
            if not name:
                continue
            state = (match.group(3) or '').strip() or DEFAULT_THREAD_STATE
            line = lines.line_of(match.start())

            mentions = mentions_by_name.setdefault(name, [])
            if not mentions or mentions[-1] != line:
                mentions.append(line)
            states[name] = state

        return {
            name: Thread(name=name, state=states[name], mentions=tuple(mentions))
            for name, mentions in mentions_by_name.items()
        }

    def _scan_progress(self, text: str, lines: _LineIndex) -> Tuple[ProgressElement, ...]:
        """Collect clocks, then tracks, then timers, one record per match."""
        progress = []

        for kind, regex in self._progress_regexes:
            for match in regex.finditer(text):
                name = match.group(1).strip()
                if not name:
                    continue
                progress.append(ProgressElement(
                    kind=kind,
                    name=name,
                    current=int(match.group(2)),
                    max=int(match.group(3)) if kind is not ProgressKind.TIMER else None,
                    line=lines.line_of(match.start()),
                ))

        return tuple(progress)


def parse_notation(text: str) -> ParsedDocument:
    """
    Parse Lonelog notation from a document.

    This is a convenience function that uses a throwaway parser, so nothing
    is cached between calls.

    Args:
        text: Full document text

    Returns:
        ParsedDocument snapshot
    """
    return NotationParser().parse(text)


def read_document(file_path: Union[str, Path]) -> str:
    """
    Read a UTF-8 document from disk.

    Raises:
        DocumentReadError: if the file cannot be opened or decoded
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise DocumentReadError(f"not valid UTF-8: {file_path}: {e}") from e
    except OSError as e:
        raise DocumentReadError(f"cannot read {file_path}: {e}") from e


def parse_notation_file(file_path: Union[str, Path]) -> ParsedDocument:
    """
    Parse notation from a file.

    Args:
        file_path: Path to a UTF-8 text file

    Returns:
        ParsedDocument snapshot

    Raises:
        DocumentReadError: if the file cannot be opened or decoded
    """
    return parse_notation(read_document(file_path))
