"""
Session and scene outline extraction.

Recognized markers:
- ``## Session 3 Optional title`` opens a session
- ``Date: 2025-01-15`` on the line after a session header dates it
- ``### S1 *context*`` or ``### S1 context`` adds a scene to the open session
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

SESSION_PATTERN = r'^##\s+Session\s+([0-9]+)(.*)$'
SESSION_DATE_PATTERN = r'Date:\s*([0-9]{4}-[0-9]{2}-[0-9]{2})'
SCENE_PATTERN = r'^###\s+(S[\d.a-zA-Z-]+)\s*\*([^*]*)\*'
SIMPLE_SCENE_PATTERN = r'^###\s+(S[\d.a-zA-Z-]+)(?:\s+(.*))?$'
NUMBERED_SCENE_PATTERN = r'^### S([0-9]+)'
SESSION_NUMBER_PATTERN = r'^## Session ([0-9]+)'
SESSION_HEADER_PREFIX = '## Session '
DEFAULT_SCENE_CONTEXT = 'Scene'

_session_regex = re.compile(SESSION_PATTERN)
_session_date_regex = re.compile(SESSION_DATE_PATTERN)
_scene_regex = re.compile(SCENE_PATTERN)
_simple_scene_regex = re.compile(SIMPLE_SCENE_PATTERN)
_numbered_scene_regex = re.compile(NUMBERED_SCENE_PATTERN)
_session_number_regex = re.compile(SESSION_NUMBER_PATTERN, re.MULTILINE)


@dataclass
class Scene:
    """A scene marker inside a session."""
    number: str
    context: str
    line: int

    def to_dict(self) -> Dict[str, Any]:
        return {'number': self.number, 'context': self.context, 'line': self.line}


@dataclass
class Session:
    """A play session and the scenes recorded under it."""
    number: int
    title: str
    line: int
    date: Optional[str] = None
    scenes: List[Scene] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'number': self.number,
            'title': self.title,
            'line': self.line,
            'date': self.date,
            'scenes': [s.to_dict() for s in self.scenes],
        }


def _match_scene(line: str, index: int) -> Optional[Scene]:
    match = _scene_regex.match(line)
    if match:
        return Scene(
            number=match.group(1),
            context=match.group(2).strip() or DEFAULT_SCENE_CONTEXT,
            line=index,
        )

    match = _simple_scene_regex.match(line)
    if match:
        return Scene(
            number=match.group(1),
            context=(match.group(2) or '').strip() or DEFAULT_SCENE_CONTEXT,
            line=index,
        )

    return None


def parse_sessions(text: str) -> List[Session]:
    """
    Build the session/scene outline of a document.

    Scenes that appear before the first session header are ignored.

    Args:
        text: Full document text

    Returns:
        Sessions in document order
    """
    lines = text.split('\n')
    sessions: List[Session] = []
    current: Optional[Session] = None

    for index, line in enumerate(lines):
        session_match = _session_regex.match(line)
        if session_match:
            number = session_match.group(1)
            current = Session(
                number=int(number),
                title=session_match.group(2).strip() or f"Session {number}",
                line=index,
            )
            if index + 1 < len(lines):
                date_match = _session_date_regex.search(lines[index + 1])
                if date_match:
                    current.date = date_match.group(1)
            sessions.append(current)
            continue

        if current is None:
            continue

        scene = _match_scene(line, index)
        if scene is not None:
            current.scenes.append(scene)

    return sessions


def next_scene_number(text: str, cursor_line: int) -> str:
    """
    Suggest the next scene marker for the session holding ``cursor_line``.

    The session spans from the nearest session header at or above the
    cursor to the next header below it (or the whole document when there
    is none above).

    Returns:
        Scene marker such as ``S4``
    """
    lines = text.split('\n')
    cursor_line = max(0, min(cursor_line, len(lines) - 1))

    start = 0
    for index in range(cursor_line, -1, -1):
        if lines[index].startswith(SESSION_HEADER_PREFIX):
            start = index
            break

    stop = len(lines)
    for index in range(cursor_line + 1, len(lines)):
        if lines[index].startswith(SESSION_HEADER_PREFIX):
            stop = index
            break

    last_scene = 0
    for line in lines[start:stop]:
        match = _numbered_scene_regex.match(line)
        if match:
            last_scene = max(last_scene, int(match.group(1)))

    return f"S{last_scene + 1}"


def next_session_number(text: str) -> int:
    """Number for a new session: one past the highest ``## Session N``."""
    numbers = [int(m.group(1)) for m in _session_number_regex.finditer(text)]
    return max(numbers, default=0) + 1
