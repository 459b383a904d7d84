"""
Data models for parsed Lonelog notation.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple


class EntityKind(str, Enum):
    """Kinds of named elements that can be looked up and completed."""
    NPC = "npc"
    LOCATION = "location"
    THREAD = "thread"
    PC = "pc"


class ProgressKind(str, Enum):
    """Kinds of numeric progress elements."""
    CLOCK = "clock"
    TRACK = "track"
    TIMER = "timer"


DEFAULT_THREAD_STATE = "Open"


@dataclass(frozen=True)
class NamedEntity:
    """An NPC, location or PC with accumulated tags and mention history."""
    name: str
    mentions: Tuple[int, ...]
    tags: Tuple[str, ...] = ()

    def __post_init__(self):
        if not self.mentions:
            raise ValueError(f"entity {self.name!r} must have at least one mention")

    @property
    def first_mention(self) -> int:
        return self.mentions[0]

    @property
    def last_mention(self) -> int:
        return self.mentions[-1]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'name': self.name,
            'tags': list(self.tags),
            'mentions': list(self.mentions),
            'first_mention': self.first_mention,
            'last_mention': self.last_mention,
        }

    def __repr__(self):
        return f"NamedEntity({self.name}|{'|'.join(self.tags)})"


@dataclass(frozen=True)
class Thread:
    """A narrative thread; ``state`` is whatever its latest mention declared."""
    name: str
    mentions: Tuple[int, ...]
    state: str = DEFAULT_THREAD_STATE

    def __post_init__(self):
        if not self.mentions:
            raise ValueError(f"thread {self.name!r} must have at least one mention")

    @property
    def first_mention(self) -> int:
        return self.mentions[0]

    @property
    def last_mention(self) -> int:
        return self.mentions[-1]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'name': self.name,
            'state': self.state,
            'mentions': list(self.mentions),
            'first_mention': self.first_mention,
            'last_mention': self.last_mention,
        }

    def __repr__(self):
        return f"Thread({self.name}|{self.state})"


@dataclass(frozen=True)
class ProgressElement:
    """A single clock, track or timer occurrence. Never merged by name."""
    kind: ProgressKind
    name: str
    current: int
    line: int
    max: Optional[int] = None

    @property
    def is_complete(self) -> bool:
        """True when a bounded element has reached its maximum."""
        return self.max is not None and self.current >= self.max

    @property
    def fraction(self) -> Optional[float]:
        """Filled share of a bounded element, ``None`` for timers."""
        if self.max is None:
            return None
        if self.max == 0:
            return 1.0
        return min(self.current / self.max, 1.0)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = {
            'kind': self.kind.value,
            'name': self.name,
            'current': self.current,
            'line': self.line,
        }
        if self.max is not None:
            data['max'] = self.max
        return data

    def __repr__(self):
        if self.max is None:
            return f"ProgressElement({self.kind.value}:{self.name} {self.current})"
        return f"ProgressElement({self.kind.value}:{self.name} {self.current}/{self.max})"


def _freeze(mapping: Optional[Mapping]) -> Mapping:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class ParsedDocument:
    """Read-only snapshot of every element found in one document.

    The four mappings are keyed by the exact trimmed name; ``progress``
    keeps one record per textual occurrence.
    """
    npcs: Mapping[str, NamedEntity] = field(default_factory=dict)
    locations: Mapping[str, NamedEntity] = field(default_factory=dict)
    pcs: Mapping[str, NamedEntity] = field(default_factory=dict)
    threads: Mapping[str, Thread] = field(default_factory=dict)
    progress: Tuple[ProgressElement, ...] = ()

    def __post_init__(self):
        # frozen dataclass: bypass __setattr__ to wrap the mappings once
        object.__setattr__(self, 'npcs', _freeze(self.npcs))
        object.__setattr__(self, 'locations', _freeze(self.locations))
        object.__setattr__(self, 'pcs', _freeze(self.pcs))
        object.__setattr__(self, 'threads', _freeze(self.threads))
        object.__setattr__(self, 'progress', tuple(self.progress))

    def _mapping_for(self, kind: EntityKind) -> Mapping:
        kind = EntityKind(kind)
        if kind is EntityKind.NPC:
            return self.npcs
        if kind is EntityKind.LOCATION:
            return self.locations
        if kind is EntityKind.PC:
            return self.pcs
        return self.threads

    def names(self, kind: EntityKind) -> Tuple[str, ...]:
        """All known names of one kind, in first-mention order."""
        return tuple(self._mapping_for(kind).keys())

    def get(self, kind: EntityKind, name: str):
        """Look up one entity or thread by exact name."""
        return self._mapping_for(kind).get(name)

    @property
    def total_entities(self) -> int:
        return len(self.npcs) + len(self.locations) + len(self.pcs) + len(self.threads)

    @property
    def clocks(self) -> Tuple[ProgressElement, ...]:
        return tuple(p for p in self.progress if p.kind is ProgressKind.CLOCK)

    @property
    def tracks(self) -> Tuple[ProgressElement, ...]:
        return tuple(p for p in self.progress if p.kind is ProgressKind.TRACK)

    @property
    def timers(self) -> Tuple[ProgressElement, ...]:
        return tuple(p for p in self.progress if p.kind is ProgressKind.TIMER)

    def is_empty(self) -> bool:
        """Check if the document contained any notation."""
        return not (self.total_entities or self.progress)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'npcs': [e.to_dict() for e in self.npcs.values()],
            'locations': [e.to_dict() for e in self.locations.values()],
            'pcs': [e.to_dict() for e in self.pcs.values()],
            'threads': [t.to_dict() for t in self.threads.values()],
            'progress': [p.to_dict() for p in self.progress],
            'stats': {
                'total_entities': self.total_entities,
                'total_progress': len(self.progress),
            }
        }

    def __repr__(self):
        return (f"ParsedDocument(npcs={len(self.npcs)}, "
                f"locations={len(self.locations)}, "
                f"pcs={len(self.pcs)}, "
                f"threads={len(self.threads)}, "
                f"progress={len(self.progress)})")
