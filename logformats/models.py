"""
Core data models for log format classification.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Union
from dataclasses_json import dataclass_json
from enum import Enum


class RecordKind(Enum):
    """The three kinds of classification result."""
    EVENT = "event"
    STATUS = "status"
    OTHER = "other"

    def __str__(self) -> str:
        return self.value


@dataclass_json
@dataclass(frozen=True)
class FormatDefinition:
    """The three pattern strings that make up a log format."""
    filter: str  # header grammar, anchored at the start of a line
    event: str  # free-text body grammar, anchored at the end
    status: str  # id + assignments body grammar, anchored at the end


@dataclass_json
@dataclass(frozen=True)
class EventRecord:
    """A line whose header matched and whose body is free text."""
    timestamp: str
    level: str
    system: str
    tags: List[str]
    message: str

    @property
    def kind(self) -> RecordKind:
        return RecordKind.EVENT

    def __str__(self) -> str:
        return (f"Event(level={self.level}, system={self.system}, "
                f"tags={self.tags}, message={self.message!r})")


@dataclass_json
@dataclass(frozen=True)
class StatusRecord:
    """A line whose header matched and whose body assigns values to an id."""
    timestamp: str
    level: str
    system: str
    tags: List[str]
    id: str
    assignments: Dict[str, str] = field(default_factory=dict)

    @property
    def kind(self) -> RecordKind:
        return RecordKind.STATUS

    def __str__(self) -> str:
        return (f"Status(level={self.level}, system={self.system}, "
                f"tags={self.tags}, id={self.id}, assignments={self.assignments})")


@dataclass_json
@dataclass(frozen=True)
class OtherRecord:
    """A line that could not be classified; holds the untouched text."""
    message: str

    @property
    def kind(self) -> RecordKind:
        return RecordKind.OTHER

    def __str__(self) -> str:
        return f"Other(message={self.message!r})"


# Exactly one of these is produced for every classified line.
ClassificationResult = Union[EventRecord, StatusRecord, OtherRecord]
