"""
Log format matcher.

A format is made of three patterns: a header (filter) pattern anchored at the
start of a line, and two body patterns anchored at the end of it. The status
body is tried before the event body, both starting where the header ended.
"""

import logging
import threading
from typing import Dict, Iterable, Iterator, List, Optional

import regex

from .models import (
    ClassificationResult, EventRecord, FormatDefinition, OtherRecord, StatusRecord
)
from .preprocess import expand


logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when a log format cannot be built from its patterns."""

    def __init__(self, message: str, role: Optional[str] = None):
        super().__init__(message)
        self.role = role


class LogFormat:
    """
    A compiled log format with which incoming log messages are classified.

    Instances are immutable once constructed and may be shared between
    threads. The only thing ``classify`` remembers is whether a keys/values
    mismatch has already been reported at WARNING level.
    """

    def __init__(self, filter: str, event: str, status: str):
        """
        Create a new log format from the given patterns.

        Args:
            filter: Header pattern exposing ``timestamp``, ``level``, ``system``
                and a repeatable ``tags`` group
            event: Free-text body pattern, captured whole as ``message``
            status: Status body pattern exposing ``id`` and repeatable
                ``keys`` / ``values`` groups

        Raises:
            ConfigError: If a pattern is missing or fails to compile
        """
        self._definition = FormatDefinition(filter=filter, event=event, status=status)
        self._filter = self._compile("filter", filter, r"^\s*(?:{})")
        self._event = self._compile("event", event, r"\s*(?P<message>{})\s*$")
        self._status = self._compile("status", status, r"\s*(?:{})\s*$")

        # Held forever once the first keys/values mismatch has been reported
        self._mismatch_reported = threading.Lock()

    @classmethod
    def build(cls, filter_pattern: str, event_pattern: str, status_pattern: str) -> 'LogFormat':
        """Build a format from its three pattern strings."""
        return cls(filter_pattern, event_pattern, status_pattern)

    @classmethod
    def from_definition(cls, definition: FormatDefinition) -> 'LogFormat':
        return cls(definition.filter, definition.event, definition.status)

    @staticmethod
    def _compile(role: str, pattern: str, template: str) -> regex.Pattern:
        if pattern is None:
            raise ConfigError(f"Missing {role} pattern", role=role)
        if not isinstance(pattern, str):
            raise ConfigError(
                f"The {role} pattern must be a string, got {type(pattern).__name__}",
                role=role
            )

        # str.format would trip over the braces of {m,n} quantifiers
        source = template.replace("{}", expand(pattern))
        try:
            return regex.compile(source)
        except regex.error as e:
            raise ConfigError(f"Invalid {role} pattern {pattern!r}: {e}", role=role) from e

    @property
    def definition(self) -> FormatDefinition:
        return self._definition

    @property
    def filter(self) -> regex.Pattern:
        return self._filter

    @property
    def event(self) -> regex.Pattern:
        return self._event

    @property
    def status(self) -> regex.Pattern:
        return self._status

    def classify(self, message: str) -> ClassificationResult:
        """
        Classify a single log message.

        Args:
            message: The log line to classify

        Returns:
            A StatusRecord or EventRecord when the header and one of the body
            patterns match, otherwise an OtherRecord holding the original line
        """
        # First attempt to parse header
        filter_match = self._filter.match(message)
        if filter_match is None:
            return OtherRecord(message=message)

        header = self._header_fields(filter_match)
        body_start = filter_match.end()

        status_match = self._status.search(message, body_start)
        if status_match is not None:
            assignments = self._assignments(status_match, message)
            if assignments is not None:
                return StatusRecord(
                    id=self._group(status_match, "id"),
                    assignments=assignments,
                    **header
                )

        event_match = self._event.search(message, body_start)
        if event_match is not None:
            return EventRecord(message=event_match.group("message"), **header)

        return OtherRecord(message=message)

    def classify_all(self, lines: Iterable[str]) -> Iterator[ClassificationResult]:
        """Lazily classify lines, dropping one trailing line terminator from each."""
        for line in lines:
            if line.endswith("\r\n"):
                line = line[:-2]
            elif line.endswith("\n"):
                line = line[:-1]
            yield self.classify(line)

    def _header_fields(self, match) -> dict:
        return {
            "timestamp": self._group(match, "timestamp"),
            "level": self._group(match, "level"),
            "system": self._group(match, "system"),
            "tags": self._captures(match, "tags"),
        }

    def _assignments(self, match, message: str) -> Optional[Dict[str, str]]:
        keys = self._captures(match, "keys")
        values = self._captures(match, "values")
        if len(keys) != len(values):
            log = logger.debug
            if self._mismatch_reported.acquire(blocking=False):
                log = logger.warning
            log(
                "Status pattern captured %d keys but %d values in %r; "
                "skipping status stage", len(keys), len(values), message
            )
            return None

        # Later assignments to the same key win
        return dict(zip(keys, values))

    @staticmethod
    def _group(match, name: str) -> str:
        if name not in match.re.groupindex:
            return ""
        return match.group(name) or ""

    @staticmethod
    def _captures(match, name: str) -> List[str]:
        if name not in match.re.groupindex:
            return []
        return list(match.captures(name))

    def __repr__(self) -> str:
        return (f"LogFormat(filter={self._definition.filter!r}, "
                f"event={self._definition.event!r}, status={self._definition.status!r})")
