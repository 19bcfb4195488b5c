"""
I/O utilities for format documents and JSONL result output.
"""

import json
import xml.etree.ElementTree as ElementTree
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from .format import ConfigError, LogFormat
from .models import ClassificationResult, FormatDefinition


PATTERN_FIELDS = ("filter", "event", "status")


class FormatLoadError(ConfigError):
    """Raised when a format document cannot be read or is incomplete."""


def _local_name(tag: str) -> str:
    """Strip an ElementTree ``{namespace}`` prefix from a tag."""
    return tag.rsplit('}', 1)[-1]


def parse_xml_definition(text: str) -> FormatDefinition:
    """
    Parse a format definition from XML text.

    The root element's direct children named ``filter``, ``event`` and
    ``status`` provide the patterns; other children are ignored.
    """
    try:
        root = ElementTree.fromstring(text)
    except ElementTree.ParseError as e:
        raise FormatLoadError(f"Invalid format XML: {e}") from e

    patterns: Dict[str, str] = {}
    for element in root:
        name = _local_name(element.tag)
        if name in PATTERN_FIELDS:
            patterns[name] = "".join(element.itertext())

    return _definition_from_fields(patterns)


def parse_json_definition(text: str) -> FormatDefinition:
    """Parse a format definition from a JSON object."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise FormatLoadError(f"Invalid format JSON: {e}") from e

    if not isinstance(data, dict):
        raise FormatLoadError("Format JSON must be an object")

    return _definition_from_fields(data)


def _definition_from_fields(fields: Dict[str, Any]) -> FormatDefinition:
    for name in PATTERN_FIELDS:
        if name not in fields:
            raise FormatLoadError(f"Format document has no '{name}' pattern", role=name)
        if not isinstance(fields[name], str):
            raise FormatLoadError(f"The '{name}' pattern must be a string", role=name)

    return FormatDefinition.from_dict({name: fields[name] for name in PATTERN_FIELDS})


def load_definition(file_path: str) -> FormatDefinition:
    """
    Load a format definition from an XML or JSON document.

    The document kind is chosen by suffix; other files are sniffed.
    """
    path = Path(file_path)
    try:
        text = path.read_text(encoding='utf-8')
    except (IOError, UnicodeDecodeError) as e:
        raise FormatLoadError(f"Cannot read format file {path}: {e}") from e

    suffix = path.suffix.lower()
    if suffix == '.xml':
        return parse_xml_definition(text)
    if suffix == '.json':
        return parse_json_definition(text)
    if text.lstrip().startswith('<'):
        return parse_xml_definition(text)
    return parse_json_definition(text)


def load_format(file_path: str) -> LogFormat:
    """Load and compile a log format from the given document."""
    return LogFormat.from_definition(load_definition(file_path))


def save_definition(definition: FormatDefinition, file_path: str) -> None:
    """Save a format definition as JSON."""
    with open(file_path, 'w', encoding='utf-8') as f:
        json.dump(definition.to_dict(), f, indent=2, ensure_ascii=False)
        f.write('\n')


def record_to_dict(record: ClassificationResult,
                   line_number: Optional[int] = None) -> Dict[str, Any]:
    """Convert a classification result to a JSON-ready dict tagged with its kind."""
    record_dict = {'kind': record.kind.value}
    if line_number is not None:
        record_dict['line_number'] = line_number
    record_dict.update(record.to_dict())
    return record_dict


class JSONLWriter:
    """
    Writer for JSONL (JSON Lines) format.
    """

    def __init__(self, file_path: str):
        self.file_path = Path(file_path)
        self.file_handle = None

    def __enter__(self):
        self.file_handle = open(self.file_path, 'w', encoding='utf-8')
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.file_handle:
            self.file_handle.close()
            self.file_handle = None

    def write_record(self, record: ClassificationResult,
                     line_number: Optional[int] = None) -> None:
        """Write a single classification result to the JSONL file."""
        if not self.file_handle:
            raise ValueError("JSONLWriter not opened")

        json.dump(record_to_dict(record, line_number), self.file_handle, ensure_ascii=False)
        self.file_handle.write('\n')

    def write_records(self, records: Iterable[ClassificationResult]) -> None:
        """Write multiple results, numbering them from 1."""
        for line_number, record in enumerate(records, 1):
            self.write_record(record, line_number)
