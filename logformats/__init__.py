"""
Log Format Classification System

A Python library for classifying free-form log lines against a user-supplied
format grammar and extracting structured event and status records from them.
"""

__version__ = "1.0.0"
__author__ = "Log Format Classification System"

from .models import (
    ClassificationResult, EventRecord, FormatDefinition, OtherRecord,
    RecordKind, StatusRecord
)
from .preprocess import expand
from .format import ConfigError, LogFormat
from .defaults import default_format
from .io_utils import FormatLoadError, JSONLWriter, load_format

__all__ = [
    "ClassificationResult",
    "EventRecord",
    "StatusRecord",
    "OtherRecord",
    "RecordKind",
    "FormatDefinition",
    "expand",
    "ConfigError",
    "LogFormat",
    "default_format",
    "FormatLoadError",
    "JSONLWriter",
    "load_format"
]
