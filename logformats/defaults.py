"""
Built-in log format.

Accepts lines of the form::

    [12:00:01] [INFO] [network] [tcp] [conn] free text message
    [INFO] [network] [tcp] link0 { state = up, peer = "10.0.0.1"; mtu = 1500 }

The timestamp group is optional and must contain at least one digit.
"""

from .format import LogFormat
from .models import FormatDefinition


DEFAULT_FILTER = (
    r"(?:\[(?P<timestamp>[^\]]*\d[^\]]*)\]\s*)?"
    r"\[(?P<level>[A-Z]+)\]\s*"
    r"\[(?P<system>[^\]\s]+)\]\s*"
    r"(?:\[(?P<tags>[^\]\s]+)\]\s*)*"
)

DEFAULT_EVENT = r".*"

# Values may be quoted strings (shorthand) or bare words
DEFAULT_STATUS = (
    r"(?P<id>[\w.:-]+)\s*\{\s*"
    r"(?:(?P<keys>\w+)\s*=\s*(?P<values>\"|\'|[^\s,;{}]*)\s*[,;]?\s*)*"
    r"\}"
)


def default_definition() -> FormatDefinition:
    return FormatDefinition(filter=DEFAULT_FILTER, event=DEFAULT_EVENT, status=DEFAULT_STATUS)


def default_format() -> LogFormat:
    """Get a freshly compiled copy of the built-in format."""
    return LogFormat.from_definition(default_definition())
