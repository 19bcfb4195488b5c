"""
Tests for the log format matcher.
"""

import unittest
from concurrent.futures import ThreadPoolExecutor

from logformats.format import ConfigError, LogFormat
from logformats.defaults import default_format, default_definition
from logformats.models import EventRecord, StatusRecord, OtherRecord, FormatDefinition
from tests.test_data.log_samples import (
    EVENT_LINE, STATUS_LINE, OTHER_LINE, MIXED_STATUS_LINE,
    ESCAPED_QUOTE_LINE, MIXED_SAMPLES, ODD_LINES
)


class TestClassify(unittest.TestCase):
    """Test classification with the built-in format."""

    def setUp(self):
        self.format = default_format()

    def test_event_line(self):
        record = self.format.classify(EVENT_LINE)

        self.assertEqual(record, EventRecord(
            timestamp="",
            level="INFO",
            system="test",
            tags=["a", "b", "c"],
            message="This is a test."
        ))

    def test_status_line(self):
        record = self.format.classify(STATUS_LINE)

        self.assertEqual(record, StatusRecord(
            timestamp="",
            level="INFO",
            system="test",
            tags=["a"],
            id="myid",
            assignments={"k": "1"}
        ))

    def test_line_without_header(self):
        record = self.format.classify(OTHER_LINE)
        self.assertEqual(record, OtherRecord(message=OTHER_LINE))

    def test_status_with_timestamp_and_quoted_values(self):
        record = self.format.classify(MIXED_STATUS_LINE)

        self.assertIsInstance(record, StatusRecord)
        self.assertEqual(record.timestamp, "1:2:3")
        self.assertEqual(record.tags, ["a", "b", "c"])
        self.assertEqual(record.id, "myid")
        self.assertEqual(record.assignments, {
            "a": "1",
            "b": "'hello this is James'",
            "c": '""',
        })

    def test_escaped_quotes_captured_whole(self):
        record = self.format.classify(ESCAPED_QUOTE_LINE)

        self.assertIsInstance(record, StatusRecord)
        self.assertEqual(record.id, "disk0")
        self.assertEqual(record.assignments, {"status": '"read \\"sector 7\\" failed"'})

    def test_status_wins_over_event(self):
        # The event pattern (.*) would match the status body too
        filter_match = self.format.filter.match(STATUS_LINE)
        self.assertIsNotNone(self.format.event.search(STATUS_LINE, filter_match.end()))

        self.assertIsInstance(self.format.classify(STATUS_LINE), StatusRecord)

    def test_tag_order_and_duplicates(self):
        record = self.format.classify("[INFO] [sys] [b] [a] [b] hello")
        self.assertEqual(record.tags, ["b", "a", "b"])

    def test_no_tags(self):
        record = self.format.classify("[INFO] [sys] hello")
        self.assertEqual(record.tags, [])
        self.assertEqual(record.message, "hello")

    def test_duplicate_key_last_wins(self):
        record = self.format.classify("[INFO] [sys] node { k = 1, k = 2 }")

        self.assertIsInstance(record, StatusRecord)
        self.assertEqual(record.assignments, {"k": "2"})

    def test_leading_whitespace_before_header(self):
        record = self.format.classify("   [WARN] [sys] spaced out")

        self.assertIsInstance(record, EventRecord)
        self.assertEqual(record.level, "WARN")
        self.assertEqual(record.message, "spaced out")

    def test_header_only_is_empty_event(self):
        record = self.format.classify("[INFO] [sys]")
        self.assertEqual(record, EventRecord("", "INFO", "sys", [], ""))

    def test_fallback_keeps_message_identical(self):
        lines = [
            "  weird \t line\r",
            "[info] [sys] lowercase level",
            "événement sans en-tête",
        ]
        for line in lines:
            with self.subTest(line=line):
                record = self.format.classify(line)
                self.assertIsInstance(record, OtherRecord)
                self.assertEqual(record.message, line)

    def test_mixed_samples(self):
        for line, expected_kind in MIXED_SAMPLES:
            with self.subTest(line=line):
                self.assertEqual(self.format.classify(line).kind.value, expected_kind)

    def test_totality(self):
        for line in ODD_LINES:
            with self.subTest(line=line[:40]):
                record = self.format.classify(line)
                self.assertIsInstance(record, (EventRecord, StatusRecord, OtherRecord))

    def test_classify_all_strips_line_terminators(self):
        records = list(self.format.classify_all([
            "[INFO] [sys] first\n",
            "plain line\r\n",
            "[INFO] [sys] node { a = 1 }",
        ]))

        self.assertEqual(records[0], EventRecord("", "INFO", "sys", [], "first"))
        self.assertEqual(records[1], OtherRecord("plain line"))
        self.assertIsInstance(records[2], StatusRecord)

    def test_concurrent_classification(self):
        lines = [line for line, _ in MIXED_SAMPLES] * 50
        expected = [self.format.classify(line) for line in lines]

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(self.format.classify, lines))

        self.assertEqual(results, expected)


class TestCustomFormats(unittest.TestCase):
    """Test formats built from caller-supplied patterns."""

    def test_header_match_without_body_match(self):
        log_format = LogFormat.build(
            r"\[(?P<level>\w+)\]\s*\[(?P<system>\w+)\]\s*",
            r"\w+",
            r"(?P<id>\w+) \{\}"
        )
        line = "[INFO] [sys] !!!"

        self.assertEqual(log_format.classify(line), OtherRecord(message=line))

    def test_status_searched_from_header_end(self):
        # "INFO]" would satisfy the status pattern if the search started at 0
        log_format = LogFormat.build(
            r"\[(?P<level>\w+)\]\s*",
            r"x",
            r"(?P<id>\w+)\]"
        )
        self.assertEqual(log_format.classify("[INFO]"), OtherRecord("[INFO]"))
        self.assertEqual(log_format.classify("[INFO] sys]"), StatusRecord("", "INFO", "", [], "sys"))
        self.assertEqual(log_format.classify("[INFO] x"), EventRecord("", "INFO", "", [], "x"))

    def test_missing_groups_default_to_empty(self):
        log_format = LogFormat.build(r"\[(?P<level>\w+)\]", r".*", r"(?P<id>\w+) \{\}")
        record = log_format.classify("[INFO] hello")

        self.assertEqual(record, EventRecord(
            timestamp="", level="INFO", system="", tags=[], message="hello"
        ))

    def test_status_without_assignment_groups(self):
        log_format = LogFormat.build(r"\[(?P<level>\w+)\]", r".*", r"(?P<id>\w+) \{\}")
        record = log_format.classify("[INFO] node {}")

        self.assertEqual(record, StatusRecord("", "INFO", "", [], "node", {}))

    def test_counted_quantifiers_survive_wrapping(self):
        log_format = LogFormat.build(r"\[(?P<level>[A-Z]{3,5})\]", r"\d{2}", r"(?P<id>x{2})")

        self.assertIsInstance(log_format.classify("[WARN] 42"), EventRecord)
        self.assertIsInstance(log_format.classify("[WARN] xx"), StatusRecord)
        self.assertIsInstance(log_format.classify("[WARNINGS] 42"), OtherRecord)

    def test_mismatched_keys_and_values_skips_status(self):
        log_format = LogFormat.build(
            r"\[(?P<level>\w+)\]\s*",
            r".*",
            r"(?P<id>\w+) \{(?: (?P<keys>\w+)(?:=(?P<values>\w+))?)* \}"
        )

        with self.assertLogs("logformats.format", level="WARNING") as logs:
            record = log_format.classify("[INFO] x { a=1 b }")

        self.assertEqual(record, EventRecord("", "INFO", "", [], "x { a=1 b }"))
        self.assertIn("2 keys but 1 values", logs.output[0])

    def test_mismatch_warned_once_per_format(self):
        log_format = LogFormat.build(
            r"\[(?P<level>\w+)\]\s*",
            r".*",
            r"(?P<id>\w+) \{(?: (?P<keys>\w+)(?:=(?P<values>\w+))?)* \}"
        )

        with self.assertLogs("logformats.format", level="DEBUG") as logs:
            for _ in range(3):
                log_format.classify("[INFO] x { a=1 b }")

        levels = [record.levelname for record in logs.records]
        self.assertEqual(levels, ["WARNING", "DEBUG", "DEBUG"])

    def test_body_patterns_anchored_at_line_end(self):
        log_format = LogFormat.build(r"\[(?P<level>\w+)\]\s*", r"\d{2}", r"(?P<id>zz)")

        self.assertEqual(log_format.classify("[WARN] 42"), EventRecord("", "WARN", "", [], "42"))
        self.assertIsInstance(log_format.classify("[WARN] zz  "), StatusRecord)

        for line in ("[WARN] 42 tail", "[WARN] zz tail"):
            with self.subTest(line=line):
                self.assertEqual(log_format.classify(line), OtherRecord(line))

    def test_build_equivalents(self):
        definition = default_definition()
        built = LogFormat.build(definition.filter, definition.event, definition.status)
        constructed = LogFormat(definition.filter, definition.event, definition.status)
        loaded = LogFormat.from_definition(definition)

        for log_format in (built, constructed, loaded):
            with self.subTest(log_format=log_format):
                self.assertEqual(log_format.definition, definition)
                self.assertIsInstance(log_format.classify(STATUS_LINE), StatusRecord)

    def test_format_attributes_are_read_only(self):
        log_format = default_format()
        with self.assertRaises(AttributeError):
            log_format.filter = None


class TestConfigErrors(unittest.TestCase):
    """Test format construction failures."""

    def test_missing_pattern(self):
        for role, args in (
            ("filter", (None, ".*", "x")),
            ("event", ("x", None, "x")),
            ("status", ("x", ".*", None)),
        ):
            with self.subTest(role=role):
                with self.assertRaises(ConfigError) as ctx:
                    LogFormat.build(*args)
                self.assertEqual(ctx.exception.role, role)

    def test_non_string_pattern(self):
        with self.assertRaises(ConfigError) as ctx:
            LogFormat.build("x", 42, "x")
        self.assertEqual(ctx.exception.role, "event")

    def test_uncompilable_pattern(self):
        for role, args in (
            ("filter", ("(", ".*", "x")),
            ("event", ("x", "[a-", "x")),
            ("status", ("x", ".*", "(?P<id>x")),
        ):
            with self.subTest(role=role):
                with self.assertRaises(ConfigError) as ctx:
                    LogFormat.build(*args)
                self.assertEqual(ctx.exception.role, role)

    def test_config_error_is_value_error(self):
        with self.assertRaises(ValueError):
            LogFormat.from_definition(FormatDefinition(filter=")", event=".*", status="x"))


if __name__ == '__main__':
    unittest.main()
