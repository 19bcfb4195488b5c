#!/usr/bin/env python3
"""
Demo script for the log format classification system.
"""

import tempfile
from pathlib import Path

from logformats import EventRecord, StatusRecord, default_format
from logformats.io_utils import JSONLWriter


def create_sample_logs():
    """Create sample log lines for classification."""
    return [
        "[INFO] [test] [a] [b] [c] This is a test.",
        "[1:2:3] [INFO] [test] [a] [b] [c] myid { a = 1, b='hello this is James'; c= \"\"} ",
        "[12:00:01] [WARN] [network] [tcp] Retransmission timeout after 3 attempts",
        "[12:00:02] [INFO] [network] [tcp] link0 { state = up, peer = \"10.0.0.1\" }",
        "[ERROR] [storage] disk0 { status = \"read \\\"sector 7\\\" failed\" }",
        "Some unrelated line without a header",
    ]


def main():
    """Run the demo."""
    print("🚀 Log Format Classification Demo")
    print("=" * 50)

    log_format = default_format()
    records = []

    for i, line in enumerate(create_sample_logs(), 1):
        record = log_format.classify(line)
        records.append(record)

        print(f"\n{i}. {line}")
        print(f"   → {record.kind.value.upper()}")
        if isinstance(record, EventRecord):
            print(f"     level={record.level} system={record.system} tags={record.tags}")
            print(f"     message: {record.message}")
        elif isinstance(record, StatusRecord):
            print(f"     level={record.level} system={record.system} tags={record.tags}")
            print(f"     id={record.id}")
            for key, value in record.assignments.items():
                print(f"       {key} = {value}")

    with tempfile.TemporaryDirectory() as temp_dir:
        output_file = Path(temp_dir) / "records.jsonl"
        with JSONLWriter(str(output_file)) as writer:
            writer.write_records(records)

        print(f"\n💾 JSONL output:")
        print(output_file.read_text(encoding='utf-8'))


if __name__ == "__main__":
    main()
