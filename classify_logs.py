#!/usr/bin/env python3
"""
CLI tool for classifying log lines against a log format.

Usage:
    python classify_logs.py --format-file default.xml --in server.log --out records.csv
"""

import click
import csv
import json
import sys
import os
from pathlib import Path
from typing import Dict, Iterator, Optional, Set, Tuple
from collections import Counter, deque
from tqdm import tqdm

# Add the package to Python path
sys.path.insert(0, os.path.dirname(__file__))

from logformats import ConfigError, LogFormat, default_format, load_format
from logformats.io_utils import JSONLWriter
from logformats.logger import setup_logging
from logformats.models import ClassificationResult, OtherRecord, RecordKind


class ClassificationReport:
    """
    Accumulates statistics over classified log lines.
    """

    def __init__(self, max_unclassified_samples: int = 100):
        self.total_lines = 0
        self.kind_counts: Counter = Counter()
        self.level_stats: Counter = Counter()
        self.system_stats: Counter = Counter()
        self.tag_stats: Counter = Counter()
        self.unclassified_samples = []
        self.max_unclassified_samples = max_unclassified_samples

    def add(self, record: ClassificationResult) -> None:
        """Record one classified line."""
        self.total_lines += 1
        self.kind_counts[record.kind] += 1

        if isinstance(record, OtherRecord):
            if len(self.unclassified_samples) < self.max_unclassified_samples:
                self.unclassified_samples.append(record.message[:200])  # Truncate long lines
            return

        if record.level:
            self.level_stats[record.level.lower()] += 1
        self.system_stats[record.system] += 1
        self.tag_stats.update(record.tags)

    def get_summary(self) -> Dict:
        """Get summary statistics."""
        classified = self.total_lines - self.kind_counts[RecordKind.OTHER]
        classified_rate = (classified / self.total_lines * 100) if self.total_lines > 0 else 0

        return {
            'total_lines': self.total_lines,
            'event_lines': self.kind_counts[RecordKind.EVENT],
            'status_lines': self.kind_counts[RecordKind.STATUS],
            'other_lines': self.kind_counts[RecordKind.OTHER],
            'classified_rate': classified_rate,
            'level_distribution': dict(self.level_stats),
            'top_systems': self.system_stats.most_common(10),
            'top_tags': self.tag_stats.most_common(10),
            'unclassified_samples': self.unclassified_samples[:20]
        }


@click.command()
@click.option('--format-file', '-f',
              type=click.Path(exists=True, dir_okay=False),
              help='XML or JSON log format document (default: built-in format)')
@click.option('--input', '--in', 'input_file',
              required=True,
              type=click.Path(exists=True, dir_okay=False),
              help='Input log file to classify')
@click.option('--output', '--out', 'output_file',
              required=True,
              type=click.Path(),
              help='Output file for classified records')
@click.option('--output-format',
              type=click.Choice(['csv', 'jsonl', 'summary']),
              default='csv',
              help='Output format (default: csv)')
@click.option('--kind', 'kinds',
              multiple=True,
              type=click.Choice([kind.value for kind in RecordKind]),
              help='Only write records of this kind (can be specified multiple times)')
@click.option('--sample-lines',
              type=int,
              help='Process only first N lines (for testing)')
@click.option('--log-level',
              default='WARNING',
              envvar='LOGFORMATS_LOG_LEVEL',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              help='Diagnostic logging level (default: WARNING)')
@click.option('--verbose', '-v',
              is_flag=True,
              help='Enable verbose output')
def classify_logs(format_file: Optional[str],
                  input_file: str,
                  output_file: str,
                  output_format: str,
                  kinds: tuple,
                  sample_lines: Optional[int],
                  log_level: str,
                  verbose: bool):
    """
    Classify log lines into event, status and unclassified records.

    Each line is matched against the format's header pattern, then against
    its status and event body patterns. Results include the header fields
    and either the event message or the status id and assignments.

    Examples:

    \b
    # Classify with the built-in format, CSV output
    python classify_logs.py --in server.log --out records.csv

    \b
    # Only status records, as JSONL
    python classify_logs.py --format-file formats/default.xml --in server.log \\
        --out status.jsonl --output-format jsonl --kind status

    \b
    # Generate summary report
    python classify_logs.py --in server.log --out summary.txt --output-format summary
    """
    setup_logging(log_level)

    try:
        if format_file:
            if verbose:
                click.echo(f"Loading format from: {format_file}")
            log_format = load_format(format_file)
        else:
            log_format = default_format()
    except ConfigError as e:
        click.echo(f"Error: {e}")
        sys.exit(1)

    allowed_kinds = set(RecordKind(kind) for kind in kinds) if kinds else None
    report = ClassificationReport()

    output_path = Path(output_file)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        records = _classify_file(input_file, log_format, report, sample_lines, verbose)

        if output_format == 'csv':
            _write_csv(records, output_path, allowed_kinds)
        elif output_format == 'jsonl':
            _write_jsonl(records, output_path, allowed_kinds)
        elif output_format == 'summary':
            _write_summary(records, report, input_file, output_path)

    except KeyboardInterrupt:
        click.echo("\n❌ Classification cancelled by user")
        sys.exit(1)
    except IOError as e:
        click.echo(f"\n❌ Error during classification: {e}")
        sys.exit(1)

    summary = report.get_summary()
    click.echo(f"\n✅ Classification completed!")
    click.echo(f"📊 Results:")
    click.echo(f"   • Total lines processed: {summary['total_lines']}")
    click.echo(f"   • Event records: {summary['event_lines']}")
    click.echo(f"   • Status records: {summary['status_lines']}")
    click.echo(f"   • Unclassified lines: {summary['other_lines']}")
    click.echo(f"   • Classified rate: {summary['classified_rate']:.1f}%")
    click.echo(f"   • Output file: {output_path.absolute()}")

    if verbose and summary['other_lines'] > 0:
        click.echo(f"\n🔍 Sample unclassified lines:")
        for i, sample in enumerate(summary['unclassified_samples'][:5], 1):
            click.echo(f"   {i}. {sample}")


def _classify_file(input_file: str, log_format: LogFormat, report: ClassificationReport,
                   sample_lines: Optional[int],
                   verbose: bool) -> Iterator[Tuple[int, ClassificationResult]]:
    """Classify each line of the input file, feeding the report as it goes."""
    with open(input_file, 'r', encoding='utf-8', errors='ignore') as infile:
        lines = tqdm(infile, desc="Classifying", unit=" lines", disable=not verbose)
        for line_num, record in enumerate(log_format.classify_all(lines), 1):
            if sample_lines and line_num > sample_lines:
                break
            report.add(record)
            yield line_num, record


def _write_csv(records: Iterator[Tuple[int, ClassificationResult]], output_path: Path,
               allowed_kinds: Optional[Set[RecordKind]]):
    """Write classified records as CSV rows."""
    with open(output_path, 'w', newline='', encoding='utf-8') as outfile:
        writer = csv.writer(outfile)
        writer.writerow([
            'line_number', 'kind', 'timestamp', 'level', 'system', 'tags',
            'message', 'id', 'assignments'
        ])

        for line_num, record in records:
            if allowed_kinds and record.kind not in allowed_kinds:
                continue

            if record.kind is RecordKind.OTHER:
                writer.writerow([line_num, record.kind.value, '', '', '', '',
                                 record.message, '', ''])
            elif record.kind is RecordKind.EVENT:
                writer.writerow([line_num, record.kind.value, record.timestamp,
                                 record.level, record.system, ' | '.join(record.tags),
                                 record.message, '', ''])
            else:
                writer.writerow([line_num, record.kind.value, record.timestamp,
                                 record.level, record.system, ' | '.join(record.tags),
                                 '', record.id,
                                 json.dumps(record.assignments, ensure_ascii=False)])


def _write_jsonl(records: Iterator[Tuple[int, ClassificationResult]], output_path: Path,
                 allowed_kinds: Optional[Set[RecordKind]]):
    """Write classified records as JSON lines."""
    with JSONLWriter(str(output_path)) as writer:
        for line_num, record in records:
            if allowed_kinds and record.kind not in allowed_kinds:
                continue
            writer.write_record(record, line_num)


def _write_summary(records: Iterator[Tuple[int, ClassificationResult]],
                   report: ClassificationReport, input_file: str, output_path: Path):
    """Classify every line into the report, then write the summary report."""
    deque(records, maxlen=0)
    summary = report.get_summary()

    with open(output_path, 'w', encoding='utf-8') as outfile:
        outfile.write("LOG CLASSIFICATION SUMMARY REPORT\n")
        outfile.write("=" * 50 + "\n\n")

        outfile.write(f"Input file: {input_file}\n")
        outfile.write(f"Total lines processed: {summary['total_lines']}\n")
        outfile.write(f"Event records: {summary['event_lines']}\n")
        outfile.write(f"Status records: {summary['status_lines']}\n")
        outfile.write(f"Unclassified lines: {summary['other_lines']}\n")
        outfile.write(f"Classified rate: {summary['classified_rate']:.1f}%\n\n")

        outfile.write("LOG LEVEL DISTRIBUTION:\n")
        outfile.write("-" * 25 + "\n")
        for level, count in sorted(summary['level_distribution'].items()):
            percentage = (count / summary['total_lines']) * 100 if summary['total_lines'] > 0 else 0
            outfile.write(f"{level:8}: {count:8} ({percentage:5.1f}%)\n")
        outfile.write("\n")

        if summary['top_systems']:
            outfile.write("TOP SYSTEMS:\n")
            outfile.write("-" * 25 + "\n")
            for i, (system, count) in enumerate(summary['top_systems'], 1):
                outfile.write(f"{i:2}. [{count:6}x] {system}\n")
            outfile.write("\n")

        if summary['top_tags']:
            outfile.write("TOP TAGS:\n")
            outfile.write("-" * 25 + "\n")
            for i, (tag, count) in enumerate(summary['top_tags'], 1):
                outfile.write(f"{i:2}. [{count:6}x] {tag}\n")
            outfile.write("\n")

        if summary['unclassified_samples']:
            outfile.write("SAMPLE UNCLASSIFIED LINES:\n")
            outfile.write("-" * 25 + "\n")
            for i, sample in enumerate(summary['unclassified_samples'], 1):
                outfile.write(f"{i:2}. {sample}\n")


if __name__ == '__main__':
    classify_logs()
