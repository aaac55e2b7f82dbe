"""
Module: cli

Purpose:
    Command-line front end. Ingests exam papers into a file-backed
    store, prints subject repetition reports and audits stored data.

Commands:
    - examace ingest FILE --store DIR --subject ID --year N
    - examace report --store DIR --subject ID [--json] [--legacy]
    - examace audit --store DIR [--subject ID] [--json]

Dependencies:
    - argparse (std)
    - examace.store, examace.extractor, examace.analysis

Used By:
    - Console script "examace" (pyproject.toml)
    - run_examace.py launcher
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from examace import __version__
from examace.analysis.grouping import group_similar_questions
from examace.analysis.oracle import OllamaOracle, SemanticOracle
from examace.analysis.repetition import SubjectReport, build_subject_report
from examace.common.syllabus import load_syllabus
from examace.common.thresholds import REPORT_THRESHOLDS
from examace.core.errors import ExamAceError
from examace.core.models.questions import DocumentMetadata
from examace.extractor.classification import TopicClassifier
from examace.extractor.config import ExtractionConfig
from examace.extractor.utils.pdf import extract_document_text
from examace.store.jsonl_store import QuestionStore, SubjectAudit, ingest_document

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1

TEXT_SUFFIXES = {".txt", ".text", ".md"}


def configure_logging(verbose: bool = False) -> None:
    """Configure root logging for command-line use (stderr)."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
        stream=sys.stderr,
        force=True,
    )


def _build_oracle(args: argparse.Namespace) -> Optional[SemanticOracle]:
    if getattr(args, "no_oracle", False):
        return None
    return OllamaOracle(model=args.ollama_model, host=args.ollama_host)


def _read_document(path: Path) -> str:
    if not path.exists():
        raise FileNotFoundError(f"Document not found: {path}")
    if path.suffix.lower() in TEXT_SUFFIXES:
        return path.read_text(encoding="utf-8")
    return extract_document_text(path)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def cmd_ingest(args: argparse.Namespace) -> int:
    path = Path(args.file)
    metadata = DocumentMetadata(
        subject_id=args.subject,
        year=args.year,
        semester=args.semester,
        source_name=path.name,
    )
    config = ExtractionConfig(
        use_oracle=not args.no_oracle,
        syllabus_path=Path(args.syllabus) if args.syllabus else None,
    )
    classifier = TopicClassifier(load_syllabus(config.syllabus_path))
    store = QuestionStore(Path(args.store))

    text = _read_document(path)
    outcome = ingest_document(
        store, text, metadata,
        oracle=_build_oracle(args), config=config, classifier=classifier,
    )
    extraction = outcome.extraction

    if args.timing_log:
        extraction.timing.save(Path(args.timing_log), run_id=outcome.paper.paper_id)

    if args.json:
        payload = {"paper": outcome.paper.to_dict(), **extraction.to_dict()}
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        print(f"Stored {outcome.question_count} question(s) from {path.name} "
              f"as paper {outcome.paper.paper_id}")
        stats = ", ".join(f"{k}={v}" for k, v in sorted(extraction.match_stats.items()))
        if stats:
            print(f"Concept matches: {stats}")
        for warning in extraction.warnings:
            print(f"WARNING: {warning}")
    return EXIT_OK


def _print_report(subject_id: str, report: SubjectReport, min_documents: int) -> None:
    span = f"{report.year_span[0]} - {report.year_span[1]}" if report.year_span else "N/A"
    print(f"Subject: {subject_id}")
    print(f"Papers: {report.papers_count} ({span}) | Questions: {report.total_questions} "
          f"| Concepts: {report.group_count}")
    if report.top_topic:
        print(f"Dominant topic: {report.top_topic} ({report.top_topic_pct}%)")

    print("\nTopic weightage:")
    for topic, count in report.topic_weightage:
        print(f"  {count:4d}  {topic}")

    print("\nRepeated questions:")
    if report.papers_count < min_documents:
        print(f"  Upload at least {min_documents} papers to detect repetitions.")
    elif not report.repeated:
        print("  No question appears in more than one year.")
    for i, group in enumerate(report.repeated, start=1):
        years = ", ".join(str(y) for y in group.occurrence_years)
        print(f"  {i:2d}. [{group.count}x: {years}] {group.representative_text}")


def cmd_report(args: argparse.Namespace) -> int:
    store = QuestionStore(Path(args.store))
    questions = store.load_questions(args.subject)
    papers_count = store.count_papers(args.subject)

    groups = None
    if args.legacy:
        groups = group_similar_questions(questions, oracle=_build_oracle(args))

    report = build_subject_report(
        questions,
        papers_count,
        min_documents=args.min_documents,
        limit=args.limit,
        groups=groups,
    )

    if args.json:
        print(json.dumps({"subject_id": args.subject, **report.to_dict()}, indent=2, ensure_ascii=False))
    else:
        _print_report(args.subject, report, args.min_documents)
    return EXIT_OK


def _print_audit(audit: SubjectAudit) -> None:
    print("------------------------------------------------")
    print(f"SUBJECT: {audit.subject_id}")
    print(f"  > Question Papers: {len(audit.papers)}")
    for p in audit.papers:
        print(f"    - Year: {p.year} (Semester: {p.semester}) | File: {p.original_name} "
              f"| Questions: {p.question_count} | Processed: {p.processed}")
    print(f"  > Total Questions: {audit.question_count}")
    print("  > Breakdown by Year:")
    for year, count in audit.by_year:
        print(f"    - {year}: {count} questions")
    print("  > Breakdown by Paper:")
    for pid, count in audit.by_paper:
        print(f"    - Paper {pid}: {count} questions")
    if audit.orphaned:
        print(f"  ! {audit.orphaned} question(s) reference unknown papers")
    if audit.missing_concepts:
        print(f"  ! {audit.missing_concepts} question(s) have no concept id")
    for i, text in enumerate(audit.samples, start=1):
        print(f"    {i}. {text}")


def cmd_audit(args: argparse.Namespace) -> int:
    store = QuestionStore(Path(args.store))
    subjects = [args.subject] if args.subject else store.list_subjects()
    audits = [store.audit_subject(s) for s in subjects]

    if args.json:
        print(json.dumps([a.to_dict() for a in audits], indent=2, ensure_ascii=False))
        return EXIT_OK

    print("=== EXAM ACE DATA AUDIT ===")
    print(f"Total Subjects Found: {len(audits)}")
    for audit in audits:
        _print_audit(audit)
    return EXIT_OK


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="examace",
        description="Segment exam papers into questions and analyze repetitions.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    # Oracle settings shared by ingest and report
    oracle_opts = argparse.ArgumentParser(add_help=False)
    oracle_opts.add_argument("--no-oracle", action="store_true",
                             help="Never consult the semantic oracle (fallback threshold only)")
    oracle_opts.add_argument("--ollama-model", help="Ollama model (default: $EXAMACE_OLLAMA_MODEL)")
    oracle_opts.add_argument("--ollama-host", help="Ollama host (default: $OLLAMA_HOST)")

    ingest = sub.add_parser("ingest", parents=[oracle_opts], help="Ingest one exam paper")
    ingest.add_argument("file", help="PDF or plain-text exam paper")
    ingest.add_argument("--store", required=True, help="Store root directory")
    ingest.add_argument("--subject", required=True, help="Subject id")
    ingest.add_argument("--year", required=True, type=int, help="Exam year")
    ingest.add_argument("--semester", default="Unknown", help="Semester/session label")
    ingest.add_argument("--syllabus", help="JSON syllabus file (default: built-in five units)")
    ingest.add_argument("--timing-log", help="Merge run timings into this JSON file")
    ingest.add_argument("--json", action="store_true", help="Print the result as JSON")
    ingest.set_defaults(func=cmd_ingest)

    report = sub.add_parser("report", parents=[oracle_opts], help="Subject repetition report")
    report.add_argument("--store", required=True, help="Store root directory")
    report.add_argument("--subject", required=True, help="Subject id")
    report.add_argument("--legacy", action="store_true",
                        help="Group by pairwise similarity instead of concept ids")
    report.add_argument("--min-documents", type=int, default=REPORT_THRESHOLDS.min_documents,
                        help="Papers required before repetitions are reported")
    report.add_argument("--limit", type=int, default=REPORT_THRESHOLDS.max_repeated,
                        help="Maximum repeated questions listed")
    report.add_argument("--json", action="store_true", help="Print the report as JSON")
    report.set_defaults(func=cmd_report)

    audit = sub.add_parser("audit", help="Summarize stored papers and questions")
    audit.add_argument("--store", required=True, help="Store root directory")
    audit.add_argument("--subject", help="Audit one subject only")
    audit.add_argument("--json", action="store_true", help="Print the audit as JSON")
    audit.set_defaults(func=cmd_audit)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        return args.func(args)
    except (ExamAceError, FileNotFoundError, ValueError) as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
