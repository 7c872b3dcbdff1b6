# ecod_curation/cli/main.py
import argparse
import sys
import json
from typing import List, Optional, Tuple

from ecod_curation.analysis import AnalysisOptions, EvidenceTraceabilityAnalyzer
from ecod_curation.config import ConfigManager
from ecod_curation.core.logging_config import LoggingManager
from ecod_curation.db import DBManager, PartitionRepository, parse_source_id
from ecod_curation.error_handlers import handle_exceptions
from ecod_curation.exceptions import DatabaseError, FileOperationError, ValidationError
from ecod_curation.io import DomainSummaryParser, load_domains, load_hits, write_json
from ecod_curation.models import AnyHit, EvidenceSource, PredictedDomain, TraceabilityReport

logger = LoggingManager.get_logger("ecod_curation.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='ecod-curate',
                                     description='ECOD evidence coverage and traceability analysis')

    # Global options
    parser.add_argument('--config', type=str, help='Path to configuration file')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Increase verbosity (can be used multiple times)')
    parser.add_argument('--log-file', type=str,
                        help='Log to file in addition to stderr')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Full analysis: classification, attribution and reconciliation
    analyze_parser = subparsers.add_parser('analyze', help='Trace evidence usage for a chain')
    _add_evidence_args(analyze_parser)
    domains_group = analyze_parser.add_mutually_exclusive_group(required=True)
    domains_group.add_argument('--domains', type=str,
                               help='JSON file with predicted domains')
    domains_group.add_argument('--protein', type=str,
                               help='Read predicted domains from the database (PDB_CHAIN, e.g. 5c3l_B)')
    analyze_parser.add_argument('--sequence-length', type=int,
                                help='Target sequence length (read from the database with --protein)')
    output_group = analyze_parser.add_mutually_exclusive_group()
    output_group.add_argument('--json', action='store_true',
                              help='Print the full report as JSON')
    output_group.add_argument('--tsv', type=str, metavar='FILE',
                              help='Write per-domain contributions as TSV')
    analyze_parser.add_argument('--output', type=str, metavar='FILE',
                                help='Write the full JSON report to a file')

    # Hit quality only
    classify_parser = subparsers.add_parser('classify', help='Classify hit quality only')
    _add_evidence_args(classify_parser)
    classify_parser.add_argument('--sequence-length', type=int, required=True,
                                 help='Target sequence length')
    classify_parser.add_argument('--json', action='store_true',
                                 help='Print verdicts as JSON')

    return parser


def _add_evidence_args(subparser: argparse.ArgumentParser) -> None:
    evidence_group = subparser.add_mutually_exclusive_group(required=True)
    evidence_group.add_argument('--summary', type=str,
                                help='Domain summary XML file')
    evidence_group.add_argument('--hits', type=str,
                                help='JSON file with raw evidence records')
    subparser.add_argument('--min-alignment-length', type=int,
                           help='Override minimum alignment length')
    subparser.add_argument('--coverage-threshold', type=float,
                           help='Override query coverage threshold for excellent hits')


def load_evidence(args: argparse.Namespace) -> Tuple[List[AnyHit], Optional[str]]:
    """Load hits from the selected evidence source

    Returns:
        Tuple of (hits, protein id from the document if known)

    Raises:
        FileOperationError: If the summary document cannot be parsed
    """
    if args.hits:
        return load_hits(args.hits), None

    document = DomainSummaryParser().parse_file(args.summary)
    if not document.is_valid:
        raise FileOperationError(f"Could not read domain summary: {'; '.join(document.errors)}",
                                 {"file_path": args.summary})
    counts = ", ".join(f"{source.value} {len(document.hits_of_type(source.value))}"
                       for source in EvidenceSource)
    logger.info(f"Loaded {len(document.hits)} hits from {args.summary} ({counts})")
    return document.hits, document.protein_id or None


def load_predictions(args: argparse.Namespace,
                     config_manager: ConfigManager) -> Tuple[List[PredictedDomain], Optional[int]]:
    """Load predicted domains and, from the database, the sequence length"""
    if args.domains:
        return load_domains(args.domains), None

    pdb_id, chain_id = parse_source_id(args.protein)
    try:
        repository = PartitionRepository(DBManager(config_manager.get_db_config()))
        protein = repository.get_protein(pdb_id, chain_id)
        if protein is None:
            raise ValidationError(f"Protein not found in partition results: {args.protein}",
                                  {"pdb_id": pdb_id, "chain_id": chain_id})
        domains = repository.get_domains(pdb_id, chain_id, protein.get('processing_id'))
    except DatabaseError as e:
        e.details.setdefault("protein", args.protein)
        raise

    return domains, protein.get('sequence_length')


def build_options(args: argparse.Namespace, config_manager: ConfigManager) -> AnalysisOptions:
    options = AnalysisOptions.from_config(config_manager.get_analysis_config())
    return options.with_overrides(
        min_alignment_length=args.min_alignment_length,
        coverage_threshold=args.coverage_threshold,
    )


def print_summary(report: TraceabilityReport) -> None:
    metrics = report.reconciliation.metrics
    print(f"Protein: {report.protein_id or 'unknown'} ({report.sequence_length} residues)")
    print(f"Hits: {metrics.total_hits} total, {metrics.usable_hits} usable, "
          f"{metrics.used_hits} used, {metrics.unused_usable_hits} missed")
    print(f"Fragments: {metrics.fragments}, poor quality: {metrics.poor_quality}")
    print(f"Incorporation rate: {metrics.incorporation_rate:.1%}, "
          f"validation pass rate: {metrics.validation_pass_rate:.1%}")

    for attribution in report.attributions:
        domain = attribution.domain
        print(f"\nDomain {domain.ordinal} ({domain.range or 'no range'}): "
              f"{domain.classification_label}")
        for line in attribution.rationale:
            print(f"  {line}")
        for issue in attribution.issues:
            print(f"  ! {issue}")

    if report.reconciliation.missed_evidence_range:
        print(f"\nMissed evidence outside domains: {report.reconciliation.missed_evidence_range}")


def run_analyze(args: argparse.Namespace, config_manager: ConfigManager) -> int:
    options = build_options(args, config_manager)
    hits, document_protein = load_evidence(args)
    domains, stored_length = load_predictions(args, config_manager)

    sequence_length = args.sequence_length or stored_length
    if not sequence_length:
        raise ValidationError("Sequence length is required (use --sequence-length)")

    analyzer = EvidenceTraceabilityAnalyzer(options)
    report = analyzer.analyze(hits, domains, int(sequence_length),
                              protein_id=args.protein or document_protein)

    if args.output:
        write_json(report.to_dict(), args.output)
        logger.info(f"Report written to {args.output}")

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    elif args.tsv:
        report.contributions_frame().to_csv(args.tsv, sep='\t', index=False)
        print(f"Contributions written to {args.tsv}")
    else:
        print_summary(report)

    return 0


def run_classify(args: argparse.Namespace, config_manager: ConfigManager) -> int:
    options = build_options(args, config_manager)
    hits, _ = load_evidence(args)

    report = EvidenceTraceabilityAnalyzer(options).analyze(hits, [], args.sequence_length)

    if args.json:
        print(json.dumps([v.to_dict() for v in report.verdicts], indent=2))
    else:
        frame = report.verdicts_frame().drop(columns=['used_by_pipeline'])
        print(frame.to_string(index=False) if not frame.empty else "No hits found")

    return 0


@handle_exceptions()
def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    LoggingManager.configure(
        verbose=args.verbose > 1,
        log_file=args.log_file,
        component="ecod_curation",
        quiet=args.verbose == 0
    )

    config_manager = ConfigManager(args.config)

    if args.command == 'analyze':
        return run_analyze(args, config_manager)
    elif args.command == 'classify':
        return run_classify(args, config_manager)

    parser.print_help()
    return 1


if __name__ == '__main__':
    sys.exit(main())
