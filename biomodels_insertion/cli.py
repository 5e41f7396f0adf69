"""Command line entry point for the BioModels insertion step."""
import argparse
import sys
import time
from typing import List, Optional

from .config import load_settings
from .errors import BioModelsInsertionError
from .graph.json_graph_client import JsonGraphClient
from .graph.neo4j_client import Neo4jClient
from .importer.orchestrator import ImportOrchestrator
from .parser import parse_models_tsv
from .utils.logger import app_logger, setup_logging
from .verifier import CrossReferenceVerifier

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="biomodels-insertion",
        description="Insert BioModels cross-references into the Reactome graph database",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    insert = subparsers.add_parser("insert", help="Link pathways to BioModels identifiers")
    insert.add_argument("config", nargs="?", default=None, help="Path to config.properties")
    insert.add_argument("models_file", nargs="?", default=None, help="Path to models2pathways.tsv")
    insert.add_argument("--person-id", type=int, default=None, help="dbId of the Person authoring the changes")
    insert.add_argument("--snapshot", default=None, help="Run against a JSON graph snapshot instead of Neo4j")
    insert.add_argument("--log-level", default=None, help="Log level")
    insert.add_argument("--log-file", default=None, help="Log file")

    verify = subparsers.add_parser("verify", help="Compare BioModels cross-reference counts between releases")
    verify.add_argument("--currentUser", "--current-user", "--cu", dest="current_user", default="neo4j")
    verify.add_argument("--currentPassword", "--current-password", "--cp", dest="current_password", default="root")
    verify.add_argument("--currentHost", "--current-host", "--ch", dest="current_host", default="localhost")
    verify.add_argument("--currentPort", "--current-port", "--cP", dest="current_port", type=int, default=7687)
    verify.add_argument("--previousUser", "--previous-user", "--pu", dest="previous_user", default="neo4j")
    verify.add_argument("--previousPassword", "--previous-password", "--pp", dest="previous_password", default="root")
    verify.add_argument("--previousHost", "--previous-host", "--ph", dest="previous_host", default="localhost")
    verify.add_argument("--previousPort", "--previous-port", "--pP", dest="previous_port", type=int, default=7688)
    verify.add_argument("--log-level", default="INFO", help="Log level")

    return parser


def run_insert(args) -> int:
    start = time.monotonic()
    settings = load_settings(
        args.config,
        person_id=args.person_id,
        models_file=args.models_file,
        log_level=args.log_level,
        log_file=args.log_file,
    )
    setup_logging(settings.log_level, settings.log_file)

    person_id = settings.require_person_id()
    pathway_to_biomodels_ids = parse_models_tsv(settings.models_file)

    if args.snapshot:
        client = JsonGraphClient(args.snapshot)
    else:
        client = Neo4jClient.from_settings(settings)

    try:
        orchestrator = ImportOrchestrator(client, person_id, note=settings.instance_edit_note)
        result = orchestrator.run(pathway_to_biomodels_ids)
    finally:
        client.close()

    if not result.committed:
        return EXIT_FAILURE

    app_logger.info(f"Completed BioModels insertion in {int(time.monotonic() - start)} seconds.")
    return EXIT_SUCCESS


def run_verify(args) -> int:
    setup_logging(args.log_level)

    current = Neo4jClient(f"bolt://{args.current_host}:{args.current_port}", args.current_user, args.current_password)
    previous = Neo4jClient(f"bolt://{args.previous_host}:{args.previous_port}", args.previous_user, args.previous_password)
    try:
        CrossReferenceVerifier(current, previous).verify()
    finally:
        current.close()
        previous.close()

    return EXIT_SUCCESS


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        if args.command == "insert":
            return run_insert(args)
        return run_verify(args)
    except BioModelsInsertionError as e:
        app_logger.error(e.log_message())
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
