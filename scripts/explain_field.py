"""Explain how a standard field is mapped for one data source."""
import argparse
import json
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from mapping_explainer.config import get_settings
from mapping_explainer.exceptions import InvalidInputError, MappingExplainerError
from mapping_explainer.explainers.function_explainer import FunctionExplainer
from mapping_explainer.logging_config import configure_logging
from mapping_explainer.pipeline.explain_service import ExplanationService
from mapping_explainer.store.document_store import DocumentStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Explain the published mapping of a standard field"
    )
    parser.add_argument("ssid", help="Data source id")
    parser.add_argument("resource", nargs="?", help="Resource name (e.g. property)")
    parser.add_argument("standard_name", nargs="?", help="Standard field name or synonym")
    parser.add_argument(
        "--list-resources",
        action="store_true",
        help="List the resources in the latest published mapping"
    )
    parser.add_argument(
        "--list-fields",
        action="store_true",
        help="List the field rules of RESOURCE"
    )
    parser.add_argument(
        "--no-llm",
        action="store_true",
        help="Skip the function explainer and use the built-in wording"
    )
    parser.add_argument(
        "--database-url",
        help="Database connection string (overrides MAPPING_DB_URL env var)"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full result as JSON"
    )
    return parser


def run(args, service: ExplanationService) -> int:
    if args.list_resources:
        for name in service.list_resources(args.ssid):
            print(name)
        return 0

    if args.list_fields:
        fields = service.list_fields(args.ssid, args.resource)
        if args.json:
            print(json.dumps(fields, indent=2, default=str))
        else:
            for field in fields:
                print(f"{field['key']}\t{field['mappingType'] or 'Undefined'}\t{', '.join(field['mlsFields'])}")
        return 0 if fields else 1

    result = service.explain(args.ssid, args.resource, args.standard_name)
    if result is None:
        print("No mapping found for that ssid/resource/standardName", file=sys.stderr)
        return 1
    if args.json:
        print(json.dumps(result.to_response(), indent=2, default=str))
    else:
        print(result.explanation)
    return 0


def main() -> int:
    """Main entry point."""
    args = build_parser().parse_args()
    settings = get_settings()
    configure_logging(settings.log_format, settings.log_level)

    store = DocumentStore(
        args.database_url or settings.require_database_url(),
        sslmode=settings.db_sslmode,
    )
    explainer = None
    if settings.function_explainer_enabled and not args.no_llm:
        explainer = FunctionExplainer(
            model=settings.llm_model,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
            api_key=settings.llm_api_key,
        )

    try:
        return run(args, ExplanationService(store, explainer))
    except InvalidInputError as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        return 2
    except MappingExplainerError as e:
        print(f"Failed: {e}", file=sys.stderr)
        return 1
    finally:
        store.close()


if __name__ == "__main__":
    sys.exit(main())
