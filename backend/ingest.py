import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))

from config import find_config_path
from pipelines import run_ingestion
from stores import VectorStoreError


def main():
    parser = argparse.ArgumentParser(
        description="Ingest documents into the vector store"
    )
    parser.add_argument(
        "paths",
        type=Path,
        nargs="+",
        help="Files or directories to ingest (.pdf, .docx, .txt, .md)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.toml in project root)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        config_path = find_config_path(args.config)
        results = run_ingestion(config_path, args.paths)
    except (FileNotFoundError, ValueError, VectorStoreError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print("\n=== Ingestion Complete ===")
    print(f"Documents ingested: {results['documents']}")
    print(f"Chunks created: {results['chunks']}")
    for path, error in results["failed"].items():
        print(f"Failed: {path}: {error}", file=sys.stderr)
    return 1 if results["failed"] else 0


if __name__ == "__main__":
    sys.exit(main())
