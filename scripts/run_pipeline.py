"""
ConfGraph Report Pipeline.

Runs the keyword analytics stages against the configured SQLite database
(CONFGRAPH_DB_PATH) and prints the result as JSON.

Usage:
    python scripts/run_pipeline.py generate-all              # Full pipeline, k=10
    python scripts/run_pipeline.py generate-all -k 6 --limit 500
    python scripts/run_pipeline.py cluster -k 8              # Clustering only
    python scripts/run_pipeline.py graphs                    # Connectivity graphs only
    python scripts/run_pipeline.py knowledge-graph           # Unified graph only
    python scripts/run_pipeline.py cluster-report cluster_3  # One cluster's analysis
    python scripts/run_pipeline.py status
    python scripts/run_pipeline.py clear-all
"""
import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from confgraph.core.config import get_settings, load_dotenv_if_exists
from confgraph.core.exceptions import ConfGraphError
from confgraph.pipeline import ReportPipeline

load_dotenv_if_exists()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S"
)
logger = logging.getLogger("run_pipeline")


def run_command(pipeline: ReportPipeline, args: argparse.Namespace) -> dict:
    """Dispatch one subcommand and return its JSON-ready result."""
    if args.command == "generate-all":
        return pipeline.generate_all(k=args.k, keyword_limit=args.limit).to_dict()

    if args.command == "cluster":
        clusters = pipeline.cluster_keywords(k=args.k, keyword_limit=args.limit)
        return {
            "clusters_count": len(clusters),
            "clusters": [c.model_dump(mode="json") for c in clusters],
        }

    if args.command == "graphs":
        build = pipeline.build_connectivity_graphs()
        return {
            "graphs_count": len(build.graphs),
            "connections": build.writes.to_dict(),
        }

    if args.command == "knowledge-graph":
        return pipeline.build_knowledge_graph().model_dump(mode="json")

    if args.command == "cluster-report":
        return pipeline.cluster_report(args.cluster_id, top_n=args.top).to_dict()

    if args.command == "status":
        return pipeline.status()

    if args.command == "clear-all":
        return {"deleted": pipeline.clear_all()}

    raise ValueError(f"Unknown command: {args.command}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="ConfGraph Report Pipeline - Cluster keywords and build knowledge graphs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/run_pipeline.py generate-all -k 10
  python scripts/run_pipeline.py cluster-report cluster_0 --top 5
  CONFGRAPH_DB_PATH=/tmp/conf.db python scripts/run_pipeline.py status
        """
    )
    parser.add_argument(
        "--db", type=Path, default=None,
        help="SQLite database path (default: CONFGRAPH_DB_PATH)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("generate-all", "Cluster, build graphs and build the knowledge graph"),
        ("cluster", "Cluster keywords only"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "-k", "--clusters", dest="k", type=int, default=None,
            help="Number of clusters (default: CONFGRAPH_CLUSTER_COUNT)"
        )
        sub.add_argument(
            "--limit", type=int, default=None,
            help="Only cluster the first N keywords"
        )

    subparsers.add_parser("graphs", help="Build connectivity graphs for every cluster")
    subparsers.add_parser("knowledge-graph", help="Build the unified knowledge graph")

    report = subparsers.add_parser("cluster-report", help="Analyze one cluster's graph")
    report.add_argument("cluster_id", help="Cluster id, e.g. cluster_0")
    report.add_argument(
        "--top", type=int, default=None,
        help="Central nodes to report (default: CONFGRAPH_CLUSTER_TOP_N)"
    )

    subparsers.add_parser("status", help="Show artifact counts")
    subparsers.add_parser("clear-all", help="Delete clusters, connections and knowledge graphs")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    settings = get_settings()
    if args.db is not None:
        # Leave the cached instance untouched
        settings = settings.model_copy(deep=True)
        settings.storage.db_path = args.db.resolve()

    try:
        pipeline = ReportPipeline.from_settings(settings)
        result = run_command(pipeline, args)
    except ConfGraphError as e:
        logger.error(f"❌ {e}")
        return 1

    print(json.dumps(result, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
