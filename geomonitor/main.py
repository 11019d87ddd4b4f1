#!/usr/bin/env python3
"""
Geopolitical Situation Monitor

Entry point for a single monitoring cycle.
Fetches feeds, scores news, derives signals and scenarios, writes a report.

Usage:
    python -m geomonitor.main                           # Full cycle
    python -m geomonitor.main --quick                   # Quick mode (fewer feeds)
    python -m geomonitor.main --news-only               # Just fetch and score news
    python -m geomonitor.main --path taiwan energy      # Risk transmission path
    python -m geomonitor.main --supply-chain oil        # Commodity exposure
"""

import argparse
import asyncio
import logging
import sys

from .app.pipeline import MonitorPipeline
from .config.settings import settings
from .errors import ConfigurationError, RegistryError
from .graph.knowledge_graph import KnowledgeGraph
from .output.formatter import OutputFormatter


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Geopolitical news situation monitor"
    )

    parser.add_argument(
        "--quick",
        action="store_true",
        help="Quick mode: fewer feeds, faster execution",
    )

    parser.add_argument(
        "--news-only",
        action="store_true",
        help="Only fetch and score news, skip signals and scenarios",
    )

    parser.add_argument(
        "--top",
        type=int,
        default=10,
        help="Number of top items to print (default: 10)",
    )

    parser.add_argument(
        "--path",
        nargs=2,
        metavar=("FROM", "TO"),
        help="Print the risk transmission path between two graph nodes and exit",
    )

    parser.add_argument(
        "--supply-chain",
        metavar="COMMODITY",
        help="Print supply chain exposure for a commodity and exit",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Debug logging",
    )

    return parser.parse_args(argv)


def run_graph_query(args: argparse.Namespace) -> int:
    """Answer a knowledge graph query from the command line."""
    graph = KnowledgeGraph.from_yaml()

    if args.path:
        source, target = args.path
        hops = graph.risk_transmission_path(source, target)
        if hops is None:
            print(f"No path between {source} and {target}")
            return 1
        print(f"\n🔗 Risk path {source} -> {target} ({len(hops) - 1} hops)")
        for hop in hops:
            via = f"  via {hop.connection_type} ({hop.connection_label})" if hop.connection_type else ""
            print(f"   {hop.node_name} [{hop.node_type}]{via}")
        return 0

    exposure = graph.supply_chain_exposure(args.supply_chain)
    print(f"\n🛢  Supply chain: {exposure['commodity']}")
    print("   Producers:")
    for p in exposure["producers"] or [{"country": "none", "share": "-"}]:
        print(f"     - {p['country']}: {p['share']}")
    print("   Consumers:")
    for c in exposure["consumers"] or [{"country": "none", "importance": "-"}]:
        print(f"     - {c['country']}: {c['importance']}")
    print("   Risks:")
    for risk in exposure["risks"]:
        print(f"     - {risk}")
    return 0


async def run_cycle(args: argparse.Namespace) -> int:
    """Run one monitoring cycle and save the report."""
    pipeline = MonitorPipeline.from_settings(quick=args.quick)

    if args.news_only:
        print("\n📰 Fetching news...")
        news = await pipeline.aggregator.get_latest()
        print(f"   {len(news)} items accepted\n")
        for i, item in enumerate(news[: args.top]):
            print(f"   {i + 1}. [{item.relevance_score:.0f}] {item.title[:70]}")
            print(f"      {item.source} | {', '.join(item.regions) or 'no region'}")
        return 0

    print("\n📰 Running monitoring cycle...")
    result = await pipeline.refresh()

    print(f"   {len(result.news)} items, {len(result.signals)} signals, {len(result.alerts)} alerts")

    print("\n📡 Top signals")
    for s in result.signals[:5]:
        print(f"   {s.strength:3d} {s.strength_label:<9} {s.direction:<10} {s.name}")

    print("\n🧭 Leading scenario paths")
    for scenario in result.scenarios:
        path = scenario.path(scenario.leading_path)
        print(f"   {scenario.theme}: {path.definition.name} ({path.current_probability}%)")

    print("\n" + "=" * 60)
    print(result.summary.summary)
    print("=" * 60)

    formatter = OutputFormatter(settings.output_dir)
    report_dir = formatter.save_cycle(result)
    print(f"\n📁 Report saved to: {report_dir}")
    return 0


async def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        if args.path or args.supply_chain:
            return run_graph_query(args)
        return await run_cycle(args)
    except (ConfigurationError, RegistryError) as e:
        print(f"❌ Invalid configuration: {e}")
        return 1


def cli() -> None:
    """CLI entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
