"""Output formatting for monitor cycles.

Generates both JSON (structured) and Markdown (human-readable)
reports for a completed cycle.
"""

import json
from pathlib import Path

from ..app.pipeline import CycleResult
from ..news.models import NewsItem
from ..scenarios.models import Scenario
from ..signals.models import Signal


class OutputFormatter:
    """Formats cycle output in multiple formats."""

    def __init__(self, output_dir: Path):
        """
        Initialize formatter.

        Args:
            output_dir: Base directory for report files
        """
        self.output_dir = output_dir

    def save_cycle(self, result: CycleResult) -> Path:
        """
        Save complete cycle output.

        Creates:
        - state.json: Full cycle result
        - report.md: Human-readable briefing
        - news.json: Scored corpus

        Returns:
            Path to the report directory
        """
        timestamp = result.generated_at.strftime("%Y-%m-%d_%H-%M-%S")
        report_dir = self.output_dir / timestamp
        report_dir.mkdir(parents=True, exist_ok=True)

        (report_dir / "state.json").write_text(json.dumps(result.to_dict(), indent=2, default=str))
        (report_dir / "report.md").write_text(self.format_report_markdown(result))
        (report_dir / "news.json").write_text(
            json.dumps([n.to_dict() for n in result.news], indent=2, default=str)
        )

        return report_dir

    def format_report_markdown(self, result: CycleResult) -> str:
        """Format the cycle as a markdown briefing."""
        summary = result.summary

        developments = "\n".join(
            f"- **{d.theme}** ({d.item_count} items): {d.headline} _({d.top_source})_"
            for d in summary.key_developments
        ) or "- None"

        view_changers = "\n".join(f"- {v}" for v in summary.what_would_change_view) or "- None"

        return f"""# Situation Report - {result.generated_at.strftime('%Y-%m-%d %H:%M')} UTC

## What Matters Now

{summary.summary}

**Confidence:** {summary.overall_confidence}
**Uncertainty:** {summary.uncertainty_level}

## Key Developments

{developments}

## Signals

{self.format_signals_table(result.signals)}

## Alerts

{self.format_alerts(result.alerts)}

## Scenarios

{self.format_scenarios(result.scenarios)}

## Narratives

{self.format_clusters(result.clusters)}

## What Would Change The View

{view_changers}

## Cycle Stats

- Items analyzed: {summary.news_analyzed}
- Active signals: {summary.signals_active}
- Scenarios with related news: {summary.scenarios_active}
- Duration: {result.duration_seconds:.1f}s
"""

    def format_signals_table(self, signals: list[Signal]) -> str:
        if not signals:
            return "No active signals."

        rows = [
            "| Signal | Strength | Label | Direction | Items (recent) |",
            "|--------|----------|-------|-----------|----------------|",
        ]
        for s in signals:
            rows.append(
                f"| {s.name} | {s.strength} | {s.strength_label} | {s.direction} "
                f"| {s.news_count} ({s.recent_news_count}) |"
            )
        return "\n".join(rows)

    def format_alerts(self, alerts: list[Signal]) -> str:
        if not alerts:
            return "No alerts this cycle."
        return "\n".join(f"- **{s.name}** at {s.strength} ({s.direction})" for s in alerts)

    def format_scenarios(self, scenarios: list[Scenario]) -> str:
        sections = []
        for scenario in scenarios:
            lines = [f"### {scenario.title} ({scenario.theme})", ""]
            for path in scenario.paths:
                marker = " **(leading)**" if path.id == scenario.leading_path else ""
                change = path.current_probability - path.definition.base_probability
                lines.append(
                    f"- {path.definition.name}: {path.current_probability}% "
                    f"(base {path.definition.base_probability}%, {change:+d}){marker}"
                )
            sections.append("\n".join(lines))
        return "\n\n".join(sections) or "No scenarios."

    def format_clusters(self, clusters: dict[str, list[NewsItem]]) -> str:
        if not clusters:
            return "No narratives."
        return "\n".join(f"- {name}: {len(items)} items" for name, items in clusters.items())
