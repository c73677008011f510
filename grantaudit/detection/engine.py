"""
Risk classification engine.

Runs every enabled flagging rule over a grant collection and collects the
labels each grant earned, in a fixed rule order.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from rich.console import Console
from rich.table import Table

from grantaudit.config import config
from grantaudit.data import Grant
from .criteria import CriteriaSet, merge_thresholds


@dataclass
class DetectionTask:
    """Track the outcome of one rule in the last run."""
    name: str
    display_name: str
    status: str = "pending"  # pending, success, failed, skipped
    flagged: int = 0
    message: str = ""
    error: Optional[str] = None


class DetectionEngine:
    """Orchestrates all risk flagging rules."""

    def __init__(self, criteria: Optional[CriteriaSet] = None, thresholds: Optional[dict] = None):
        if criteria is None:
            criteria = CriteriaSet.from_overrides(config.criteria_overrides)
        if thresholds is None:
            thresholds = config.detection_thresholds

        self.criteria = criteria
        self.thresholds = merge_thresholds(thresholds)
        self.console = Console()
        self.tasks: dict[str, DetectionTask] = {}

    def _get_rules(self) -> list[tuple[str, str, Callable]]:
        """All rules as (criterion id, display name, function), in label order."""
        from . import recipients
        from . import duplicates
        from . import anomalies
        from . import year_over_year
        from . import concentration

        return [
            ("corporate_welfare", "Corporate Welfare", recipients.detect_corporate_welfare),
            ("large_amount", "Large Amount", recipients.detect_large_amount),
            ("multiple_grants", "Multiple Grants", recipients.detect_multiple_grants),
            ("potential_duplication", "Potential Duplication", duplicates.detect_duplicate_programs),
            ("operational_grant", "Operational Grant", recipients.detect_operational),
            ("statistical_outlier", "Statistical Outlier", anomalies.detect_outliers),
            ("unusual_increase", "Unusual Increase", year_over_year.detect_unusual_increase),
            ("unusual_decrease", "Unusual Decrease", year_over_year.detect_unusual_decrease),
            ("recipient_concentration", "Recipient Concentration", concentration.detect_concentration),
        ]

    def run_all(self, grants: Iterable[Grant], verbose: bool = False) -> dict[str, list[str]]:
        """
        Run every enabled rule.

        Args:
            grants: The full grant collection to evaluate.
            verbose: Print a line per rule as it runs.

        Returns:
            Mapping of grant id to its labels. Every grant gets an entry,
            possibly empty.
        """
        grants = list(grants)
        labels: dict[str, list[str]] = {g.id: [] for g in grants}
        self.tasks = {}

        for name, display_name, detect_func in self._get_rules():
            task = DetectionTask(name=name, display_name=display_name)
            self.tasks[name] = task

            if not self.criteria.is_enabled(name):
                task.status = "skipped"
                task.message = "Disabled"
                continue

            if verbose:
                print(f"  Checking {display_name.lower()}...")

            try:
                hits = detect_func(grants, self.thresholds)
            except Exception as e:
                task.status = "failed"
                task.error = str(e)
                task.message = f"Error: {str(e)[:40]}"
                continue

            for grant_id, label in hits.items():
                labels[grant_id].append(label)

            task.flagged = len(hits)
            task.status = "success"
            task.message = f"{len(hits)} grants" if len(hits) != 1 else "1 grant"

        return labels

    def run_rule(self, rule_name: str, grants: Iterable[Grant]) -> dict[str, str]:
        """Run a specific rule, whether or not its criterion is enabled."""
        rule_map = {
            "corporate-welfare": "corporate_welfare",
            "large-amount": "large_amount",
            "multiple-grants": "multiple_grants",
            "potential-duplication": "potential_duplication",
            "duplicate-programs": "potential_duplication",
            "operational-grant": "operational_grant",
            "statistical-outlier": "statistical_outlier",
            "unusual-increase": "unusual_increase",
            "unusual-decrease": "unusual_decrease",
            "recipient-concentration": "recipient_concentration",
        }

        criterion_id = rule_map.get(rule_name, rule_name)
        for name, _, detect_func in self._get_rules():
            if name == criterion_id:
                return detect_func(list(grants), self.thresholds)

        raise ValueError(f"Unknown rule: {rule_name}")

    def classify_grant(self, grant: Grant, all_grants: Iterable[Grant]) -> list[str]:
        """Labels for one grant, evaluated against the whole collection."""
        pool = list(all_grants)
        if not any(g.id == grant.id for g in pool):
            pool.append(grant)
        return self.run_all(pool)[grant.id]

    def summary_table(self) -> Table:
        """Per-rule results of the last run."""
        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Rule", style="bold", width=26)
        table.add_column("Status", width=10)
        table.add_column("Flagged", justify="right", width=8)
        table.add_column("Details")

        status_styles = {
            "success": "[green]done[/green]",
            "failed": "[red]failed[/red]",
            "skipped": "[dim]skipped[/dim]",
            "pending": "[dim]pending[/dim]",
        }

        for task in self.tasks.values():
            flagged = "-"
            if task.flagged:
                flagged = f"[yellow]{task.flagged}[/yellow]"
            table.add_row(
                task.display_name,
                status_styles.get(task.status, task.status),
                flagged,
                task.message,
            )

        return table

    def print_summary(self) -> None:
        self.console.print(self.summary_table())

        failed = [t for t in self.tasks.values() if t.status == "failed"]
        total = sum(t.flagged for t in self.tasks.values())
        if failed:
            self.console.print(f"[yellow]⚠ Detection finished:[/yellow] {total} labels, {len(failed)} rules failed")
        else:
            self.console.print(f"[green]✓ Detection complete:[/green] {total} labels")


def classify_grant(
    grant: Grant,
    all_grants: Iterable[Grant],
    criteria: Optional[CriteriaSet] = None,
    thresholds: Optional[dict] = None,
) -> list[str]:
    """
    Risk labels for a single grant.

    Args:
        grant: The grant to classify.
        all_grants: The collection it is compared against.
        criteria: Enabled criteria (defaults to configured criteria).
        thresholds: Threshold overrides (defaults to configured thresholds).

    Returns:
        Labels in rule order; identical inputs give identical output.
    """
    engine = DetectionEngine(criteria=criteria, thresholds=thresholds)
    return engine.classify_grant(grant, all_grants)


def run_detection(
    grants: Iterable[Grant],
    rule: Optional[str] = None,
    criteria: Optional[CriteriaSet] = None,
    thresholds: Optional[dict] = None,
) -> dict[str, list[str]]:
    """
    Run risk detection over a grant collection.

    Args:
        grants: Grants to evaluate.
        rule: Specific rule to run, or None for all enabled rules.

    Returns:
        Mapping of grant id to labels.
    """
    engine = DetectionEngine(criteria=criteria, thresholds=thresholds)
    grants = list(grants)

    if rule:
        hits = engine.run_rule(rule, grants)
        return {g.id: [hits[g.id]] if g.id in hits else [] for g in grants}
    return engine.run_all(grants)
