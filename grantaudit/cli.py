"""
Grant Audit CLI - Command Line Interface

Entry point for all Grant Audit operations.
"""

import click
from tabulate import tabulate

from grantaudit import __version__
from grantaudit.config import config


def data_option(func):
    """Add the shared --data option to a command."""
    return click.option(
        "--data", "data_file",
        type=click.Path(exists=True, dir_okay=False),
        help="Load grants from a JSON or CSV file instead of the bundled sample",
    )(func)


def load_store(data_file=None):
    """Load the grant store from --data, the configured data file, or the sample."""
    from grantaudit.data import GrantStore

    path = data_file or config.data_file
    if not path:
        return GrantStore.from_sample()

    try:
        return GrantStore.from_file(path)
    except (OSError, ValueError) as e:
        click.echo(click.style(f"  Failed to load {path}: {e}", fg="red"))
        raise SystemExit(1)


def fail(message: str):
    click.echo(click.style(message, fg="red"))
    raise SystemExit(1)


def grant_rows(grants, with_flags=True):
    from grantaudit.aggregation import format_currency

    rows = []
    for g in grants:
        row = [g.id, g.ministry, g.program[:40], g.recipient[:35], g.fiscal_year, format_currency(g.amount)]
        if with_flags:
            row.append(click.style(g.flag_reason or "flagged", fg="yellow") if g.flagged else "-")
        rows.append(row)
    return rows


GRANT_HEADERS = ["ID", "Ministry", "Program", "Recipient", "Fiscal Year", "Amount", "Flag"]


def grant_filter_options(func):
    """Add the grant explorer filter options to a command."""
    from grantaudit.data import ALL_MINISTRIES
    from grantaudit.normalization import ALL_YEARS

    options = [
        click.option("--ministry", "-m", default=ALL_MINISTRIES, help="Ministry name"),
        click.option("--year", "-y", default=ALL_YEARS, help="Fiscal year, e.g. 2023-2024"),
        click.option("--search", "-s", default="", help="Search program or recipient"),
        click.option("--min", "min_amount", type=float, default=0.0, help="Minimum amount"),
        click.option("--max", "max_amount", type=float, default=None, help="Maximum amount"),
        click.option("--exclude-operational", is_flag=True, help="Hide grants to government services and agencies"),
        click.option("--sort", "sort_key", default="amount",
                     type=click.Choice(["amount", "fiscal_year", "ministry", "program", "recipient"])),
        click.option("--order", default="desc", type=click.Choice(["asc", "desc"])),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def filtered_grants(store, ministry, year, search, min_amount, max_amount, exclude_operational, sort_key, order):
    from grantaudit.query import GrantFilter, apply_filters, sort_grants

    filters = GrantFilter(
        ministry=ministry,
        fiscal_year=year,
        search_text=search,
        min_amount=min_amount,
        max_amount=max_amount,
        exclude_operational=exclude_operational,
    )
    return sort_grants(apply_filters(store.all(), filters), sort_key, order)


@click.group()
@click.version_option(version=__version__, prog_name="grantaudit")
@click.pass_context
def cli(ctx):
    """Grant Audit - Government Grants Exploration and Risk Flagging.

    Browse, filter and summarize public grant disbursements, flag risky
    grants and recipients for review, and export the results to CSV.
    """
    ctx.ensure_object(dict)


# =============================================================================
# Config Commands
# =============================================================================

@cli.command("config")
@click.option("--show", is_flag=True, help="Show current configuration")
def show_config(show):
    """View configuration."""
    if show:
        click.echo("\n=== Current Configuration ===\n")
        click.echo(f"API URL: {config.api_base_url}")
        click.echo(f"API Timeout: {config.api_timeout} seconds")
        click.echo(f"Data File: {config.data_file or '[bundled sample]'}")
        click.echo(f"Export Directory: {config.export_dir}")
        click.echo(f"Consolidation Threshold: {config.consolidation_threshold:.0%}")
        click.echo("\nDetection Thresholds:")
        for key, value in config.detection_thresholds.items():
            click.echo(f"  {key}: {value}")
        if config.criteria_overrides:
            click.echo("\nCriteria Overrides:")
            for key, value in config.criteria_overrides.items():
                click.echo(f"  {key}: {'enabled' if value else 'disabled'}")
    else:
        click.echo("Edit config.yaml directly or set environment variables.")
        click.echo("Use 'grantaudit config --show' to view current settings.")


# =============================================================================
# Grant Commands
# =============================================================================

@cli.group()
def grants():
    """Grant explorer commands."""
    pass


@grants.command("list")
@grant_filter_options
@click.option("--limit", "-n", default=50, help="Number of grants to show")
@data_option
def grants_list(ministry, year, search, min_amount, max_amount, exclude_operational, sort_key, order, limit, data_file):
    """List grants matching the filters."""
    from grantaudit.aggregation import format_currency

    store = load_store(data_file)
    results = filtered_grants(store, ministry, year, search, min_amount, max_amount,
                              exclude_operational, sort_key, order)

    if not results:
        click.echo("No grants found.")
        return

    click.echo(tabulate(grant_rows(results[:limit]), headers=GRANT_HEADERS, tablefmt="simple"))

    total = sum(g.amount for g in results)
    click.echo(f"\n{len(results)} of {len(store)} grants, {format_currency(total)} total")


@grants.command("export")
@grant_filter_options
@click.option("--flagged-only", is_flag=True, help="Export flagged grants only")
@click.option("--output", "-o", type=click.Path(file_okay=False), help="Directory to write the CSV to")
@data_option
def grants_export(ministry, year, search, min_amount, max_amount, exclude_operational, sort_key, order,
                  flagged_only, output, data_file):
    """Export grants matching the filters to CSV."""
    from grantaudit.export import generate_csv, write_export, GRANTS_PREFIX, FLAGGED_PREFIX

    store = load_store(data_file)
    results = filtered_grants(store, ministry, year, search, min_amount, max_amount,
                              exclude_operational, sort_key, order)
    if flagged_only:
        results = [g for g in results if g.flagged]

    prefix = FLAGGED_PREFIX if flagged_only else GRANTS_PREFIX
    try:
        path = write_export(generate_csv(results), prefix=prefix, directory=output)
    except OSError as e:
        fail(f"  Export failed: {e}")

    click.echo(click.style(f"Exported {len(results)} grants to {path}", fg="green"))


@grants.command("flagged")
@click.option("--search", "-s", default="", help="Search ministry, program, recipient or reason")
@click.option("--export", "export_csv", is_flag=True, help="Export the matching flagged grants to CSV")
@data_option
def grants_flagged(search, export_csv, data_file):
    """List grants flagged for review."""
    from grantaudit.aggregation import format_currency, summarize_flagged
    from grantaudit.query import search_flagged

    store = load_store(data_file)
    summary = summarize_flagged(store.all())

    click.echo("\n=== Flagged Grants ===\n")
    click.echo(f"  Flagged: {summary.flagged_count} of {summary.total_count} ({summary.flagging_rate}%)")
    click.echo(f"  Value at risk: {format_currency(summary.value_at_risk)}\n")

    results = search_flagged(store.all(), search)
    if not results:
        click.echo("No flagged grants found.")
        return

    rows = [
        [g.id, g.ministry, g.program[:40], g.recipient[:35], format_currency(g.amount),
         click.style(g.flag_reason or "-", fg="yellow")]
        for g in results
    ]
    click.echo(tabulate(rows, headers=["ID", "Ministry", "Program", "Recipient", "Amount", "Reason"],
                        tablefmt="simple"))

    if export_csv:
        from grantaudit.export import generate_csv, write_export, FLAGGED_PREFIX

        try:
            path = write_export(generate_csv(results), prefix=FLAGGED_PREFIX)
        except OSError as e:
            fail(f"  Export failed: {e}")
        click.echo(click.style(f"\nExported {len(results)} flagged grants to {path}", fg="green"))


# =============================================================================
# Dashboard Commands
# =============================================================================

@cli.group()
def dashboard():
    """Dashboard summary commands."""
    pass


@dashboard.command("summary")
@click.option("--published", is_flag=True, help="Show headline figures for the full published dataset")
@data_option
def dashboard_summary(published, data_file):
    """Show key metrics for the dataset."""
    from grantaudit.aggregation import compute_key_metrics
    from grantaudit.data import DATASET_METRICS

    metrics = DATASET_METRICS if published else compute_key_metrics(load_store(data_file).all())

    click.echo("\n=== Key Metrics ===\n")
    rows = [[m.title, m.value, m.description or ""] for m in metrics]
    click.echo(tabulate(rows, headers=["Metric", "Value", "Description"], tablefmt="simple"))


@dashboard.command("ministries")
@click.option("--year", "-y", default=None, help="Fiscal year, e.g. 2023-2024")
@click.option("--threshold", "-t", type=float, default=None, help="Share below which ministries are merged")
@click.option("--published", is_flag=True, help="Use published ministry totals instead of grant records")
@data_option
def dashboard_ministries(year, threshold, published, data_file):
    """Show funding by ministry."""
    from grantaudit.aggregation import (
        compute_ministry_totals,
        consolidate_small_categories,
        format_compact,
    )
    from grantaudit.normalization import ALL_YEARS

    year = year or ALL_YEARS
    threshold = threshold if threshold is not None else config.consolidation_threshold

    if published:
        totals = compute_ministry_totals(year_filter=year)
    else:
        totals = compute_ministry_totals(load_store(data_file).all(), year_filter=year)

    consolidated = consolidate_small_categories(totals, threshold)
    grand_total = sum(m.total for m in consolidated)

    if not grand_total:
        click.echo("No funding recorded for this selection.")
        return

    rows = [
        [m.ministry, format_compact(m.total), f"{m.total / grand_total:.1%}", "estimated" if m.estimated else ""]
        for m in consolidated
    ]

    click.echo(f"\n=== Funding by Ministry ({year}) ===\n")
    click.echo(tabulate(rows, headers=["Ministry", "Total", "Share", ""], tablefmt="simple"))


@dashboard.command("years")
@click.option("--published", is_flag=True, help="Use published yearly totals instead of grant records")
@data_option
def dashboard_years(published, data_file):
    """Show funding by fiscal year."""
    from grantaudit.aggregation import compute_yearly_totals, format_compact
    from grantaudit.data import YEARLY_TOTALS

    totals = YEARLY_TOTALS if published else compute_yearly_totals(load_store(data_file).all())

    rows = [[y.year, format_compact(y.total)] for y in totals]
    click.echo("\n=== Funding by Fiscal Year ===\n")
    click.echo(tabulate(rows, headers=["Fiscal Year", "Total"], tablefmt="simple"))


@dashboard.command("programs")
@click.argument("ministry")
@click.option("--year", "-y", default=None, help="Fiscal year, e.g. 2023-2024")
@data_option
def dashboard_programs(ministry, year, data_file):
    """Show funding by program within a ministry."""
    from grantaudit.aggregation import compute_program_breakdown, format_currency
    from grantaudit.normalization import ALL_YEARS

    store = load_store(data_file)
    programs = compute_program_breakdown(store.all(), ministry, year or ALL_YEARS)

    if not programs:
        click.echo(f"No programs found for {ministry}.")
        return

    rows = [[p.name, format_currency(p.total)] for p in programs]
    click.echo(f"\n=== {ministry} Programs ===\n")
    click.echo(tabulate(rows, headers=["Program", "Total"], tablefmt="simple"))


# =============================================================================
# Analysis Commands
# =============================================================================

@cli.group()
def analyze():
    """Risk flagging and analysis commands."""
    pass


@analyze.command("run")
@click.option("--rule", "-r", help="Run specific detection rule only")
@click.option("--enable", "-e", multiple=True, help="Enable a criterion by id")
@click.option("--disable", "-d", multiple=True, help="Disable a criterion by id")
@click.option("--grant", "-g", "grant_id", help="Classify a single grant")
@data_option
def analyze_run(rule, enable, disable, grant_id, data_file):
    """Run risk detection analysis."""
    from grantaudit.detection import CriteriaSet, DetectionEngine

    store = load_store(data_file)
    grants = store.all()

    try:
        criteria = CriteriaSet.from_overrides(config.criteria_overrides)
        for criterion_id in enable:
            criteria.set_enabled(criterion_id, True)
        for criterion_id in disable:
            criteria.set_enabled(criterion_id, False)
    except ValueError as e:
        fail(f"  {e}")

    engine = DetectionEngine(criteria=criteria)

    if grant_id:
        grant = store.get(grant_id)
        if not grant:
            fail(f"Grant {grant_id} not found.")
        labels = engine.classify_grant(grant, grants)
        click.echo(f"\n{grant.recipient} - {grant.program} ({grant.fiscal_year})")
        if labels:
            for label in labels:
                click.echo(click.style(f"  {label}", fg="yellow"))
        else:
            click.echo("  No risk labels.")
        return

    click.echo("Running risk detection analysis...")

    if rule:
        try:
            hits = engine.run_rule(rule, grants)
        except ValueError as e:
            fail(f"  {e}")
        labels = {gid: [label] for gid, label in hits.items()}
    else:
        labels = engine.run_all(grants, verbose=True)
        engine.print_summary()

    by_id = {g.id: g for g in grants}
    rows = [
        [gid, by_id[gid].recipient[:35], by_id[gid].program[:35], ", ".join(found)]
        for gid, found in labels.items() if found
    ]

    if not rows:
        click.echo("\nAnalysis complete. No grants flagged.")
        return

    click.echo(tabulate(rows, headers=["ID", "Recipient", "Program", "Labels"], tablefmt="simple"))
    click.echo(f"\nAnalysis complete. {len(rows)} grants labeled.")


@analyze.command("rules")
def analyze_rules():
    """List available flagging criteria."""
    from grantaudit.detection import CriteriaSet

    criteria = CriteriaSet.from_overrides(config.criteria_overrides)

    click.echo("\n=== Flagging Criteria ===\n")
    for c in criteria:
        status = click.style("on ", fg="green") if c.enabled else click.style("off", fg="red")
        click.echo(f"  [{status}] {c.id:25} {c.description}")


# =============================================================================
# Recipient Commands
# =============================================================================

@cli.group()
def recipients():
    """Recipient analysis commands."""
    pass


@recipients.command("multiple")
@click.option("--min", "minimum", default=3, help="Minimum number of grants")
@data_option
def recipients_multiple(minimum, data_file):
    """List recipients appearing in several grant records."""
    from grantaudit.detection import multiple_grant_recipients

    store = load_store(data_file)
    ranked = multiple_grant_recipients(store.all(), minimum)

    if not ranked:
        click.echo(f"No recipients with {minimum} or more grants.")
        return

    click.echo(tabulate(ranked, headers=["Recipient", "Grants"], tablefmt="simple"))


@recipients.command("top")
@click.option("--limit", "-n", default=10, help="Number of recipients to show")
@data_option
def recipients_top(limit, data_file):
    """List recipients by total funding, with risk factors."""
    from grantaudit.aggregation import format_currency
    from grantaudit.detection import CriteriaSet, summarize_recipients

    store = load_store(data_file)
    criteria = CriteriaSet.from_overrides(config.criteria_overrides)
    summaries = summarize_recipients(
        store.all(),
        criteria=criteria,
        thresholds=config.detection_thresholds,
        reviewed_ids=[item.id for item in store.tracker.items],
    )

    rows = [
        [s.name[:40], format_currency(s.total_amount), s.grant_count, s.program_count,
         click.style(", ".join(s.risk_factors), fg="yellow") if s.risk_factors else "-"]
        for s in summaries[:limit]
    ]
    click.echo(tabulate(rows, headers=["Recipient", "Total", "Grants", "Programs", "Risk Factors"],
                        tablefmt="simple"))


# =============================================================================
# Review Commands
# =============================================================================

@cli.group()
def review():
    """Review list commands."""
    pass


@review.command("list")
@click.option("--search", "-s", default="", help="Search name or ministry")
@click.option("--type", "item_type", default="all", type=click.Choice(["all", "program", "recipient"]))
@click.option("--reason", "-r", default="all", help="Filter on a flag reason")
@click.option("--export", "export_csv", is_flag=True, help="Export the review list to CSV")
@data_option
def review_list(search, item_type, reason, export_csv, data_file):
    """Build the review list from flagged programs and recipients."""
    from grantaudit.aggregation import format_currency
    from grantaudit.detection import (
        CriteriaSet,
        DetectionEngine,
        summarize_recipients,
        review_item_for_recipient,
    )
    from grantaudit.review import program_review_items

    store = load_store(data_file)
    grants = store.all()
    criteria = CriteriaSet.from_overrides(config.criteria_overrides)
    engine = DetectionEngine(criteria=criteria)

    for item in program_review_items(grants, engine.run_all(grants)):
        store.tracker.add_to_review(item)
    for summary in summarize_recipients(grants, criteria=criteria, thresholds=config.detection_thresholds):
        if summary.risk_factors:
            store.tracker.add_to_review(review_item_for_recipient(summary))

    items = store.tracker.filter_items(search=search, item_type=item_type, reason=reason)
    if not items:
        click.echo("No review items found.")
        return

    rows = [
        [item.name[:40], item.type.value, item.ministry or "-", format_currency(item.total_amount),
         click.style("; ".join(item.flag_reason), fg="yellow")]
        for item in items
    ]
    click.echo(tabulate(rows, headers=["Name", "Type", "Ministry", "Total", "Reasons"], tablefmt="simple"))
    click.echo(f"\nReasons: {', '.join(store.tracker.unique_reasons())}")

    if export_csv:
        from grantaudit.export import generate_review_csv, write_export, REVIEW_PREFIX

        try:
            path = write_export(generate_review_csv(items), prefix=REVIEW_PREFIX)
        except OSError as e:
            fail(f"  Export failed: {e}")
        click.echo(click.style(f"\nExported {len(items)} review items to {path}", fg="green"))


# =============================================================================
# Data Quality Command
# =============================================================================

@cli.command()
@data_option
def quality(data_file):
    """Assess data quality of the grant records."""
    from grantaudit.aggregation import assess_data_quality
    from grantaudit.data import SAMPLE_GRANTS, read_records

    path = data_file or config.data_file
    if path:
        try:
            records = read_records(path)
        except (OSError, ValueError) as e:
            fail(f"  Failed to load {path}: {e}")
    else:
        records = SAMPLE_GRANTS

    report = assess_data_quality(records)

    click.echo("\n=== Data Quality ===\n")
    click.echo(f"  Records: {report.total_records}")
    click.echo(f"  Records with issues: {report.issues_count} ({report.issue_percentage:.1f}%)\n")

    rows = [[i.field, i.issue_count, f"{i.percentage:.1f}%"] for i in report.issues_by_field]
    click.echo(tabulate(rows, headers=["Field", "Issues", "Share"], tablefmt="simple"))

    if report.has_warning:
        click.echo(click.style("\nWarning: more than 10% of records have data quality issues.", fg="yellow"))


# =============================================================================
# API Commands
# =============================================================================

@cli.group()
def api():
    """Remote grants API commands."""
    pass


@api.command("elements")
def api_elements():
    """Fetch ministry and fiscal year options."""
    from grantaudit.api import GrantsAPIClient

    with GrantsAPIClient() as client:
        result = client.fetch_elements()

    if not result.ok:
        click.echo(click.style("Using default options.", fg="yellow"))

    click.echo("\nMinistries:")
    for ministry in result.data.get("ministries", []):
        click.echo(f"  {ministry}")
    click.echo("\nFiscal Years:")
    for year in result.data.get("displayFiscalYears", []):
        click.echo(f"  {year}")


@api.command("trends")
@click.option("--ministry", "-m", multiple=True, help="Ministry filter")
def api_trends(ministry):
    """Fetch yearly funding trends."""
    from grantaudit.aggregation import format_currency
    from grantaudit.api import GrantsAPIClient

    filters = {"ministries": list(ministry)} if ministry else {}
    with GrantsAPIClient() as client:
        result = client.fetch_trends(filters)

    if not result.data or not isinstance(result.data, list):
        click.echo("No trend data available.")
        return

    rows = [
        [row.get("fiscalYear"), format_currency(float(row.get("totalAmount") or 0)),
         row.get("recipientCount", "-"), format_currency(float(row.get("averageGrantAmount") or 0))]
        for row in result.data
    ]
    click.echo(tabulate(rows, headers=["Fiscal Year", "Total", "Recipients", "Average Grant"], tablefmt="simple"))


if __name__ == "__main__":
    cli()
