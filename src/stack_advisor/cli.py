"""CLI for the Stack Advisor.

Provides command-line access to technology analysis, comparison, stack
recommendation and component compatibility checks.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import BaseModel
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from tech_catalog.catalog import CatalogLoadError, CatalogValidator
from tech_catalog.schema import Category, Context

from .config import (
    config_search_paths,
    config_sections,
    find_config_file,
    get_config,
    load_config,
    reset_config,
    save_default_config,
)
from .engine import StackAdvisor
from .errors import AdvisorError
from .health import summary_line
from .rules import RuleValidator
from .schema import CompatibilityReport, ComparisonResult, StackRecommendation, TechnologyAnalysis

console = Console()

CONTEXT_CHOICES = [c.value for c in Context]

GRADE_COLORS = {
    "A": "green",
    "B": "cyan",
    "C": "yellow",
    "D": "red",
}


@click.group()
@click.version_option(version="1.0.0", prog_name="stack-advisor")
@click.option(
    "--config", "-C",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    help="Path to a stack-advisor YAML config (default: auto-detect)"
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging on stderr")
@click.pass_context
def main(ctx: click.Context, config_path: Optional[Path], verbose: bool):
    """Technology Stack Advisor.

    Scores technologies across six quality dimensions, recommends stacks
    per project type and flags conflicts between installed components.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


def _build_advisor(ctx: click.Context) -> StackAdvisor:
    config_path = ctx.obj.get("config_path") or find_config_file()
    if config_path:
        load_config(config_path)
    else:
        reset_config()
    return StackAdvisor.from_defaults(get_config())


def output_json(result: BaseModel) -> None:
    """Output result as JSON."""
    print(result.model_dump_json(indent=2))


def _fail(e: Exception) -> None:
    console.print(f"[red]Error: {escape(str(e))}[/red]")
    sys.exit(1)


@main.command("list")
@click.option(
    "--category", "-c",
    type=click.Choice([c.value for c in Category]),
    help="Only show one category"
)
@click.option("--context", "-x", type=click.Choice(CONTEXT_CHOICES), default="default", show_default=True)
@click.pass_context
def list_cmd(ctx: click.Context, category: Optional[str], context: str):
    """List catalog technologies grouped by category.

    Examples:
        stack-advisor list
        stack-advisor list -c database -x enterprise
    """
    from .scorer import overall_score, score_to_grade

    try:
        advisor = _build_advisor(ctx)
    except (AdvisorError, CatalogLoadError) as e:
        _fail(e)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Category")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Score", justify="right")
    table.add_column("Grade")

    for cat, techs in advisor.catalog.grouped_by_category().items():
        if category and cat.value != category:
            continue
        for tech in techs:
            score = overall_score(tech.scores_for(Context(context)))
            table.add_row(cat.value, tech.id, tech.name, str(score), score_to_grade(score))

    console.print(table)
    version = advisor.data_version()
    console.print(f"[dim]Data version: scores {version.scores}, compatibility {version.compatibility}[/dim]")


@main.command("analyze")
@click.argument("technology")
@click.option("--context", "-x", type=click.Choice(CONTEXT_CHOICES), default="default", show_default=True)
@click.option("--json-output", "-j", is_flag=True, help="Output raw JSON")
@click.pass_context
def analyze_cmd(ctx: click.Context, technology: str, context: str, json_output: bool):
    """Analyze one technology's scores, strengths and weaknesses.

    Example:
        stack-advisor analyze nextjs -x enterprise
    """
    try:
        result = _build_advisor(ctx).analyze(technology, context)
    except (AdvisorError, CatalogLoadError) as e:
        _fail(e)

    if json_output:
        output_json(result)
    else:
        display_analysis(result)


@main.command("compare")
@click.argument("technologies", nargs=-1, required=True)
@click.option("--context", "-x", type=click.Choice(CONTEXT_CHOICES), default="default", show_default=True)
@click.option("--json-output", "-j", is_flag=True, help="Output raw JSON")
@click.pass_context
def compare_cmd(ctx: click.Context, technologies: tuple, context: str, json_output: bool):
    """Compare 2-4 technologies side by side.

    Example:
        stack-advisor compare nextjs sveltekit nuxt
    """
    try:
        result = _build_advisor(ctx).compare(list(technologies), context)
    except (AdvisorError, CatalogLoadError) as e:
        _fail(e)

    if json_output:
        output_json(result)
    else:
        display_comparison(result)


@main.command("recommend")
@click.argument("project_type")
@click.option("--scale", "-s", default="mvp", show_default=True, help="mvp, startup, growth or enterprise")
@click.option("--json-output", "-j", is_flag=True, help="Output raw JSON")
@click.pass_context
def recommend_cmd(ctx: click.Context, project_type: str, scale: str, json_output: bool):
    """Recommend a compatible stack for a project type.

    Examples:
        stack-advisor recommend saas
        stack-advisor recommend api --scale enterprise
    """
    try:
        result = _build_advisor(ctx).recommend(project_type, scale)
    except (AdvisorError, CatalogLoadError) as e:
        _fail(e)

    if json_output:
        output_json(result)
    else:
        display_recommendation(result)


@main.command("check")
@click.argument("components", nargs=-1, required=True)
@click.option("--json-output", "-j", is_flag=True, help="Output raw JSON")
@click.pass_context
def check_cmd(ctx: click.Context, components: tuple, json_output: bool):
    """Check installed components for conflicts, redundancies and synergies.

    Example:
        stack-advisor check supabase neon stripe
    """
    try:
        report = _build_advisor(ctx).check_compatibility(list(components))
    except (AdvisorError, CatalogLoadError) as e:
        _fail(e)

    if json_output:
        output_json(report)
    else:
        display_report(report)


@main.command("validate")
@click.pass_context
def validate_cmd(ctx: click.Context):
    """Validate the bundled catalog, compatibility matrix and rule table."""
    try:
        advisor = _build_advisor(ctx)
    except (AdvisorError, CatalogLoadError) as e:
        _fail(e)

    all_valid = True

    catalog_issues = CatalogValidator().validate(advisor.catalog, advisor.matrix)
    if catalog_issues:
        all_valid = False
        console.print(f"[red]✗ Catalog invalid ({len(catalog_issues)} issues)[/red]")
        for issue in catalog_issues:
            console.print(f"  - {issue}")
    else:
        console.print(f"[green]✓ Catalog valid: {len(advisor.catalog)} technologies[/green]")

    rule_issues = RuleValidator(advisor.canonicalizer).validate(advisor.index.rules)
    if rule_issues:
        all_valid = False
        console.print(f"[red]✗ Rule table invalid ({len(rule_issues)} issues)[/red]")
        for issue in rule_issues:
            console.print(f"  - {issue}")
    else:
        console.print(f"[green]✓ Rule table valid: {len(advisor.index.rules)} rules[/green]")

    sys.exit(0 if all_valid else 1)


@main.command("init-config")
@click.option(
    "--out", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default="stack-advisor.yaml",
    help="Output path for the configuration file"
)
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing file")
def init_config_cmd(out: Path, force: bool):
    """Write the default configuration as a YAML file to edit.

    Example:
        stack-advisor init-config --out my-config.yaml
    """
    if out.exists() and not force:
        _fail(FileExistsError(f"Config file already exists: {out} (use --force to overwrite)"))

    try:
        save_default_config(out)
    except OSError as e:
        _fail(e)

    console.print(f"[green]✓[/green] Config file created: {out}")

    sections = Table(title="Sections", show_header=False, box=None)
    sections.add_column("Section", style="bold")
    sections.add_column("Purpose")
    for name, description in config_sections():
        sections.add_row(name, description)
    console.print(sections)

    console.print("\nSearch order when --config is not given:")
    for position, path in enumerate(config_search_paths(), start=1):
        console.print(f"  {position}. {path}")


# =============================================================================
# Display helpers
# =============================================================================


def display_analysis(result: TechnologyAnalysis):
    console.print(Panel(
        f"[bold]{result.name}[/bold] ({result.category.value})\n"
        f"Overall: [bold]{result.overall_score}/100[/bold] ({result.grade})\n"
        f"URL: {result.url}",
        title=f"Analysis (context: {result.context.value})",
        border_style="blue",
    ))

    table = Table(show_header=True, header_style="bold")
    table.add_column("Dimension")
    table.add_column("Score", justify="right")
    table.add_column("Grade")
    for dim in result.dimensions:
        table.add_row(dim.label, str(dim.score), dim.grade)
    console.print(table)

    if result.strengths:
        console.print("\n[bold green]Strengths[/bold green]")
        for dim in result.strengths:
            console.print(f"  • {dim.label} ({dim.score}/100)")

    if result.weaknesses:
        console.print("\n[bold yellow]Weaknesses[/bold yellow]")
        for dim in result.weaknesses:
            console.print(f"  • {dim.label} ({dim.score}/100)")

    if result.compatible:
        console.print("\n[bold]Compatible technologies[/bold]")
        console.print("  " + ", ".join(f"{c.id} ({c.score})" for c in result.compatible))


def display_comparison(result: ComparisonResult):
    table = Table(title=f"Overall (context: {result.context.value})", show_header=True, header_style="bold")
    table.add_column("Technology")
    table.add_column("Score", justify="right")
    table.add_column("Grade")
    for tech in result.ranking:
        table.add_row(tech.name, str(tech.overall_score), tech.grade)
    console.print(table)

    winners = Table(title="Per-dimension winners", show_header=True, header_style="bold")
    winners.add_column("Dimension")
    winners.add_column("Winner")
    winners.add_column("Margin", justify="right")
    winners.add_column("Notes")
    for w in result.dimension_winners:
        winners.add_row(w.label, w.winner or "Tie", f"+{w.margin}" if w.winner else "-", w.notes)
    console.print(winners)

    pairs = Table(title="Compatibility", show_header=True, header_style="bold")
    pairs.add_column("Pair")
    pairs.add_column("Score", justify="right")
    pairs.add_column("Verdict")
    for pair in result.compatibility:
        pairs.add_row(f"{pair.tech_a} ↔ {pair.tech_b}", str(pair.score), pair.verdict)
    console.print(pairs)

    console.print(f"\n[bold]Verdict:[/bold] {result.verdict}")
    console.print(f"[bold]Recommendation:[/bold] {result.recommendation}")


def display_recommendation(result: StackRecommendation):
    console.print(
        f"\n[bold blue]Recommended stack[/bold blue] for {result.project_type} "
        f"({result.scale}, context: {result.context.value})"
    )
    if not result.selections:
        console.print("[yellow]No technologies available for this project type.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Category")
    table.add_column("Technology")
    table.add_column("Score", justify="right")
    table.add_column("Grade")
    for selection in result.selections:
        table.add_row(selection.category.value, selection.technology, str(selection.score), selection.grade)
    console.print(table)


def display_report(report: CompatibilityReport):
    summary = report.summary
    color = GRADE_COLORS.get(summary.grade.value, "white")
    console.print(Panel(
        f"[bold {color}]Health Score: {summary.score}/100 (Grade {summary.grade.value})[/bold {color}]\n"
        f"{summary_line(report)}",
        title="Compatibility Report",
        border_style=color,
    ))

    sections = [
        ("Conflicts", "red", report.conflicts),
        ("Redundancies", "yellow", report.redundancies),
        ("Synergies", "green", report.synergies),
        ("Conditional", "cyan", report.conditionals),
    ]
    for title, style, matches in sections:
        if not matches:
            continue
        console.print(f"\n[bold {style}]{title}[/bold {style}]")
        for matched in matches:
            rule = matched.rule
            console.print(f"  [bold]{matched.input_a} ↔ {matched.input_b}[/bold] ({rule.severity.value})")
            console.print(f"    {rule.reason}")
            if rule.solution:
                console.print(f"    [dim]Solution: {rule.solution}[/dim]")

    if report.suggestions:
        console.print("\n[bold]Suggestions[/bold]")
        for suggestion in report.suggestions:
            console.print(f"  • {suggestion.mcp} ({suggestion.reason})")
