"""CLI for the Solution Matching Engine.

Provides command-line interface for matching business subtasks against
a solution catalog, scoring solutions and tiering agents.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from .agent_scorer import AgentScorer
from .catalog import validate_catalog, validate_subtasks
from .config import (
    ConfigurationError,
    find_config_file,
    get_config,
    load_config,
    save_default_config,
)
from .engine import ENGINE_VERSION, SolutionEngine
from .filters import CatalogFilter, FilterCriteria
from .schema import (
    AgentSolution,
    Difficulty,
    EngineResult,
    Priority,
    ScoringContext,
    SetupTime,
    SolutionCategory,
    SolutionType,
)
from .scorer import RankingOptions, SolutionScorer, SortKey

console = Console()

TIER_COLORS = {
    "Generalist": "green",
    "Specialist": "cyan",
    "Experimental": "yellow",
}

PRIORITY_COLORS = {
    "High": "green",
    "Medium": "yellow",
    "Low": "red",
}


def _choice(enum_cls) -> click.Choice:
    return click.Choice([m.value for m in enum_cls], case_sensitive=False)


@click.group()
@click.version_option(version=ENGINE_VERSION, prog_name="solution-engine")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to an engine config YAML (default: discovered automatically)"
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity"
)
def main(config_path: Optional[str], log_level: str):
    """Solution Matching and Scoring Engine.

    Matches business subtasks to automation solutions (workflows and AI
    agents) and returns ranked recommendations, combinations and a
    phased implementation roadmap.
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )

    path = Path(config_path) if config_path else find_config_file()
    if path is None:
        return
    try:
        load_config(path)
    except (ConfigurationError, OSError) as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@main.command("match")
@click.option(
    "--catalog", "-c",
    required=True,
    type=click.Path(exists=True),
    help="Path to the solution catalog JSON"
)
@click.option(
    "--subtasks", "-s",
    required=True,
    type=click.Path(exists=True),
    help="Path to the subtasks JSON"
)
@click.option(
    "--out", "-o",
    type=click.Path(),
    help="Output file for JSON results (default: stdout)"
)
@click.option(
    "--json-output", "-j",
    is_flag=True,
    help="Output raw JSON instead of formatted text"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Show detailed output"
)
def match_cmd(catalog: str, subtasks: str, out: Optional[str], json_output: bool, verbose: bool):
    """Match subtasks against the solution catalog.

    Examples:
        solution-engine match -c catalog.json -s subtasks.json
        solution-engine match -c catalog.json -s subtasks.json -v -o result.json
    """
    try:
        engine = SolutionEngine()
        engine.load_catalog(catalog)

        if not json_output:
            console.print(f"\n[bold blue]Solution Matching Engine[/bold blue]")
            console.print(f"Catalog: {catalog} ({engine.catalog.total_solutions} solutions)")
            console.print(f"Subtasks: {subtasks}")
            console.print()

        result = engine.run_file(subtasks)

        if json_output:
            output_json(result, out)
        else:
            display_result(result, verbose)
            if out:
                output_json(result, out)
                console.print(f"\n[green]Results saved to {out}[/green]")

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@main.command("score")
@click.option(
    "--catalog", "-c",
    required=True,
    type=click.Path(exists=True),
    help="Path to the solution catalog JSON"
)
@click.option("--domain", "-d", help="Business domain hint (e.g. Finance)")
@click.option(
    "--automation-potential", "-p",
    type=click.IntRange(0, 100),
    help="Target automation potential (0-100)"
)
@click.option("--difficulty", type=_choice(Difficulty), help="Preferred difficulty")
@click.option("--setup-time", type=_choice(SetupTime), help="Preferred setup time")
@click.option("--priority", type=_choice(Priority), help="Preferred implementation priority")
@click.option(
    "--sort-by",
    type=click.Choice([k.value for k in SortKey]),
    default=SortKey.OVERALL.value,
    show_default=True,
    help="Score axis to sort by"
)
@click.option(
    "--max-results", "-n",
    default=10,
    type=int,
    help="Maximum number of solutions to show"
)
def score_cmd(
    catalog: str,
    domain: Optional[str],
    automation_potential: Optional[int],
    difficulty: Optional[str],
    setup_time: Optional[str],
    priority: Optional[str],
    sort_by: str,
    max_results: int,
):
    """Score and rank catalog solutions against optional hints.

    Examples:
        solution-engine score -c catalog.json
        solution-engine score -c catalog.json -d Finance -p 90 --setup-time Quick
    """
    try:
        engine = SolutionEngine()
        cat = engine.load_catalog(catalog)

        context = ScoringContext(
            business_domain=domain,
            automation_potential=automation_potential,
            difficulty=Difficulty(difficulty) if difficulty else None,
            setup_time=SetupTime(setup_time) if setup_time else None,
            priority=Priority(priority) if priority else None,
        )
        scorer = SolutionScorer(get_config().solution_scoring)
        scores = scorer.score_and_rank(
            cat.solutions,
            context,
            RankingOptions(sort_by=SortKey(sort_by), limit=max_results),
        )

        names = {s.id: s.name for s in cat.solutions}
        table = Table(show_header=True, header_style="bold", title="Solution Scores")
        table.add_column("#", justify="right")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Name")
        table.add_column("Overall", justify="right")
        table.add_column("Rel", justify="right")
        table.add_column("Qual", justify="right")
        table.add_column("Value", justify="right")
        table.add_column("Impl", justify="right")
        table.add_column("Conf", justify="right")

        for s in scores:
            table.add_row(
                str(s.ranking),
                s.solution_id[:30],
                names.get(s.solution_id, "")[:40],
                f"[bold]{s.overall_score}[/bold]",
                str(s.relevance_score),
                str(s.quality_score),
                str(s.business_value_score),
                str(s.implementation_score),
                f"{s.confidence}%",
            )

        console.print(table)
        if not scores:
            console.print("[yellow]No solutions met the minimum score[/yellow]")

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@main.command("agents")
@click.option(
    "--catalog", "-c",
    required=True,
    type=click.Path(exists=True),
    help="Path to the solution catalog JSON"
)
@click.option("--domain", "-d", help="Business domain hint (e.g. marketing)")
@click.option(
    "--capability",
    multiple=True,
    help="Required capability (repeatable)"
)
@click.option(
    "--preferred-domain",
    multiple=True,
    help="Preferred agent domain (repeatable)"
)
@click.option("--query", "-q", help="Free-text query matched against capabilities")
@click.option(
    "--max-results", "-n",
    default=10,
    type=int,
    help="Maximum number of agents to show"
)
def agents_cmd(
    catalog: str,
    domain: Optional[str],
    capability: tuple,
    preferred_domain: tuple,
    query: Optional[str],
    max_results: int,
):
    """Tier the catalog's AI agents.

    Examples:
        solution-engine agents -c catalog.json
        solution-engine agents -c catalog.json -d marketing --capability web_search
    """
    try:
        engine = SolutionEngine()
        cat = engine.load_catalog(catalog)
        agents = [s for s in cat.solutions if isinstance(s, AgentSolution)]

        context = ScoringContext(
            business_domain=domain,
            required_capabilities=list(capability),
            preferred_domains=list(preferred_domain),
            user_query=query,
        )
        scores = AgentScorer(get_config().agent_scoring).score_all(agents, context)[:max_results]

        if not scores:
            console.print("[yellow]No agents found in catalog[/yellow]")
            return

        names = {a.id: a.name for a in agents}
        console.print(f"\n[bold]Agent Tiers[/bold] ({len(agents)} agents)\n")
        for i, s in enumerate(scores, 1):
            color = TIER_COLORS.get(s.tier.value, "white")
            console.print(
                f"  [bold cyan]{i}. {names.get(s.agent_id, s.agent_id)}[/bold cyan] "
                f"[bold]{s.overall_score}[/bold] [{color}]{s.tier.value}[/{color}]"
            )
            for reason in s.reasoning:
                console.print(f"     [green]•[/green] {reason}")
            console.print(f"     [dim]{s.disclaimer} (confidence {s.confidence}%)[/dim]")
            console.print()

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@main.command("validate")
@click.option(
    "--catalog", "-c",
    type=click.Path(),
    help="Path to the solution catalog JSON"
)
@click.option(
    "--subtasks", "-s",
    type=click.Path(),
    help="Path to the subtasks JSON"
)
def validate_cmd(catalog: Optional[str], subtasks: Optional[str]):
    """Validate catalog and/or subtask files.

    Examples:
        solution-engine validate -c catalog.json
        solution-engine validate -c catalog.json -s subtasks.json
    """
    if not catalog and not subtasks:
        console.print("[yellow]Please specify --catalog and/or --subtasks to validate[/yellow]")
        return

    all_valid = True

    if catalog:
        is_valid, issues = validate_catalog(catalog)
        if is_valid:
            console.print(f"[green]✓ Catalog valid: {catalog}[/green]")
        else:
            console.print(f"[red]✗ Catalog invalid: {catalog}[/red]")
            for issue in issues:
                console.print(f"  - {issue}")
            all_valid = False

    if subtasks:
        is_valid, issues = validate_subtasks(subtasks)
        if is_valid:
            console.print(f"[green]✓ Subtasks valid: {subtasks}[/green]")
        else:
            console.print(f"[red]✗ Subtasks invalid: {subtasks}[/red]")
            for issue in issues:
                console.print(f"  - {issue}")
            all_valid = False

    sys.exit(0 if all_valid else 1)


@main.command("inspect")
@click.option(
    "--catalog", "-c",
    required=True,
    type=click.Path(exists=True),
    help="Path to the solution catalog JSON"
)
@click.option(
    "--id", "solution_id",
    help="Show details for specific solution ID"
)
@click.option(
    "--type", "-t", "solution_type",
    type=_choice(SolutionType),
    help="Filter by solution type"
)
@click.option(
    "--category", "-k",
    type=_choice(SolutionCategory),
    help="Filter by category"
)
@click.option(
    "--query", "-q",
    help="Text search over name, description, tags and author"
)
@click.option(
    "--facets",
    is_flag=True,
    help="Show value counts per facet"
)
def inspect_cmd(
    catalog: str,
    solution_id: Optional[str],
    solution_type: Optional[str],
    category: Optional[str],
    query: Optional[str],
    facets: bool,
):
    """Inspect the solution catalog.

    View catalog contents and filter by various criteria.
    """
    try:
        engine = SolutionEngine()
        cat = engine.load_catalog(catalog)

        console.print(f"\n[bold blue]Solution Catalog[/bold blue]")
        console.print(f"Version: {cat.version or 'unversioned'}")
        console.print(f"Total Solutions: {cat.total_solutions}")
        console.print()

        if solution_id:
            solution = cat.get(solution_id)
            if not solution:
                console.print(f"[red]Solution not found: {solution_id}[/red]")
                return
            display_solution_detail(solution)
            return

        catalog_filter = CatalogFilter()
        criteria = FilterCriteria(
            types=[SolutionType(solution_type)] if solution_type else [],
            categories=[SolutionCategory(category)] if category else [],
        )
        filtered, _ = catalog_filter.filter(cat.solutions, criteria)
        if query:
            filtered = catalog_filter.search(filtered, query)

        if facets:
            display_facets(catalog_filter.facets(filtered))
            return

        console.print(f"Showing {len(filtered)} solutions:\n")

        table = Table(show_header=True, header_style="bold")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Name")
        table.add_column("Type")
        table.add_column("Category")
        table.add_column("Auto %", justify="right")
        table.add_column("Priority")

        for s in filtered[:20]:
            table.add_row(
                s.id[:30],
                s.name[:40],
                s.type.value,
                s.category.value,
                str(s.automation_potential),
                s.implementation_priority.value,
            )

        console.print(table)

        if len(filtered) > 20:
            console.print(f"\n[dim]... and {len(filtered) - 20} more[/dim]")

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


def display_result(result: EngineResult, verbose: bool):
    """Display an engine result in formatted text."""
    matching = result.matching

    console.print(Panel(
        f"Subtasks: {len(matching.subtask_matches)} | "
        f"Solutions: {matching.total_solutions} | "
        f"Recommendations: {matching.matched_solutions}\n"
        f"Average match score: [bold]{matching.average_match_score:.1f}[/bold]",
        title="Matching Summary",
    ))

    if matching.recommendations:
        console.print("\n[bold]Recommendations:[/bold]")
        for rec in matching.recommendations:
            console.print(f"  [green]•[/green] {rec}")

    for match in matching.subtask_matches:
        color = PRIORITY_COLORS.get(match.implementation_priority.value, "white")
        console.print(
            f"\n[bold]{match.subtask_name}[/bold] "
            f"[{color}]{match.implementation_priority.value} priority[/{color}] "
            f"(score {match.total_match_score:.1f}, ROI {match.estimated_roi_label}, "
            f"time to value {match.time_to_value})"
        )
        if not match.matched_solutions:
            console.print("  [dim]No matching solutions[/dim]")
            continue

        for i, rec in enumerate(match.matched_solutions[:5], 1):
            tier = f" [dim]{rec.agent_score.tier.value}[/dim]" if rec.agent_score else ""
            console.print(
                f"  [bold cyan]{i}. {rec.solution.name}[/bold cyan] "
                f"[bold]{rec.match_score}%[/bold] {rec.solution.type.value}{tier}"
            )
            if verbose:
                console.print(f"     ID: {rec.solution.id}")
                console.print(f"     Cost: {rec.estimated_cost}")
                for reason in rec.reasoning:
                    console.print(f"     [green]•[/green] {reason}")
                if rec.alternatives:
                    alts = ", ".join(a.name for a in rec.alternatives)
                    console.print(f"     [dim]Alternatives: {alts}[/dim]")

    if result.combinations:
        console.print("\n[bold]Combinations:[/bold]\n")
        for combo in result.combinations[:5]:
            c = combo.combination
            console.print(
                f"  [bold cyan]{c.name}[/bold cyan] [bold]{combo.match_score:.0f}[/bold] "
                f"({len(c.solutions)} solutions, {c.estimated_total_setup_time}, "
                f"{c.total_estimated_cost})"
            )
            if verbose:
                console.print(f"     Order: {' → '.join(c.implementation_order)}")
                console.print(f"     ROI: {c.combined_roi}")

    roadmap = result.roadmap
    tree = Tree(
        f"[bold]Implementation Roadmap[/bold] "
        f"({roadmap.total_estimated_time}, {roadmap.total_estimated_cost})"
    )
    for phase in roadmap.phases:
        branch = tree.add(f"Phase {phase.phase}: {phase.name} [dim]{phase.duration}[/dim]")
        for name in phase.solutions:
            branch.add(name)
    console.print()
    console.print(tree)

    if result.excluded:
        console.print(f"\n[dim]{len(result.excluded)} solutions excluded by filters[/dim]")

    if result.processing_warnings:
        console.print("\n[dim]Warnings:[/dim]")
        for warning in result.processing_warnings:
            console.print(f"  [dim]• {warning}[/dim]")


def display_solution_detail(solution):
    """Display detailed solution information."""
    tree = Tree(f"[bold cyan]{solution.name}[/bold cyan]")

    identity = tree.add("[bold]Identity[/bold]")
    identity.add(f"ID: {solution.id}")
    identity.add(f"Type: {solution.type.value}")
    identity.add(f"Status: {solution.status.value}")
    if solution.author:
        identity.add(f"Author: {solution.author}")
    if solution.documentation_url:
        identity.add(f"Docs: {solution.documentation_url}")

    classification = tree.add("[bold]Classification[/bold]")
    classification.add(f"Category: {solution.category.value}")
    if solution.subcategories:
        classification.add(f"Subcategories: {', '.join(solution.subcategories)}")
    if solution.tags:
        classification.add(f"Tags: {', '.join(solution.tags)}")

    adoption = tree.add("[bold]Adoption[/bold]")
    adoption.add(f"Difficulty: {solution.difficulty.value}")
    adoption.add(f"Setup Time: {solution.setup_time.value}")
    adoption.add(f"Deployment: {solution.deployment.value}")
    adoption.add(f"Pricing: {solution.pricing.value if solution.pricing else 'unspecified'}")

    value = tree.add("[bold]Value[/bold]")
    value.add(f"Automation Potential: {solution.automation_potential}%")
    value.add(f"Estimated ROI: {solution.estimated_roi.label or 'unknown'}")
    value.add(f"Time to Value: {solution.time_to_value.label or 'unknown'}")
    value.add(f"Priority: {solution.implementation_priority.value}")

    if isinstance(solution, AgentSolution):
        agent = tree.add("[bold]Agent[/bold]")
        agent.add(f"Model: {solution.model or 'unknown'}")
        agent.add(f"Provider: {solution.provider or 'unknown'}")
        if solution.capabilities:
            agent.add(f"Capabilities: {', '.join(solution.capabilities)}")
        if solution.domains:
            agent.add(f"Domains: {', '.join(solution.domains)}")

    if solution.requirements:
        requirements = tree.add("[bold]Requirements[/bold]")
        for req in solution.requirements:
            requirements.add(f"{req.category} ({req.importance.value}): {', '.join(req.items)}")

    console.print(tree)


def display_facets(facets: dict[str, dict[str, int]]):
    """Display facet counts."""
    for name, counts in facets.items():
        if not counts:
            continue
        table = Table(show_header=True, header_style="bold", title=name.replace("_", " ").title())
        table.add_column("Value")
        table.add_column("Count", justify="right")
        for value, count in counts.items():
            table.add_row(value, str(count))
        console.print(table)


def output_json(result: EngineResult, out_path: Optional[str]):
    """Output result as JSON."""
    json_str = result.model_dump_json(indent=2, by_alias=True)

    if out_path:
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(json_str)
    else:
        print(json_str)


@main.command("init-config")
@click.argument("out", type=click.Path(), default="engine-config.yaml", required=False)
@click.option(
    "--force", "-f",
    is_flag=True,
    help="Overwrite existing config file"
)
def init_config_cmd(out: str, force: bool):
    """Generate a default engine configuration file.

    Creates a YAML configuration file with all available settings
    for customizing scoring, matching and combinations.

    Example:
        solution-engine init-config my-config.yaml
    """
    out_path = Path(out)
    if out_path.exists() and not force:
        console.print(f"[red]Error:[/red] Config file already exists: {out}")
        console.print("Use --force to overwrite")
        sys.exit(1)

    try:
        save_default_config(out_path)
        console.print(f"[green]✓[/green] Config file created: {out}")
        console.print("\nThis file configures:")
        console.print("  • solution_scoring - Axis weights, boosts and score thresholds")
        console.print("  • agent_scoring - Agent axis weights, boosts and tier thresholds")
        console.print("  • matching - Match criteria weights and priority thresholds")
        console.print("  • combinations - Bundle sizes and score bonuses")
        console.print("\nThe engine will look for config in this order:")
        console.print("  1. SOLUTION_ENGINE_CONFIG environment variable")
        console.print("  2. ./engine-config.yaml (current directory)")
        console.print("  3. ~/.config/solution-engine/config.yaml")
    except Exception as e:
        console.print(f"[red]Error creating config:[/red] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
