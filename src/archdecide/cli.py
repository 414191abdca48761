#!/usr/bin/env python3
"""
archdecide command line interface.

Commands:
- explain: answer a question from the recorded decisions
- decisions:lint: validate decision files (for CI)
"""

import os
import sys
from typing import NoReturn, Optional

import click
from rich.console import Console

from archdecide._version import __version__
from archdecide.ai.config import AiEnv
from archdecide.ai.factory import ai_client_from_environment
from archdecide.core.exceptions import AiClientError, ArchDecideError
from archdecide.core.logging import AsyncLogger, logger
from archdecide.core.secure_config import Settings
from archdecide.decisions.lint import DecisionLinter
from archdecide.decisions.loader import YamlDecisionLoader
from archdecide.decisions.repository import IndexedDecisionRepository
from archdecide.explain.explainer import AiClientExplainer, AiExplainer
from archdecide.explain.service import ExplainService
from archdecide.models.explanation import NO_DECISION_MESSAGE

AI_BANNER = "AI summary (presentation-only; does not invent rules)"


def load_settings() -> Settings:
    """Load settings and install the log sinks they describe."""
    settings = Settings()
    AsyncLogger.configure_sinks(
        debug_mode=settings.debug_mode,
        level="DEBUG" if settings.debug_mode else settings.log_level,
        log_file=settings.log_file,
    )
    return settings


def fail(error: ArchDecideError) -> NoReturn:
    """Print an archdecide error with its suggestions and exit with status 1."""
    click.echo(click.style(f"✗ {error.message}", fg="red"), err=True)
    for suggestion in error.suggestions:
        click.echo(f"  Fix: {suggestion}", err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="archdecide")
def cli():
    """
    archdecide - Explain architecture decisions from recorded decision files.

    Decisions live as YAML files in the decisions directory (.decisions by
    default) and are the only source of truth for every answer.
    """
    pass


@cli.command()
@click.argument("question")
@click.option(
    "--path",
    "path",
    default=None,
    help="Only consider decisions whose scope applies to this file path.",
)
@click.option(
    "--ai",
    "use_ai",
    is_flag=True,
    help="Use AI to summarize recorded decisions (presentation only; needs env configuration).",
)
@click.option(
    "--ai-strict",
    "ai_strict",
    is_flag=True,
    help="Fail if AI is enabled but unavailable or errors occur (default: fall back to plain text).",
)
@click.option("--dir", "directory", default=None, help="Decisions directory.")
def explain(
    question: str, path: Optional[str], use_ai: bool, ai_strict: bool, directory: Optional[str]
):
    """Explain architecture decisions relevant to QUESTION."""
    console = Console(highlight=False, soft_wrap=True)

    try:
        settings = load_settings()
        loader = YamlDecisionLoader(directory or settings.decisions_dir)
        repository = IndexedDecisionRepository(loader)
    except ArchDecideError as e:
        fail(e)

    ai_explainer: Optional[AiExplainer] = None
    if use_ai:
        try:
            client = ai_client_from_environment()
        except ArchDecideError as e:
            fail(e)

        if client is None:
            click.echo(click.style("AI is not configured.", fg="red"))
            click.echo(f"Set env vars like {AiEnv.API_KEY} and {AiEnv.MODEL} to enable AI mode.")
            click.echo(
                f"If you hit TLS/certificate errors, set {AiEnv.CA_INFO} "
                "(or CURL_CA_BUNDLE) to a CA bundle path."
            )
            if ai_strict:
                sys.exit(1)
            click.echo(click.style("Falling back to plain explanation.", fg="yellow"))
        else:
            ai_explainer = AiClientExplainer(client)

    service = ExplainService(repository, ai_explainer)
    try:
        explanation = service.explain(question, path)
    except AiClientError as e:
        if ai_strict:
            fail(e)

        logger.warning("AI explain failed, using plain text", error=e.message)
        click.echo(click.style("AI failed; falling back to plain explanation.", fg="yellow"))
        click.echo(click.style(f"AI error: {e.message}", fg="yellow"))
        ai_explainer = None
        explanation = ExplainService(repository).explain(question, path)

    if not explanation.has_decisions:
        click.echo(click.style(NO_DECISION_MESSAGE, fg="yellow"))
        return

    click.echo("")
    console.print(f"[bold green]Found {len(explanation.decisions)} relevant decision(s)[/bold green]")
    click.echo("")

    if ai_explainer is not None:
        console.print(f"[yellow]{AI_BANNER}[/yellow]")
        click.echo("")

    # Decision ids in brackets would be read as rich markup
    console.print(explanation.message, markup=False)
    click.echo("")


@cli.command(name="decisions:lint")
@click.option("--dir", "directory", default=None, help="Decisions directory.")
@click.option(
    "--require-any",
    is_flag=True,
    help="Fail when the directory contains no decision files.",
)
def decisions_lint(directory: Optional[str], require_any: bool):
    """Validate decision files (syntax + schema). Exit 1 on any problem."""
    try:
        settings = load_settings()
    except ArchDecideError as e:
        fail(e)

    report = DecisionLinter(directory or settings.decisions_dir, require_any=require_any).run()

    for warning in report.warnings:
        click.echo(click.style(warning, fg="yellow"))

    if not report.ok:
        click.echo(click.style("Decision lint failed.", fg="red"))
        for error in report.errors:
            click.echo(f" - {error}")
        sys.exit(report.exit_code)

    if report.files:
        click.echo(
            click.style("OK", fg="green")
            + f" Linted {len(report.files)} file(s), loaded {len(report.decisions)} decision(s)."
        )


def main():
    """Main entry point"""
    try:
        cli()
    except KeyboardInterrupt:
        click.echo("\nOperation cancelled by user.")
        sys.exit(0)
    except Exception as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        if os.environ.get("ARCHDECIDE_DEBUG"):
            import traceback

            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
