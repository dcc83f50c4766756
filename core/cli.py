"""
Command-line interface for ScoreBoard
"""
import json
from datetime import datetime

import click

from core.config import settings
from core.exceptions import ScoreBoardError
from core.logging import get_logger
from d5_scoring.factors import FactorSynthesizer, load_factor_vocabulary
from d5_scoring.types import EntityType
from d10_analytics.aggregators import AggregateReshaper
from d10_analytics.kpi import KPIDeriver
from d10_analytics.schemas import ScoreStats
from generators.record_generator import RecordGenerator
from generators.stats_generator import ScoreStatsGenerator

logger = get_logger(__name__)

ENTITY_CHOICES = [entity.value for entity in EntityType]


def _emit(payload) -> None:
    click.echo(json.dumps(payload, indent=2, default=str))


def _load_stats(path: str) -> ScoreStats:
    """Read a stats payload from a JSON file ("-" for stdin)"""
    with click.open_file(path, "r") as fh:
        try:
            payload = json.load(fh)
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"{path} is not valid JSON: {e}", param_hint="STATS_FILE")
    if not isinstance(payload, dict):
        raise click.BadParameter(f"{path} must contain a JSON object", param_hint="STATS_FILE")
    return ScoreStats.from_source(payload.get("data", payload))


class ScoreBoardGroup(click.Group):
    """Click group that reports domain errors as JSON on stderr"""

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except ScoreBoardError as e:
            logger.error(f"Command failed: {e.message}", extra={"error_code": e.error_code})
            click.echo(json.dumps(e.to_dict()), err=True)
            ctx.exit(1)


@click.group(cls=ScoreBoardGroup)
@click.version_option(version=settings.app_version)
def cli():
    """ScoreBoard CLI - lead, property and agent score analytics"""
    pass


@cli.command()
@click.option("--count", default=4, show_default=True, help="Number of factors")
@click.option("--target", type=float, required=True, help="Target composite score (0-100)")
@click.option("--entity", type=click.Choice(ENTITY_CHOICES), help="Use the entity's factor vocabulary")
@click.option("--seed", type=int, help="Random seed for reproducible output")
def synthesize(count: int, target: float, entity: str, seed: int):
    """Synthesize a factor breakdown reproducing a target score"""
    synthesizer = FactorSynthesizer(vocabulary=load_factor_vocabulary(entity), seed=seed)
    _emit(synthesizer.synthesize(count, target).to_dict())


@cli.command()
@click.option("--entity", type=click.Choice(ENTITY_CHOICES), help="Only this entity type (all if omitted)")
@click.option("--count", default=10, show_default=True, help="Records per entity type")
@click.option("--top", is_flag=True, help="Sort by score, highest first (requires --entity)")
@click.option("--seed", type=int, help="Random seed for reproducible output")
def generate(entity: str, count: int, top: bool, seed: int):
    """Generate synthetic score records"""
    generator = RecordGenerator(seed=seed)
    if entity is None:
        if top:
            raise click.UsageError("--top requires --entity")
        records = generator.generate_all(count)
    elif top:
        records = generator.generate_top(entity, count)
    else:
        records = generator.generate(entity, count)
    _emit([record.to_dict() for record in records])


@cli.command()
@click.option("--seed", type=int, help="Random seed for reproducible output")
@click.option(
    "--date",
    "reference_date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Last month of the score trend (default: today)",
)
def stats(seed: int, reference_date: datetime):
    """Generate a synthetic aggregate stats payload"""
    generator = ScoreStatsGenerator(seed=seed, reference_date=reference_date.date() if reference_date else None)
    _emit(generator.generate().model_dump())


@cli.command()
@click.argument("stats_file", type=click.Path(allow_dash=True))
@click.option(
    "--date",
    "reference_date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Last month of the score trend (default: today)",
)
def reshape(stats_file: str, reference_date: datetime):
    """Reshape an aggregate stats payload into dense dashboard series"""
    stats_payload = _load_stats(stats_file)
    series = AggregateReshaper().reshape(stats_payload, reference_date.date() if reference_date else None)
    _emit(series.model_dump(mode="json"))


@cli.command()
@click.argument("stats_file", type=click.Path(allow_dash=True))
def derive(stats_file: str):
    """Derive headline KPIs from an aggregate stats payload"""
    stats_payload = _load_stats(stats_file)
    kpis = KPIDeriver().derive(stats_payload.average_scores, stats_payload.lead_stats)
    _emit([kpi.model_dump(mode="json") for kpi in kpis])


@cli.command()
def env_info():
    """Display environment information"""
    click.echo(f"{settings.app_name} v{settings.app_version}")
    click.echo(f"Environment: {settings.environment}")
    click.echo(f"Factor vocabulary: {settings.vocabulary_path}")
    click.echo(f"Factors per record: {settings.factors_per_record}")
    click.echo(f"Score range: {settings.record_score_min}-{settings.record_score_max}")
    click.echo(f"Trend window: {settings.trend_window_months} months")


def main():
    """Main entry point"""
    cli()


if __name__ == "__main__":
    main()
