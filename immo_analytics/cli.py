"""
immo-analytics — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Load seed data / open the preferences database.
  4. Run the analytics core.
  5. Report result to stdout.

Install and run::

    pip install -e .
    immo-analytics --help
    immo-analytics validate-config
    immo-analytics init-db
    immo-analytics score-regions
    immo-analytics analyze-portfolio --ids 1,2
    immo-analytics recommend --seed 42
    immo-analytics search --state Bayern --min-score 5
    immo-analytics onboarding-status --mark-seen
"""

from __future__ import annotations

import json
import random
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="immo-analytics",
    help="Real-estate investment analytics — regional scores, portfolio analysis, advice.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from immo_analytics.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from immo_analytics.utils.logging import configure_logging
    configure_logging(config.logging)


def _resolve_data_path(path_str: str) -> Path:
    """Relative seed paths are resolved against the project root."""
    from immo_analytics.config import project_root

    path = Path(path_str)
    if path.is_absolute() or path.exists():
        return path
    return project_root() / path


def _load_seed_or_exit(config):
    """Load (regions, properties) from the configured seed files."""
    from immo_analytics.data.seed_loader import load_properties, load_regions
    from immo_analytics.exceptions import SeedDataError

    try:
        regions = load_regions(_resolve_data_path(config.data.regions_file))
        properties = load_properties(_resolve_data_path(config.data.properties_file))
    except SeedDataError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    return regions, properties


def _parse_ids(ids: Optional[str]) -> Optional[list[str]]:
    if not ids:
        return None
    return [part.strip() for part in ids.split(",") if part.strip()]


def _build_portfolio(config, properties, ids: Optional[list[str]]):
    """Composition root: event bus, notification feed and a filled store."""
    from immo_analytics.portfolio.events import EventBus, NotificationFeed
    from immo_analytics.portfolio.store import PortfolioStore

    by_id = {p.id: p for p in properties}
    if ids is not None:
        unknown = [i for i in ids if i not in by_id]
        if unknown:
            typer.echo(f"[ERROR] Unknown property id(s): {', '.join(unknown)}", err=True)
            raise typer.Exit(code=1)
        selected = [by_id[i] for i in ids]
    else:
        selected = list(properties)

    bus = EventBus()
    feed = NotificationFeed(bus, max_items=config.notifications.max_items)
    store = PortfolioStore(event_bus=bus)
    for prop in selected:
        store.add_to_portfolio(prop)
    return store, feed


def _open_preferences(config, conn):
    from immo_analytics.db.repositories.preferences_repo import PreferencesRepository
    from immo_analytics.db.schema import apply_schema
    from immo_analytics.preferences.store import PreferencesStore

    apply_schema(conn)
    return PreferencesStore(
        PreferencesRepository(conn),
        max_recent_presets=config.preferences.max_recent_presets,
    )


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)
    weights = config.scoring.weights

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Database path:    {config.database.db_path}")
    typer.echo(f"  Regions file:     {config.data.regions_file}")
    typer.echo(f"  Properties file:  {config.data.properties_file}")
    typer.echo(
        f"  Score weights:    price={weights.price} growth={weights.growth} "
        f"vacancy={weights.vacancy} roi={weights.roi}"
    )
    typer.echo(f"  Cache bound:      {config.portfolio.cache_bound or 'unbounded'}")
    typer.echo(f"  Hotspot cities:   {', '.join(config.recommendations.hotspot_cities)}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config is valid.")


@app.command("init-db")
def init_db(
    db_path: Optional[str] = typer.Option(
        None,
        "--db-path",
        help="Override DB path from config (e.g. data/db/test.db).",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Initialize the preferences database.

    Safe to run multiple times — all DDL uses IF NOT EXISTS.
    """
    from immo_analytics.db.connection import get_connection
    from immo_analytics.db.schema import ALL_TABLE_NAMES, apply_schema

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    target_path = db_path or config.database.db_path
    typer.echo(f"Initializing database at: {target_path}")

    with get_connection(
        target_path,
        wal_mode=config.database.wal_mode,
        busy_timeout_ms=config.database.busy_timeout_ms,
    ) as conn:
        apply_schema(conn)

    typer.echo(f"  Tables: {len(ALL_TABLE_NAMES)} created/verified.")
    typer.echo("[OK] Database ready.")


@app.command("score-regions")
def score_regions_cmd(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Score every seed region and print them best first."""
    from immo_analytics.reporting.formatters import format_region_scores
    from immo_analytics.scoring.investment_score import score_regions

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    regions, _ = _load_seed_or_exit(config)

    scores = score_regions(regions, config.scoring.weights)
    typer.echo(format_region_scores(scores))
    typer.echo("")
    typer.echo(f"[OK] Scored {len(scores)} region(s).")


@app.command("analyze-portfolio")
def analyze_portfolio_cmd(
    ids: Optional[str] = typer.Option(
        None,
        "--ids",
        help="Comma-separated property ids to hold (default: all seed properties).",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Build a demo portfolio from seed properties and print its analysis."""
    from immo_analytics.portfolio.cache import analyze, configure_default_cache
    from immo_analytics.reporting.formatters import format_portfolio_analysis

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    _, properties = _load_seed_or_exit(config)

    store, feed = _build_portfolio(config, properties, _parse_ids(ids))
    configure_default_cache(config.portfolio.cache_bound)
    analysis = analyze(store.snapshot)

    typer.echo(format_portfolio_analysis(analysis, holdings=len(store)))
    typer.echo("")
    typer.echo("  Recent changes:")
    for event in feed.items:
        typer.echo(f"    [{event.type.value}] {event.property.title or event.property.id}")
    typer.echo("")
    typer.echo(f"[OK] Analyzed {len(store)} holding(s).")


@app.command("recommend")
def recommend_cmd(
    ids: Optional[str] = typer.Option(
        None,
        "--ids",
        help="Comma-separated property ids to hold (default: all seed properties).",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Random seed for reproducible advice (overrides config).",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Print buy/sell/hold/review advice for each holding.

    The advice uses simulated market signals; without a seed it differs
    between runs.
    """
    from immo_analytics.portfolio.cache import analyze, configure_default_cache
    from immo_analytics.recommendations.estimator import recommend_portfolio
    from immo_analytics.reporting.formatters import format_recommendations

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    _, properties = _load_seed_or_exit(config)

    store, _ = _build_portfolio(config, properties, _parse_ids(ids))
    configure_default_cache(config.portfolio.cache_bound)
    outlook = analyze(store.snapshot).risk_assessment.price_outlook

    rng_seed = seed if seed is not None else config.recommendations.seed
    rng = random.Random(rng_seed)
    recs = recommend_portfolio(
        store.snapshot, outlook, rng, config.recommendations.to_settings(),
    )

    typer.echo(format_recommendations(recs, titles={p.id: p.title for p in store}))
    typer.echo("")
    typer.echo(f"[OK] {len(recs)} recommendation(s), outlook {outlook.value}.")


@app.command("search")
def search_cmd(
    state: Optional[list[str]] = typer.Option(
        None,
        "--state",
        help="Federal state to include (repeatable).",
    ),
    min_score: Optional[float] = typer.Option(
        None,
        "--min-score",
        help="Minimum regional investment score.",
    ),
    max_price: Optional[float] = typer.Option(
        None,
        "--max-price",
        help="Maximum listing price in EUR.",
    ),
    risk_level: Optional[str] = typer.Option(
        None,
        "--risk-level",
        help="Highest acceptable vacancy risk: low | medium | high.",
    ),
    remember: bool = typer.Option(
        True,
        "--remember/--no-remember",
        help="Store the filters as the most recent preset.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Filter seed regions and listings; remember the filters as a preset."""
    from pydantic import ValidationError

    from immo_analytics.db.connection import get_connection
    from immo_analytics.models.filters import NumericRange, SearchFilters
    from immo_analytics.search.filtering import filter_properties, filter_regions

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    regions, properties = _load_seed_or_exit(config)

    try:
        filters = SearchFilters(
            state=state or [],
            min_investment_score=min_score,
            price=NumericRange(max=max_price),
            risk_level=risk_level,
        )
    except ValidationError as exc:
        typer.echo(f"[ERROR] Invalid filters: {exc}", err=True)
        raise typer.Exit(code=1)

    matched_regions = filter_regions(regions, filters, config.scoring.weights)
    matched_props = filter_properties(properties, filters)

    typer.echo("")
    typer.echo(f"  Regions ({len(matched_regions)}):")
    for r in matched_regions:
        typer.echo(f"    {r.name:<18}  {r.state}")
    typer.echo(f"  Listings ({len(matched_props)}):")
    for p in matched_props:
        typer.echo(f"    {p.id:<4}  {p.title[:32]:<32}  {p.city}")

    if remember:
        with get_connection(
            config.database.db_path,
            wal_mode=config.database.wal_mode,
            busy_timeout_ms=config.database.busy_timeout_ms,
        ) as conn:
            presets = _open_preferences(config, conn).remember_filter_preset(filters)
        typer.echo(f"  Saved as preset ({len(presets)} stored).")

    typer.echo("")
    typer.echo("[OK] Search complete.")


@app.command("onboarding-status")
def onboarding_status(
    mark_seen: bool = typer.Option(
        False,
        "--mark-seen",
        help="Record that the onboarding tour was completed.",
    ),
    reset: bool = typer.Option(
        False,
        "--reset",
        help="Forget that the onboarding tour was seen.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Show (or update) the onboarding flag and recent filter presets."""
    from immo_analytics.db.connection import get_connection

    if mark_seen and reset:
        typer.echo("[ERROR] --mark-seen and --reset are mutually exclusive.", err=True)
        raise typer.Exit(code=1)

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    with get_connection(
        config.database.db_path,
        wal_mode=config.database.wal_mode,
        busy_timeout_ms=config.database.busy_timeout_ms,
    ) as conn:
        prefs = _open_preferences(config, conn)
        if mark_seen:
            prefs.mark_onboarding_seen()
        elif reset:
            prefs.reset_onboarding()
        seen = prefs.has_seen_onboarding()
        presets = prefs.recent_filter_presets()

    typer.echo(f"  Onboarding seen:  {'yes' if seen else 'no'}")
    typer.echo(f"  Recent presets:   {len(presets)}")
    for preset in presets:
        typer.echo(f"    {preset.id}  {preset.name}  {preset.last_used.isoformat()}")
    typer.echo("")
    typer.echo("[OK] Preferences read.")


if __name__ == "__main__":
    app()
