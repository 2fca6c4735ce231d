"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rift_league.config import settings
from rift_league.api.routes.leagues import router as leagues_router
from rift_league.api.routes.players import router as players_router
from rift_league.api.routes.teams import router as teams_router
from rift_league.api.routes.trades import router as trades_router
from rift_league.api.routes.users import router as users_router
from rift_league.repositories.document_store import DocumentStore
from rift_league.services.aggregate_locks import AggregateLocks
from rift_league.services.league_service import LeagueService
from rift_league.services.player_service import PlayerService
from rift_league.services.stats_provider_client import StatsProviderClient
from rift_league.services.stats_updater import StatsUpdater
from rift_league.services.team_service import TeamService
from rift_league.services.trade_service import TradeService
from rift_league.services.user_service import UserService

logger = logging.getLogger(__name__)

SERVICE_ATTRS = (
    "store",
    "player_service",
    "team_service",
    "league_service",
    "trade_service",
    "user_service",
    "stats_client",
    "stats_updater",
)


# Database path - use settings or default to rift_league.duckdb in repo root
def get_database_path() -> Path:
    """Get the database path from settings or default location."""
    repo_root = Path(__file__).parent.parent.parent.parent
    if settings.database_path:
        db_path = Path(settings.database_path)
        if db_path.is_absolute():
            return db_path
        # Relative path - resolve from repo root
        return repo_root / settings.database_path
    return repo_root / "data" / "rift_league.duckdb"


def build_services(
    database_path: str | Path,
    stats_api_key: Optional[str] = None,
    password_hash_iterations: Optional[int] = None,
) -> dict:
    """Open the store, wire every service to its collaborators and load state.

    The stats client and updater are None when no provider key is configured.
    """
    store = DocumentStore(database_path)
    locks = AggregateLocks()

    player_service = PlayerService(store)
    team_service = TeamService(store, player_service, locks)
    league_service = LeagueService(store, team_service, player_service, locks)
    trade_service = TradeService(store, team_service, league_service)
    user_service = UserService(
        store, password_hash_iterations or settings.password_hash_iterations
    )

    player_service.load()
    team_service.load()
    league_service.load()
    trade_service.load()
    user_service.load()

    stats_client = None
    stats_updater = None
    if stats_api_key:
        stats_client = StatsProviderClient(
            stats_api_key,
            request_delay_seconds=settings.stats_request_delay_seconds,
            cache_ttl_seconds=settings.stats_cache_ttl_seconds,
        )
        stats_updater = StatsUpdater(
            stats_client,
            player_service,
            league_service,
            interval_seconds=settings.update_interval_seconds,
        )

    return {
        "store": store,
        "player_service": player_service,
        "team_service": team_service,
        "league_service": league_service,
        "trade_service": trade_service,
        "user_service": user_service,
        "stats_client": stats_client,
        "stats_updater": stats_updater,
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup: build services unless already provided (tests)
    if not hasattr(app.state, "store"):
        for name, service in build_services(get_database_path(), settings.stats_api_key).items():
            setattr(app.state, name, service)

    updater = getattr(app.state, "stats_updater", None)
    if updater and settings.enable_auto_updates:
        updater.start()
    yield
    # Shutdown: stop background work and release connections
    if updater:
        await updater.stop()
    client = getattr(app.state, "stats_client", None)
    if client:
        await client.close()
    app.state.store.close()


app = FastAPI(
    title="Rift League",
    description="Fantasy esports for professional League of Legends",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "rift-league"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Rift League API",
        "version": "0.1.0",
        "docs": "/docs",
    }


# Register routers
app.include_router(users_router)
app.include_router(players_router)
app.include_router(teams_router)
app.include_router(leagues_router)
app.include_router(trades_router)
