#!/usr/bin/env python3
"""Seed the player collection from a CSV file.

Expected columns: id, name, role (or position), team, region, and
optionally home_league, image_url and any per-player stat columns
(kills, deaths, assists, cs, vision_score, baron_kills, dragon_kills,
turret_kills, games_played).

Usage:
    uv run python scripts/seed_players.py [csv_path] [database_path]

Defaults: data/players.csv and data/rift_league.duckdb (relative to repo root)
"""
import sys
from pathlib import Path

import pandas as pd

from rift_league.models.player import STAT_FIELDS
from rift_league.repositories.document_store import DocumentStore
from rift_league.services.player_service import PlayerService


def load_records(csv_path: Path) -> list[dict]:
    """Read the CSV into import records, one per player row."""
    df = pd.read_csv(csv_path, dtype={"id": str})
    # Missing cells become None so normalizers see "no value"
    df = df.astype(object).where(df.notna(), None)

    stat_columns = [c for c in (*STAT_FIELDS, "games_played") if c in df.columns]
    records = []
    for row in df.to_dict(orient="records"):
        record = {k: v for k, v in row.items() if k not in stat_columns}
        record["stats"] = {c: row[c] for c in stat_columns if row[c] is not None}
        records.append(record)
    return records


def seed_players(csv_path: Path, database_path: Path) -> int:
    """Import every player in ``csv_path`` into the store at ``database_path``."""
    store = DocumentStore(database_path)
    try:
        service = PlayerService(store)
        service.load()
        return service.import_players(load_records(csv_path))
    finally:
        store.close()


def main():
    repo_root = Path(__file__).parent.parent.parent  # backend/scripts -> backend -> repo
    csv_path = Path(sys.argv[1]) if len(sys.argv) > 1 else repo_root / "data" / "players.csv"
    database_path = Path(sys.argv[2]) if len(sys.argv) > 2 else repo_root / "data" / "rift_league.duckdb"

    if not csv_path.exists():
        print(f"Error: {csv_path} does not exist")
        sys.exit(1)

    count = seed_players(csv_path, database_path)
    print(f"Seeded {count} players into {database_path}")


if __name__ == "__main__":
    main()
