"""
Shared fixtures: a small seeded photo_metadata table in a temporary SQLite
file, plus helpers that build the real service stack on top of it.

Enriched rows (sharpness not null), by sport:
    volleyball p01..p05, basketball p06..p08, soccer p09..p10, softball p12
p11 is a volleyball/peak photo that has not been enriched and must never
show up in any count or page.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine

from archive_api.core.config import Settings
from archive_api.dependencies import build_engine, build_search_service
from archive_api.repositories.tables import metadata, photo_metadata

#        id     sport         category       play_type      intensity
PHOTOS = [
    ("p01", "volleyball", "action",      "attack",      "peak"),
    ("p02", "volleyball", "action",      "block",       "high"),
    ("p03", "volleyball", "action",      "dig",         "medium"),
    ("p04", "volleyball", "celebration", "celebration", "high"),
    ("p05", "volleyball", "candid",      None,          "low"),
    ("p06", "basketball", "action",      "attack",      "peak"),
    ("p07", "basketball", "action",      "block",       "high"),
    ("p08", "basketball", "portrait",    None,          None),
    ("p09", "soccer",     "action",      None,          "high"),
    ("p10", "soccer",     "warmup",      None,          "low"),
    ("p11", "volleyball", "action",      "serve",       "peak"),
    ("p12", "softball",   "action",      None,          "medium"),
]
NOT_ENRICHED = {"p11"}
ENRICHED_IDS = [p[0] for p in PHOTOS if p[0] not in NOT_ENRICHED]

COMPOSITIONS = ["rule_of_thirds", "leading_lines", "framing", "symmetry"]
TIMES = ["golden_hour", "midday", "evening"]
LIGHTING = ["natural", "backlit", "dramatic"]
TEMPS = ["warm", "cool"]

BASE_DATE = datetime(2024, 1, 1, 12, tzinfo=timezone.utc)


def photo_rows():
    rows = []
    for i, (pid, sport, category, play, intensity) in enumerate(PHOTOS):
        rows.append({
            "photo_id": pid,
            "image_key": f"key-{pid}",
            "image_url": f"https://photos.example.com/{pid}-L.jpg",
            "thumbnail_url": f"https://photos.example.com/{pid}-Th.jpg",
            "original_url": f"https://photos.example.com/{pid}-O.jpg",
            "title": f"Photo {pid}",
            "sport_type": sport,
            "photo_category": category,
            "play_type": play,
            "action_intensity": intensity,
            "composition": COMPOSITIONS[i % len(COMPOSITIONS)],
            "time_of_day": TIMES[i % len(TIMES)],
            "lighting": LIGHTING[i % len(LIGHTING)],
            "color_temperature": TEMPS[i % len(TEMPS)],
            "emotion": "triumph" if category == "celebration" else "focus",
            "sharpness": None if pid in NOT_ENRICHED else 8.0 + (i % 3) * 0.5,
            "composition_score": 7.5,
            "exposure_accuracy": 8.0,
            "emotional_impact": 6.5,
            "ai_provider": "gemini",
            "ai_cost": 0.002,
            "ai_confidence": 0.9,
            "enriched_at": BASE_DATE + timedelta(days=30),
            "album_key": "nationals-2024" if sport == "volleyball" else "league-2023",
            "album_name": "Nationals 2024" if sport == "volleyball" else "League 2023",
            "upload_date": BASE_DATE + timedelta(days=i),
            "photo_date": None,
        })
    return rows


@pytest.fixture
def archive_db(tmp_path):
    """Seeded SQLite file; returns the async database URL."""
    path = tmp_path / "archive.db"
    engine = create_engine(f"sqlite:///{path}")
    metadata.create_all(engine)
    with engine.begin() as conn:
        conn.execute(photo_metadata.insert(), photo_rows())
    engine.dispose()
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture
def settings(archive_db):
    return Settings(_env_file=None, database_url=archive_db)


@pytest.fixture
def with_service(settings):
    """Run `fn(service)` against the seeded database in a fresh event loop."""
    def runner(fn, overrides=None):
        active = settings.model_copy(update=overrides or {})

        async def go():
            engine = build_engine(active)
            try:
                return await fn(build_search_service(engine, active))
            finally:
                await engine.dispose()

        return asyncio.run(go())
    return runner
