# features/environment.py
import shutil
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from archive_api.core.config import Settings
from archive_api.main import create_app
from archive_api.repositories.tables import metadata, photo_metadata

SPORTS = ["volleyball", "basketball", "soccer", "softball", "volleyball"]
CATEGORIES = ["action", "action", "celebration", "candid", "warmup", "portrait"]
PLAY_TYPES = ["attack", "block", "dig", "set", "serve", None, "transition"]
INTENSITIES = ["low", "medium", "high", "peak", None]
COMPOSITIONS = ["rule_of_thirds", "leading_lines", "framing", "symmetry", "depth", "negative_space"]
TIMES = ["golden_hour", "midday", "evening", "blue_hour", "night", "dawn"]
LIGHTING = ["natural", "backlit", "dramatic", "soft", "artificial"]
TEMPS = ["warm", "cool", "neutral"]


def before_all(context):
    # SQLite file DB; concurrent facet queries each need their own connection
    context.tmpdir = Path(tempfile.mkdtemp(prefix="archive-features-"))
    db_path = context.tmpdir / "archive.db"
    engine = create_engine(f"sqlite:///{db_path}")
    metadata.create_all(engine)

    # Seed dataset
    context.rows = seed_rows()
    with engine.begin() as conn:
        conn.execute(photo_metadata.insert(), context.rows)
    engine.dispose()

    context.settings = Settings(_env_file=None, database_url=f"sqlite+aiosqlite:///{db_path}")
    context.app = create_app(context.settings)

    # HTTP client; entering it runs the app lifespan (engine + services)
    context.client = TestClient(context.app)
    context.client.__enter__()

    # Shared test state
    context.search_url = "/api/v1/search"
    context.current_filters = {}
    context.last_response = None


def before_scenario(context, scenario):
    context.current_filters = {}
    context.last_response = None


def after_all(context):
    context.client.__exit__(None, None, None)
    shutil.rmtree(context.tmpdir, ignore_errors=True)


def seed_rows():
    """150 photos over five months; every tenth photo is not enriched yet."""
    tz = timezone.utc
    rows = []
    for i in range(150):
        pid = f"photo-{i:04d}"
        rows.append({
            "photo_id": pid,
            "image_key": f"key{i:04d}",
            # some photos only carry a provider key
            "image_url": None if i % 7 == 0 else f"https://photos.example.com/{pid}-L.jpg",
            "thumbnail_url": None if i % 7 == 0 else f"https://photos.example.com/{pid}-Th.jpg",
            "original_url": None if i % 7 == 0 else f"https://photos.example.com/{pid}-O.jpg",
            "title": f"Frame {i}",
            "sport_type": SPORTS[i % len(SPORTS)],
            "photo_category": CATEGORIES[i % len(CATEGORIES)],
            "play_type": PLAY_TYPES[i % len(PLAY_TYPES)],
            "action_intensity": INTENSITIES[(i // 5) % len(INTENSITIES)],
            "composition": COMPOSITIONS[i % len(COMPOSITIONS)],
            "time_of_day": TIMES[(i // 2) % len(TIMES)],
            "lighting": LIGHTING[(i // 3) % len(LIGHTING)],
            "color_temperature": TEMPS[i % len(TEMPS)],
            "emotion": "focus",
            "sharpness": None if i % 10 == 9 else 7.0 + (i % 30) / 10,
            "composition_score": 7.0,
            "exposure_accuracy": 7.5,
            "emotional_impact": 6.0,
            "ai_provider": "gemini",
            "ai_cost": 0.002,
            "ai_confidence": 0.9,
            "enriched_at": datetime(2024, 6, 1, tzinfo=tz),
            "album_key": f"album-{i % 3}",
            "album_name": f"Album {i % 3}",
            "upload_date": datetime(2024, 1, 1, 9, tzinfo=tz) + timedelta(hours=i * 23),
            "photo_date": None,
        })
    return rows
