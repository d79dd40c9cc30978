from sqlalchemy import Column, DateTime, Float, MetaData, String, Table

metadata = MetaData()

# Single source of truth for the table object; the engine never writes to it.
photo_metadata = Table(
    "photo_metadata", metadata,
    Column("photo_id", String, primary_key=True),
    Column("image_key", String),
    Column("image_url", String),
    Column("thumbnail_url", String),
    Column("original_url", String),
    Column("title", String),
    # facet fields
    Column("sport_type", String, index=True),
    Column("photo_category", String, index=True),
    Column("play_type", String, index=True),
    Column("action_intensity", String, index=True),
    Column("composition", String),
    Column("time_of_day", String),
    Column("lighting", String),
    Column("color_temperature", String),
    # internal enrichment fields
    Column("emotion", String),
    Column("sharpness", Float),
    Column("composition_score", Float),
    Column("exposure_accuracy", Float),
    Column("emotional_impact", Float),
    Column("ai_provider", String),
    Column("ai_cost", Float),
    Column("ai_confidence", Float),
    Column("enriched_at", DateTime(timezone=True)),
    # album context
    Column("album_key", String, index=True),
    Column("album_name", String),
    Column("upload_date", DateTime(timezone=True), index=True),
    Column("photo_date", DateTime(timezone=True)),
)
