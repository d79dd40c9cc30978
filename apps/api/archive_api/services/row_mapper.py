"""
Maps raw photo_metadata records to Photo responses.

Records can come from older ingestion runs with gaps, so every optional
field has a default. A record with no photo_id or no usable display URL is skipped.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional

from archive_api.core.logging import get_logger
from archive_api.core.pagination import EPOCH, iso_utc, parse_timestamp
from archive_api.schemas.photo import Photo, PhotoMetadata

logger = get_logger(__name__)

FACET_FIELDS = (
    "sport_type", "photo_category", "play_type", "action_intensity",
    "composition", "time_of_day", "lighting", "color_temperature",
)
NUMERIC_FIELDS = (
    "sharpness", "composition_score", "exposure_accuracy",
    "emotional_impact", "ai_cost", "ai_confidence",
)
STRING_DEFAULTS = {
    "action_intensity": "medium",
    "emotion": "focus",
    "ai_provider": "gemini",
}


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _number(value: Any) -> float:
    """Lenient float: numbers pass through, numeric strings are parsed, anything else is 0.0."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return 0.0
    return 0.0


class RowMapper:
    def __init__(self, image_proxy_base: str):
        self.image_proxy_base = image_proxy_base.rstrip("/")

    def display_url(self, record: Mapping[str, Any]) -> Optional[str]:
        url = _text(record.get("image_url")) or _text(record.get("original_url"))
        if url:
            return url
        key = _text(record.get("image_key"))
        return f"{self.image_proxy_base}/{key}" if key else None

    def map_row(self, record: Mapping[str, Any]) -> Optional[Photo]:
        photo_id = _text(record.get("photo_id"))
        if not photo_id:
            logger.warning("Skipping record without photo_id (image_key=%r)", record.get("image_key"))
            return None
        image_url = self.display_url(record)
        if not image_url:
            logger.warning("Skipping record %r: no usable display URL", photo_id)
            return None

        created = (
            parse_timestamp(record.get("photo_date"))
            or parse_timestamp(record.get("upload_date"))
            or parse_timestamp(record.get("enriched_at"))
            or EPOCH
        )
        created_at = iso_utc(created)
        enriched = parse_timestamp(record.get("enriched_at"))

        fields: Dict[str, Any] = {}
        for name in FACET_FIELDS + ("emotion", "ai_provider"):
            fields[name] = _text(record.get(name)) or STRING_DEFAULTS.get(name, "")
        for name in NUMERIC_FIELDS:
            fields[name] = _number(record.get(name))

        return Photo(
            id=photo_id,
            image_key=_text(record.get("image_key")) or "",
            image_url=image_url,
            thumbnail_url=_text(record.get("thumbnail_url")) or image_url,
            original_url=_text(record.get("original_url")) or image_url,
            title=_text(record.get("title")) or "",
            created_at=created_at,
            metadata=PhotoMetadata(enriched_at=iso_utc(enriched) if enriched else created_at, **fields),
        )

    def map_rows(self, records: Iterable[Mapping[str, Any]]) -> List[Photo]:
        photos = (self.map_row(record) for record in records)
        return [photo for photo in photos if photo is not None]
