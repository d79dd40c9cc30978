from pydantic import BaseModel


class PhotoMetadata(BaseModel):
    # filterable facet fields
    sport_type: str = ""
    photo_category: str = ""
    play_type: str = ""
    action_intensity: str = "medium"
    composition: str = ""
    time_of_day: str = ""
    lighting: str = ""
    color_temperature: str = ""
    # internal, display and sort only
    emotion: str = "focus"
    sharpness: float = 0.0
    composition_score: float = 0.0
    exposure_accuracy: float = 0.0
    emotional_impact: float = 0.0
    ai_provider: str = "gemini"
    ai_cost: float = 0.0
    ai_confidence: float = 0.0
    enriched_at: str


class Photo(BaseModel):
    id: str
    image_key: str = ""
    image_url: str
    thumbnail_url: str
    original_url: str
    title: str = ""
    created_at: str
    metadata: PhotoMetadata
