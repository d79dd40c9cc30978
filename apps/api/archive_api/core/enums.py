from enum import StrEnum

class SportType(StrEnum):
    volleyball = "volleyball"
    basketball = "basketball"
    softball   = "softball"
    soccer     = "soccer"
    track      = "track"
    football   = "football"
    baseball   = "baseball"
    portrait   = "portrait"

class PhotoCategory(StrEnum):
    action      = "action"
    celebration = "celebration"
    candid      = "candid"
    portrait    = "portrait"
    warmup      = "warmup"
    ceremony    = "ceremony"

class PlayType(StrEnum):
    attack      = "attack"
    block       = "block"
    dig         = "dig"
    set         = "set"
    serve       = "serve"
    celebration = "celebration"
    transition  = "transition"

class ActionIntensity(StrEnum):
    low    = "low"
    medium = "medium"
    high   = "high"
    peak   = "peak"

    def rank(self) -> int:
        return {
            ActionIntensity.low:    1,
            ActionIntensity.medium: 2,
            ActionIntensity.high:   3,
            ActionIntensity.peak:   4,
        }[self]

class Composition(StrEnum):
    rule_of_thirds = "rule_of_thirds"
    leading_lines  = "leading_lines"
    framing        = "framing"
    symmetry       = "symmetry"
    depth          = "depth"
    negative_space = "negative_space"

class TimeOfDay(StrEnum):
    golden_hour = "golden_hour"
    midday      = "midday"
    evening     = "evening"
    blue_hour   = "blue_hour"
    night       = "night"
    dawn        = "dawn"

class Lighting(StrEnum):
    natural    = "natural"
    backlit    = "backlit"
    dramatic   = "dramatic"
    soft       = "soft"
    artificial = "artificial"

class ColorTemperature(StrEnum):
    warm    = "warm"
    cool    = "cool"
    neutral = "neutral"

class SortKey(StrEnum):
    newest    = "newest"
    oldest    = "oldest"
    action    = "action"
    intensity = "intensity"

class AggregationMode(StrEnum):
    auto      = "auto"
    grouped   = "grouped"
    enumerate = "enumerate"
