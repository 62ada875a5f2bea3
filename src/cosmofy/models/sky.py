from __future__ import annotations

from cosmofy.models.common import ApiModel, Source


class SkyConditions(ApiModel):
    visible_constellations: list[str]
    moon_phase: str
    moon_illumination: int  # percent
    best_viewing_time: str
    conditions: str
    source: Source = "synthesized"
