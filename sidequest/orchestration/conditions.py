"""Situational context derivation for provider gating."""

from datetime import datetime

from sidequest.models.common import QuestMode, Season, Theme, TimeOfDay, Weather
from sidequest.models.locations import ProviderConditions
from sidequest.models.quests import QuestRequest

# Meteorological seasons, northern hemisphere
SEASON_BY_MONTH: dict[int, Season] = {
    12: Season.winter,
    1: Season.winter,
    2: Season.winter,
    3: Season.spring,
    4: Season.spring,
    5: Season.spring,
    6: Season.summer,
    7: Season.summer,
    8: Season.summer,
    9: Season.fall,
    10: Season.fall,
    11: Season.fall,
}


def season_for(moment: datetime) -> Season:
    return SEASON_BY_MONTH[moment.month]


def time_of_day_for(moment: datetime) -> TimeOfDay:
    hour = moment.hour
    if 5 <= hour < 12:
        return TimeOfDay.morning
    if 12 <= hour < 17:
        return TimeOfDay.afternoon
    if 17 <= hour < 21:
        return TimeOfDay.evening
    return TimeOfDay.night


def derive_conditions(
    request: QuestRequest,
    mode: QuestMode,
    now: datetime,
    weather: Weather | None = None,
) -> ProviderConditions:
    """Build provider conditions from the clock and the request.

    Weather stays unknown unless supplied, which matches every gate. The
    theme only gates providers in pure-location mode; content-block quests
    attach locations for every theme.
    """
    theme: Theme | None = request.theme if mode == QuestMode.pure_location else None
    return ProviderConditions(
        season=season_for(now),
        weather=weather,
        time_of_day=time_of_day_for(now),
        region=request.location.region if request.location else None,
        mode=mode,
        theme=theme,
    )
