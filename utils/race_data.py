"""
Race data service.
Every OpenF1 query goes through the TTL cache; standings are computed from the cached data.
"""
import asyncio
import logging
from datetime import datetime, timezone
from itertools import chain
from typing import Callable, List, Optional

import httpx

from api_pydantic_models.races import GetCurrentRaceResponse, RaceInfo, RaceResultEntry
from api_pydantic_models.standings import StandingsSnapshot
from openf1_pydantic_models.f1_drivers import DriverInfo
from openf1_pydantic_models.f1_sessions import F1Session, F1SessionResult
from utils import openf1_client
from utils.standings import (
    build_roster,
    compute_constructor_standings,
    compute_driver_standings,
    points_for_position,
)
from utils.ttl_cache import TTLCache

logger = logging.getLogger(__name__)


def _as_utc(moment: datetime) -> datetime:
    # OpenF1 sends offsets; treat a naive timestamp as UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def sort_by_position(results: List[F1SessionResult]) -> List[F1SessionResult]:
    """Order results by finishing position, non-finishers last in upstream order."""
    return sorted(results, key=lambda r: (r.position is None, r.position or 0))


class RaceDataService:
    """Cached access to one season of race data."""

    def __init__(
        self,
        cache: TTLCache,
        season: int,
        ttl: float,
        client: Optional[httpx.AsyncClient] = None,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.cache = cache
        self.season = season
        self.ttl = ttl
        self.client = client
        self.now = now

    async def get_race_sessions(self) -> List[F1Session]:
        return await self.cache.get_or_fetch(
            f"race-sessions-{self.season}",
            self.ttl,
            lambda: openf1_client.fetch_race_sessions(self.season, client=self.client),
        )

    async def get_current_session(self) -> Optional[F1Session]:
        """The latest race that has started, or None before the first race of the season."""
        sessions = await self.get_race_sessions()
        now = self.now()
        started = [s for s in sessions if _as_utc(s.date_start) <= now]
        return started[-1] if started else None

    async def get_race_results(self, session_key: int) -> List[F1SessionResult]:
        results = await self.cache.get_or_fetch(
            f"race-results-{session_key}",
            self.ttl,
            lambda: openf1_client.fetch_session_results(session_key, client=self.client),
        )
        return sort_by_position(results)

    async def get_drivers(self) -> List[DriverInfo]:
        return await self.cache.get_or_fetch(
            f"drivers-{self.season}",
            self.ttl,
            lambda: openf1_client.fetch_drivers(self.season, client=self.client),
        )

    async def get_all_results(self) -> List[F1SessionResult]:
        """Results of every race this season, concatenated."""
        sessions = await self.get_race_sessions()
        per_session = await asyncio.gather(
            *[self.get_race_results(session.session_key) for session in sessions]
        )
        return list(chain.from_iterable(per_session))

    async def get_current_race(self) -> GetCurrentRaceResponse:
        session = await self.get_current_session()
        if session is None:
            logger.info("No race sessions available for season=%s", self.season)
            return GetCurrentRaceResponse()

        results, drivers = await asyncio.gather(
            self.get_race_results(session.session_key),
            self.get_drivers(),
        )
        roster = build_roster(drivers)

        entries = []
        for result in results:
            driver = roster.get(result.driver_number)
            entries.append(
                RaceResultEntry(
                    driver_number=result.driver_number,
                    position=result.position,
                    time_ms=result.time_ms,
                    points=points_for_position(result.position),
                    full_name=driver.full_name if driver else None,
                    team_name=driver.team_name if driver else None,
                    team_colour=driver.team_colour if driver else None,
                    roster_match=driver is not None,
                )
            )

        race = RaceInfo(
            session_key=session.session_key,
            location=session.location,
            date_start=session.date_start,
            country_name=session.country_name,
        )
        return GetCurrentRaceResponse(race=race, results=entries)

    async def get_standings(self) -> StandingsSnapshot:
        all_results, drivers = await asyncio.gather(
            self.get_all_results(),
            self.get_drivers(),
        )
        driver_standings = compute_driver_standings(all_results, drivers)
        constructor_standings = compute_constructor_standings(driver_standings)
        logger.info(
            "Computed standings for season=%s: %d drivers, %d constructors from %d results",
            self.season, len(driver_standings), len(constructor_standings), len(all_results),
        )
        return StandingsSnapshot(
            drivers=driver_standings,
            constructors=constructor_standings,
            computed_at=datetime.now(timezone.utc),
        )

    async def refresh(self) -> None:
        """Run every query once so the cache holds fresh data."""
        await asyncio.gather(
            self.get_current_race(),
            self.get_standings(),
        )
