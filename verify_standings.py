import asyncio
import logging
import sys
from config.dashboard_config import DashboardConfig
from utils.race_data import RaceDataService
from utils.ttl_cache import TTLCache

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)


async def verify_standings(season: int):
    service = RaceDataService(cache=TTLCache(), season=season, ttl=DashboardConfig.CACHE_TTL_SECONDS)

    logger.info("1. Fetching current race...")
    current = await service.get_current_race()
    if current.race is None:
        logger.warning("No race sessions found for %s", season)
    else:
        logger.info("%s (%s): %d results", current.race.location, current.race.date_start.date(), len(current.results))
        for entry in current.results[:3]:
            logger.info("  P%s %s (%s) +%d", entry.position, entry.display_name, entry.display_team, entry.points)

    logger.info("2. Computing standings...")
    snapshot = await service.get_standings()
    for standing in snapshot.drivers:
        logger.info("  %2d. %-25s %-20s %4d pts %2d wins",
                    standing.rank, standing.display_name, standing.display_team, standing.points, standing.wins)
    for standing in snapshot.constructors:
        logger.info("  %2d. %-25s %4d pts %2d wins",
                    standing.rank, standing.display_team, standing.points, standing.wins)

    logger.info("3. Second pass should be served from cache (%d entries)", len(service.cache))
    await service.get_standings()


if __name__ == "__main__":
    season = int(sys.argv[1]) if len(sys.argv) > 1 else DashboardConfig.get_season()
    asyncio.run(verify_standings(season))
