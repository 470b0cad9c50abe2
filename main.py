from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from api_pydantic_models.races import GetCurrentRaceResponse, GetDashboardResponse
from api_pydantic_models.standings import GetDriverStandingsResponse, GetConstructorStandingsResponse
from config.dashboard_config import DashboardConfig
from utils.race_data import RaceDataService
from utils.ttl_cache import TTLCache
import asyncio
import logging

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)

logger = logging.getLogger(__name__)


async def refresh_periodically(service: RaceDataService, interval_seconds: float):
    """Keep the cache warm so requests rarely wait on OpenF1."""
    while True:
        try:
            await service.refresh()
            logger.info("Background refresh complete for season=%s", service.season)
        except Exception:
            logger.exception("Background refresh failed for season=%s", service.season)
        await asyncio.sleep(interval_seconds)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own one cache and one data service per application instance."""
    app.state.service = RaceDataService(
        cache=TTLCache(),
        season=DashboardConfig.get_season(),
        ttl=DashboardConfig.CACHE_TTL_SECONDS,
    )
    refresh_task = None
    if DashboardConfig.REFRESH_INTERVAL_SECONDS > 0:
        refresh_task = asyncio.create_task(
            refresh_periodically(app.state.service, DashboardConfig.REFRESH_INTERVAL_SECONDS)
        )
    yield
    if refresh_task is not None:
        refresh_task.cancel()
        try:
            await refresh_task
        except asyncio.CancelledError:
            pass


app = FastAPI(title="F1 Standings Dashboard", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=DashboardConfig.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_service(request: Request) -> RaceDataService:
    return request.app.state.service


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "season": DashboardConfig.get_season()}


@app.get("/current-race")
async def get_current_race(request: Request) -> GetCurrentRaceResponse:
    """
    Get the latest race of the season with its classified results.
    - Results are ordered by position, non-finishers last
    - Drivers missing from the roster have no name or team
    """
    try:
        service = get_service(request)
        logging.info("Request: current race for season=%s", service.season)
        response = await service.get_current_race()
        logging.info("Response: returning %d results for current race", len(response.results))
        return response
    except HTTPException:
        raise
    except Exception as e:
        logging.exception("Error in get_current_race")
        raise HTTPException(status_code=500, detail=f"Failed to load current race: {str(e)}")


@app.get("/driver-standings")
async def get_driver_standings(request: Request) -> GetDriverStandingsResponse:
    try:
        service = get_service(request)
        logging.info("Request: driver standings for season=%s", service.season)
        snapshot = await service.get_standings()
        logging.info("Response: returning %d driver standings", len(snapshot.drivers))
        return GetDriverStandingsResponse(season=service.season, standings=snapshot.drivers)
    except HTTPException:
        raise
    except Exception as e:
        logging.exception("Error in get_driver_standings")
        raise HTTPException(status_code=500, detail=f"Failed to compute driver standings: {str(e)}")


@app.get("/constructor-standings")
async def get_constructor_standings(request: Request) -> GetConstructorStandingsResponse:
    try:
        service = get_service(request)
        logging.info("Request: constructor standings for season=%s", service.season)
        snapshot = await service.get_standings()
        logging.info("Response: returning %d constructor standings", len(snapshot.constructors))
        return GetConstructorStandingsResponse(season=service.season, standings=snapshot.constructors)
    except HTTPException:
        raise
    except Exception as e:
        logging.exception("Error in get_constructor_standings")
        raise HTTPException(status_code=500, detail=f"Failed to compute constructor standings: {str(e)}")


@app.get("/dashboard")
async def get_dashboard(request: Request) -> GetDashboardResponse:
    """
    Everything the dashboard page renders, in one call.
    The current race and the standings are loaded concurrently.
    """
    try:
        service = get_service(request)
        current_race, snapshot = await asyncio.gather(
            service.get_current_race(),
            service.get_standings(),
        )
        return GetDashboardResponse(
            season=service.season,
            current_race=current_race,
            driver_standings=snapshot.drivers,
            constructor_standings=snapshot.constructors,
            last_updated=datetime.now(timezone.utc),
        )
    except HTTPException:
        raise
    except Exception as e:
        logging.exception("Error in get_dashboard")
        raise HTTPException(status_code=500, detail=f"Failed to load dashboard: {str(e)}")
