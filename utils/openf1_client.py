"""
Thin async client for the OpenF1 API.
Each call raises on transport errors and non-success statuses; callers decide how to recover.
"""
import logging
from typing import Any, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from config.dashboard_config import DashboardConfig
from constants.openf1_api_endpoints import DRIVERS_API_URL, SESSION_RESULTS_API_URL, SESSIONS_API_URL
from openf1_pydantic_models.f1_drivers import DriverInfo
from openf1_pydantic_models.f1_sessions import F1Session, F1SessionResult

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_records(model: Type[ModelT], payload: Any, label: str) -> List[ModelT]:
    """
    Validate a list of upstream records, skipping the ones that do not fit the model.

    Args:
        model: Pydantic model for a single record
        payload: Decoded JSON body
        label: Name used in log messages

    Returns:
        Validated records in upstream order
    """
    if not isinstance(payload, list):
        logger.warning("OpenF1 returned non-list payload for %s: %r", label, type(payload).__name__)
        return []

    records: List[ModelT] = []
    for item in payload:
        try:
            records.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning("Skipping malformed %s record: %s", label, e.errors()[0].get("msg"))
    return records


async def _get_json(url: str, params: dict, client: Optional[httpx.AsyncClient]) -> Any:
    if client is not None:
        response = await client.get(url, params=params)
        response.raise_for_status()
        return response.json()

    async with httpx.AsyncClient(timeout=DashboardConfig.HTTP_TIMEOUT_SECONDS) as own_client:
        response = await own_client.get(url, params=params)
        response.raise_for_status()
        return response.json()


async def fetch_race_sessions(year: int, client: Optional[httpx.AsyncClient] = None) -> List[F1Session]:
    parameters = {
        "year": year,
        "session_name": "Race",
    }
    payload = await _get_json(SESSIONS_API_URL, parameters, client)
    sessions = parse_records(F1Session, payload, "session")
    logger.info("Fetched %d race sessions from OpenF1 for year=%s", len(sessions), year)
    return sessions


async def fetch_session_results(session_key: int, client: Optional[httpx.AsyncClient] = None) -> List[F1SessionResult]:
    parameters = {
        "session_key": session_key,
    }
    payload = await _get_json(SESSION_RESULTS_API_URL, parameters, client)
    results = parse_records(F1SessionResult, payload, "session result")
    logger.info("Fetched %d results from OpenF1 for session_key=%s", len(results), session_key)
    return results


async def fetch_drivers(year: int, client: Optional[httpx.AsyncClient] = None) -> List[DriverInfo]:
    parameters = {
        "year": year,
    }
    payload = await _get_json(DRIVERS_API_URL, parameters, client)
    drivers = parse_records(DriverInfo, payload, "driver")
    logger.info("Fetched %d driver records from OpenF1 for year=%s", len(drivers), year)
    return drivers
