"""
Championship standings computed from race results.
Pure functions: no I/O, fresh output on every call.
"""
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from api_pydantic_models.standings import ConstructorStanding, DriverStanding
from openf1_pydantic_models.f1_drivers import DriverInfo
from openf1_pydantic_models.f1_sessions import F1SessionResult

POINTS_SYSTEM: Dict[int, int] = {1: 25, 2: 18, 3: 15, 4: 12, 5: 10, 6: 8, 7: 6, 8: 4, 9: 2, 10: 1}


def points_for_position(position: Optional[int]) -> int:
    """Points awarded for a finishing position; 0 for DNF or outside the top 10."""
    if position is None:
        return 0
    return POINTS_SYSTEM.get(position, 0)


def build_roster(drivers: Iterable[DriverInfo]) -> Dict[int, DriverInfo]:
    # The season roster repeats each driver once per session; the first record wins.
    roster: Dict[int, DriverInfo] = {}
    for driver in drivers:
        roster.setdefault(driver.driver_number, driver)
    return roster


def compute_driver_standings(
    results: Iterable[F1SessionResult],
    drivers: Iterable[DriverInfo],
) -> List[DriverStanding]:
    """
    Fold race results into ranked driver standings.

    Only results with a points-scoring position count, so drivers who never
    finished in the top 10 do not appear at all. Drivers missing from the
    roster get roster_match=False and no name, team or colour.

    Equal points keep the order in which drivers first scored; there is no
    secondary sort key.
    """
    roster = build_roster(drivers)

    totals: Dict[int, Dict[str, int]] = {}
    for result in results:
        if result.position not in POINTS_SYSTEM:
            continue
        entry = totals.setdefault(result.driver_number, {"points": 0, "wins": 0})
        entry["points"] += POINTS_SYSTEM[result.position]
        if result.position == 1:
            entry["wins"] += 1

    ordered = sorted(totals.items(), key=lambda item: item[1]["points"], reverse=True)

    standings: List[DriverStanding] = []
    for rank, (driver_number, entry) in enumerate(ordered, start=1):
        driver = roster.get(driver_number)
        standings.append(
            DriverStanding(
                driver_number=driver_number,
                full_name=driver.full_name if driver else None,
                team_name=driver.team_name if driver else None,
                team_colour=driver.team_colour if driver else None,
                roster_match=driver is not None,
                points=entry["points"],
                wins=entry["wins"],
                rank=rank,
            )
        )
    return standings


def compute_constructor_standings(driver_standings: Sequence[DriverStanding]) -> List[ConstructorStanding]:
    """
    Sum ranked driver standings per team.

    Teams are ordered by points, ties keeping the order in which the team
    first appears in driver_standings. Drivers without a roster match are
    pooled into one row with roster_match=False, kept apart from roster
    drivers whose team OpenF1 left out.
    """
    totals: Dict[Tuple[bool, Optional[str]], Dict[str, Any]] = {}
    for standing in driver_standings:
        entry = totals.setdefault(
            (standing.roster_match, standing.team_name),
            {"points": 0, "wins": 0, "team_colour": None},
        )
        entry["points"] += standing.points
        entry["wins"] += standing.wins
        entry["team_colour"] = entry["team_colour"] or standing.team_colour

    ordered = sorted(totals.items(), key=lambda item: item[1]["points"], reverse=True)

    return [
        ConstructorStanding(
            team_name=team_name,
            team_colour=entry["team_colour"],
            roster_match=roster_match,
            points=entry["points"],
            wins=entry["wins"],
            rank=rank,
        )
        for rank, ((roster_match, team_name), entry) in enumerate(ordered, start=1)
    ]
