import asyncio
from datetime import datetime, timezone

from tests.fake_openf1 import DRIVERS, FUTURE_SESSION, RESULTS, SESSIONS, FakeOpenF1
from tests.test_ttl_cache import FakeClock
from utils.race_data import RaceDataService
from utils.ttl_cache import TTLCache


def make_service(fake, clock=None, ttl=300):
    return RaceDataService(cache=TTLCache(clock=clock or FakeClock()), season=2024, ttl=ttl, client=fake.client())


def test_current_race_is_last_session_with_enriched_results():
    fake = FakeOpenF1(SESSIONS, RESULTS, DRIVERS)
    service = make_service(fake)

    current = asyncio.run(service.get_current_race())

    assert current.race.session_key == 9480
    assert current.race.location == "Jeddah"
    assert [e.position for e in current.results] == [1, 3, 11, None]
    assert [e.points for e in current.results] == [25, 15, 0, 0]
    assert current.results[0].full_name == "Sergio Perez"
    assert current.results[0].time_ms == 4953612
    # driver 44 is not on the roster
    assert current.results[3].full_name is None
    assert current.results[3].display_name == "Unknown"
    assert current.results[3].finished is False


def test_current_race_without_sessions_is_empty():
    service = make_service(FakeOpenF1())

    current = asyncio.run(service.get_current_race())

    assert current.race is None
    assert current.results == []


def test_standings_across_all_sessions():
    fake = FakeOpenF1(SESSIONS, RESULTS, DRIVERS)
    service = make_service(fake)

    snapshot = asyncio.run(service.get_standings())

    assert [(s.driver_number, s.points, s.wins, s.rank) for s in snapshot.drivers] == [
        (11, 43, 1, 1),
        (1, 40, 1, 2),
    ]
    assert [(c.team_name, c.points, c.wins, c.rank) for c in snapshot.constructors] == [
        ("Red Bull Racing", 83, 2, 1),
    ]


def test_each_query_is_cached_under_its_own_key():
    fake = FakeOpenF1(SESSIONS, RESULTS, DRIVERS)
    service = make_service(fake)

    async def run():
        await service.get_standings()
        await service.get_standings()
        await service.get_current_race()

    asyncio.run(run())

    assert fake.requests["sessions"] == 1
    assert fake.requests["session_result"] == 2
    assert fake.requests["drivers"] == 1
    assert "race-results-9472" in service.cache
    assert "race-results-9480" in service.cache
    assert "race-sessions-2024" in service.cache
    assert "drivers-2024" in service.cache


def test_expired_queries_are_fetched_again():
    fake = FakeOpenF1(SESSIONS, RESULTS, DRIVERS)
    clock = FakeClock()
    service = make_service(fake, clock=clock, ttl=300)

    async def run():
        await service.get_standings()
        clock.advance(301)
        await service.get_standings()

    asyncio.run(run())

    assert fake.requests["sessions"] == 2
    assert fake.requests["drivers"] == 2


def test_upstream_outage_serves_last_known_standings():
    fake = FakeOpenF1(SESSIONS, RESULTS, DRIVERS)
    clock = FakeClock()
    service = make_service(fake, clock=clock)

    async def run():
        before = await service.get_standings()
        fake.failing.update({"sessions", "session_result", "drivers"})
        clock.advance(3600)
        after = await service.get_standings()
        return before, after

    before, after = asyncio.run(run())

    assert after.drivers == before.drivers
    assert after.constructors == before.constructors


def test_cold_outage_gives_empty_standings():
    fake = FakeOpenF1(SESSIONS, RESULTS, DRIVERS)
    fake.failing.update({"sessions", "drivers"})
    service = make_service(fake)

    snapshot = asyncio.run(service.get_standings())

    assert snapshot.drivers == []
    assert snapshot.constructors == []


def test_roster_outage_still_ranks_drivers_without_names():
    fake = FakeOpenF1(SESSIONS, RESULTS, DRIVERS)
    fake.failing.add("drivers")
    service = make_service(fake)

    snapshot = asyncio.run(service.get_standings())

    assert [s.driver_number for s in snapshot.drivers] == [11, 1]
    assert all(s.team_name is None for s in snapshot.drivers)
    assert [(c.team_name, c.points) for c in snapshot.constructors] == [(None, 83)]


def test_refresh_warms_every_query():
    fake = FakeOpenF1(SESSIONS, RESULTS, DRIVERS)
    service = make_service(fake)

    asyncio.run(service.refresh())

    assert len(service.cache) == 4


def test_current_race_skips_sessions_that_have_not_started():
    fake = FakeOpenF1(SESSIONS + [FUTURE_SESSION], RESULTS, DRIVERS)
    service = make_service(fake)

    current = asyncio.run(service.get_current_race())

    assert current.race.session_key == 9480
    assert fake.requests["session_result"] == 1


def test_current_race_is_empty_before_the_first_race_starts():
    fake = FakeOpenF1(SESSIONS, RESULTS, DRIVERS)
    service = make_service(fake)
    service.now = lambda: datetime(2024, 1, 1, tzinfo=timezone.utc)

    current = asyncio.run(service.get_current_race())

    assert current.race is None
    assert fake.requests["session_result"] == 0


def test_current_race_entries_mark_roster_matches_and_colours():
    fake = FakeOpenF1(SESSIONS, RESULTS, DRIVERS)
    service = make_service(fake)

    current = asyncio.run(service.get_current_race())

    by_number = {e.driver_number: e for e in current.results}
    assert by_number[11].roster_match is True
    assert by_number[11].team_colour == "3671C6"
    assert by_number[16].roster_match is True
    assert by_number[16].team_colour is None
    assert by_number[44].roster_match is False
