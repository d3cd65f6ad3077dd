"""Tests for per-event query composition and the shared case-type cache."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime

import pytest

from events_handler.core.exceptions import DataNotFound
from events_handler.features.querying import DataQueryService
from factories import CASE_TYPE_URL, make_case_type, make_event, make_status

OTHER_CASE_TYPE_URL = "https://openzaak.example/catalogi/api/v1/statustypen/T-10"


@pytest.mark.asyncio
async def test_last_case_type_uses_most_recent_status(case_registry, party_registry) -> None:
    service = DataQueryService(case_registry, party_registry)
    query = service.from_event(make_event())
    statuses = [
        make_status(OTHER_CASE_TYPE_URL, datetime(2024, 5, 3, tzinfo=UTC)),
        make_status(CASE_TYPE_URL, datetime(2024, 5, 1, tzinfo=UTC)),
    ]

    await query.last_case_type(statuses)

    case_registry.get_case_type.assert_awaited_once_with(OTHER_CASE_TYPE_URL)


@pytest.mark.asyncio
async def test_case_without_statuses_is_data_not_found(case_registry, party_registry) -> None:
    query = DataQueryService(case_registry, party_registry).from_event(make_event())

    with pytest.raises(DataNotFound):
        await query.last_case_type([])

    case_registry.get_case_type.assert_not_awaited()


@pytest.mark.asyncio
async def test_case_type_cache_is_shared_between_events(case_registry, party_registry) -> None:
    service = DataQueryService(case_registry, party_registry)

    async def slow_case_type(ref):
        await asyncio.sleep(0.01)
        return make_case_type()

    case_registry.get_case_type.side_effect = slow_case_type

    results = await asyncio.gather(
        *(
            service.from_event(make_event(reference=f"https://openzaak.example/zaken/{i}"))
            .last_case_type([make_status()])
            for i in range(5)
        )
    )

    assert {r.identification for r in results} == {"T-9"}
    assert case_registry.get_case_type.await_count == 1
    assert CASE_TYPE_URL in service.case_type_cache


@pytest.mark.asyncio
async def test_party_data_goes_through_citizen_ref(case_registry, party_registry) -> None:
    event = make_event()
    query = DataQueryService(case_registry, party_registry).from_event(event)

    party = await query.party_data()

    assert party.name == "Jan"
    case_registry.get_citizen_ref.assert_awaited_once_with(event.reference)
    party_registry.get_party_data.assert_awaited_once_with("999993653")


@pytest.mark.asyncio
async def test_case_is_never_cached(case_registry, party_registry) -> None:
    query = DataQueryService(case_registry, party_registry).from_event(make_event())

    await query.case()
    await query.case()

    assert case_registry.get_case.await_count == 2


@pytest.mark.asyncio
async def test_close_closes_both_registries(case_registry, party_registry) -> None:
    await DataQueryService(case_registry, party_registry).close()

    case_registry.close.assert_awaited_once()
    party_registry.close.assert_awaited_once()
