import json
from unittest.mock import MagicMock

import pytest

from coachlink.core.errors import NetworkError
from coachlink.regimens.service import RegimenService
from coachlink.regimens.types import Regimen, RegimenDay
from coachlink.storage.memory import InMemoryStore


def _regimen_payload(regimen_id: str, *labels: str) -> dict:
    return {
        "_id": regimen_id,
        "name": f"Regimen {regimen_id}",
        "days": [{"id": f"{regimen_id}-{i}", "intensity": label} for i, label in enumerate(labels)],
    }


@pytest.mark.asyncio
async def test_list_regimens_uses_role_endpoint_and_caches(coach_store: InMemoryStore, api: MagicMock) -> None:
    api.get.return_value = {"status": "success", "data": {"regimens": [_regimen_payload("r1", "Easy")]}}
    service = RegimenService(coach_store, api)

    regimens = await service.list_regimens()

    api.get.assert_awaited_once_with("/regimens/coach")
    assert [r.id for r in regimens] == ["r1"]
    cached = json.loads(coach_store.get_item("regimens_coach"))
    assert cached[0]["id"] == "r1"


@pytest.mark.asyncio
async def test_list_regimens_accepts_flat_data_list(athlete_store: InMemoryStore, api: MagicMock) -> None:
    api.get.return_value = {"data": [_regimen_payload("r2", "Hard")]}
    service = RegimenService(athlete_store, api)

    regimens = await service.list_regimens()

    api.get.assert_awaited_once_with("/regimens/athlete")
    assert regimens[0].days[0].intensity == "Hard"


@pytest.mark.asyncio
async def test_list_regimens_skips_invalid_records(coach_store: InMemoryStore, api: MagicMock) -> None:
    api.get.return_value = [_regimen_payload("ok"), {"_id": "bad", "days": "not-a-list"}]
    service = RegimenService(coach_store, api)

    regimens = await service.list_regimens()

    assert [r.id for r in regimens] == ["ok"]


@pytest.mark.asyncio
async def test_list_regimens_keeps_records_with_null_fields(coach_store: InMemoryStore, api: MagicMock) -> None:
    with_null_intensity = _regimen_payload("r1", "Hard")
    with_null_intensity["days"].append({"id": "r1-null", "intensity": None})
    with_null_reps = _regimen_payload("r2", "Easy")
    with_null_reps["days"][0]["exercises"] = [{"name": "Squat", "sets": 3, "reps": None}]
    api.get.return_value = [with_null_intensity, with_null_reps]
    service = RegimenService(coach_store, api)

    regimens = await service.list_regimens()

    assert [r.id for r in regimens] == ["r1", "r2"]
    assert regimens[0].days[1].intensity == "Rest"
    assert regimens[1].days[0].exercises[0].reps == 0
    assert [r.id for r in service.get_cached_regimens()] == ["r1", "r2"]
    assert await service.get_overall_intensity("r1") == 38


@pytest.mark.asyncio
async def test_list_regimens_all_invalid_keeps_previous_cache(coach_store: InMemoryStore, api: MagicMock) -> None:
    service = RegimenService(coach_store, api)
    api.get.return_value = [_regimen_payload("r1", "Medium")]
    await service.list_regimens()

    api.get.return_value = [{"_id": "bad", "days": "not-a-list"}]
    regimens = await service.list_regimens()

    assert [r.id for r in regimens] == ["r1"]
    assert [r.id for r in service.get_cached_regimens()] == ["r1"]


@pytest.mark.asyncio
async def test_list_regimens_serves_cache_when_offline(coach_store: InMemoryStore, api: MagicMock) -> None:
    service = RegimenService(coach_store, api)
    api.get.return_value = [_regimen_payload("r1", "Medium")]
    await service.list_regimens()

    api.get.side_effect = NetworkError("offline")
    regimens = await service.list_regimens()

    assert [r.id for r in regimens] == ["r1"]


@pytest.mark.asyncio
async def test_list_regimens_offline_without_cache_is_empty(store: InMemoryStore, api: MagicMock) -> None:
    api.get.side_effect = NetworkError("offline")
    assert await RegimenService(store, api).list_regimens() == []


@pytest.mark.asyncio
async def test_get_regimen_unwraps_nested_payload(store: InMemoryStore, api: MagicMock) -> None:
    api.get.return_value = {"status": "success", "data": {"regimen": _regimen_payload("r9", "Hard", "Easy")}}

    regimen = await RegimenService(store, api).get_regimen("r9")

    api.get.assert_awaited_once_with("/regimens/r9")
    assert regimen is not None
    assert regimen.id == "r9"


@pytest.mark.asyncio
async def test_get_regimen_returns_none_on_failure(store: InMemoryStore, api: MagicMock) -> None:
    api.get.side_effect = NetworkError("not found", status_code=404)
    assert await RegimenService(store, api).get_regimen("missing") is None


@pytest.mark.asyncio
async def test_get_regimen_returns_none_for_unexpected_shape(store: InMemoryStore, api: MagicMock) -> None:
    api.get.return_value = {"status": "success", "data": None}
    assert await RegimenService(store, api).get_regimen("r1") is None


@pytest.mark.asyncio
async def test_overall_intensity_prefers_cache(coach_store: InMemoryStore, api: MagicMock) -> None:
    service = RegimenService(coach_store, api)
    api.get.return_value = [_regimen_payload("r1", "Easy", "Medium", "Hard")]
    await service.list_regimens()
    api.get.reset_mock()

    assert await service.get_overall_intensity("r1") == 50
    api.get.assert_not_awaited()


@pytest.mark.asyncio
async def test_overall_intensity_of_unavailable_regimen_is_zero(store: InMemoryStore, api: MagicMock) -> None:
    api.get.side_effect = NetworkError("offline")
    assert await RegimenService(store, api).get_overall_intensity("r1") == 0


@pytest.mark.asyncio
async def test_create_regimen_posts_camel_case_body(store: InMemoryStore, api: MagicMock) -> None:
    api.request.return_value = {"data": {"regimen": {"_id": "new", "name": "Build"}}}
    regimen = Regimen(name="Build", start_date="2025-03-01", days=[RegimenDay(intensity="Easy")])

    result = await RegimenService(store, api).create_regimen(regimen)

    assert result.ok
    assert result.value is not None and result.value.id == "new"
    method, path = api.request.await_args.args
    body = api.request.await_args.kwargs["json"]
    assert (method, path) == ("POST", "/regimens")
    assert body["startDate"] == "2025-03-01"
    assert "id" not in body


@pytest.mark.asyncio
async def test_update_regimen_failure_is_reported(store: InMemoryStore, api: MagicMock) -> None:
    api.request.side_effect = NetworkError("server error", status_code=500)

    result = await RegimenService(store, api).update_regimen(Regimen(id="r1", name="x"))

    assert not result.ok
    assert isinstance(result.error, NetworkError)


@pytest.mark.asyncio
async def test_delete_regimen_drops_it_from_cache(coach_store: InMemoryStore, api: MagicMock) -> None:
    service = RegimenService(coach_store, api)
    api.get.return_value = [_regimen_payload("r1"), _regimen_payload("r2")]
    await service.list_regimens()

    result = await service.delete_regimen("r1")

    assert result.ok
    api.delete.assert_awaited_once_with("/regimens/r1")
    assert [r.id for r in service.get_cached_regimens()] == ["r2"]


@pytest.mark.asyncio
async def test_reset_all_purges_regimen_caches(coach_store: InMemoryStore, api: MagicMock) -> None:
    coach_store.set_item("regimens_coach", "[]")
    coach_store.set_item("regimens_athlete", "[]")
    service = RegimenService(coach_store, api)

    result = service.reset_all()

    assert result.ok and result.value == 2
    assert coach_store.keys() == ["user"]
    api.get.side_effect = NetworkError("offline")
    assert await service.list_regimens() == []
