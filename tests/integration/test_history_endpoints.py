"""
Integration tests for the history API
"""
import pytest
from datetime import datetime, timezone


def parse(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


async def add(client, headers, **body):
    r = await client.post("/history", json=body, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


class TestReads:

    @pytest.mark.asyncio
    async def test_empty_history(self, async_client):
        r = await async_client.get("/history")
        assert r.status_code == 200
        assert r.json() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", [
        "/history/current",
        "/history/next",
        "/history/at?time=2024-01-01T00:00:00Z",
        "/history/previous?time=2024-01-01T00:00:00Z",
        "/blog/latest",
    ])
    async def test_absent_results_are_no_content(self, async_client, path):
        r = await async_client.get(path)
        assert r.status_code == 204
        assert r.content == b""

    @pytest.mark.asyncio
    async def test_current_and_next_relative_to_now(self, async_client, authenticated_headers):
        past = await add(async_client, authenticated_headers,
                         start="2000-01-01T00:00:00Z", name="Home", country="UK")
        future = await add(async_client, authenticated_headers,
                           start="2999-01-01T00:00:00Z", end="2999-02-01T00:00:00Z", name="Mars")

        current = (await async_client.get("/history/current")).json()
        upcoming = (await async_client.get("/history/next")).json()

        # The far-future stay does not close the current one until it starts
        assert current["id"] == past["id"]
        assert upcoming["id"] == future["id"]

    @pytest.mark.asyncio
    async def test_historical_location_end_inclusive(self, async_client, authenticated_headers):
        stay = await add(async_client, authenticated_headers,
                         start="2024-01-01T00:00:00Z", end="2024-01-05T00:00:00Z", name="Rome")

        r = await async_client.get("/history/at", params={"time": "2024-01-05T00:00:00Z"})
        assert r.status_code == 200
        assert r.json()["id"] == stay["id"]

        r = await async_client.get("/history/at", params={"time": "2024-01-01T00:00:00Z"})
        assert r.status_code == 204

    @pytest.mark.asyncio
    async def test_period_is_half_open_and_sorted(self, async_client, authenticated_headers):
        a = await add(async_client, authenticated_headers,
                      start="2024-01-01T00:00:00Z", end="2024-01-10T00:00:00Z", name="A")
        b = await add(async_client, authenticated_headers,
                      start="2024-01-10T00:00:00Z", end="2024-01-20T00:00:00Z", name="B")
        await add(async_client, authenticated_headers,
                  start="2024-01-20T00:00:00Z", end="2024-01-30T00:00:00Z", name="C")

        r = await async_client.get(
            "/history/period",
            params={"start": "2024-01-05T00:00:00Z", "end": "2024-01-20T00:00:00Z"},
        )
        assert r.status_code == 200
        assert [s["id"] for s in r.json()] == [a["id"], b["id"]]

    @pytest.mark.asyncio
    async def test_previous_location(self, async_client, authenticated_headers):
        stay = await add(async_client, authenticated_headers,
                         start="2024-01-01T00:00:00Z", end="2024-01-02T00:00:00Z", name="Bern")
        r = await async_client.get("/history/previous", params={"time": "2024-06-01T00:00:00Z"})
        assert r.json()["id"] == stay["id"]

    @pytest.mark.asyncio
    async def test_missing_query_parameter_is_validation_error(self, async_client):
        r = await async_client.get("/history/at")
        assert r.status_code == 422
        assert r.json()["error_code"] == "VALIDATION_ERROR"


class TestAddTrip:

    @pytest.mark.asyncio
    async def test_add_trip_closes_previous_and_inherits(self, async_client, authenticated_headers):
        first = await add(async_client, authenticated_headers,
                          start="2024-01-01T00:00:00Z", name="Paris",
                          group="europe", country="France", timezone_offset=1)
        second = await add(async_client, authenticated_headers,
                           start="2024-01-10T00:00:00Z", name="Lyon")

        assert second["group"] == "europe"
        assert second["country"] == "France"
        assert second["timezone_offset"] == 1
        assert second["end"] is None

        history = (await async_client.get("/history")).json()
        closed = next(s for s in history if s["id"] == first["id"])
        assert parse(closed["end"]) == datetime(2024, 1, 10, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_first_trip_uses_defaults(self, async_client, authenticated_headers):
        stay = await add(async_client, authenticated_headers,
                         start="2024-01-01T00:00:00Z", name="Somewhere")
        assert (stay["group"], stay["country"], stay["timezone_offset"]) == ("unknown", "unknown", 0)

    @pytest.mark.asyncio
    async def test_offset_timestamps_are_normalized(self, async_client, authenticated_headers):
        stay = await add(async_client, authenticated_headers,
                         start="2024-01-01T09:00:00+09:00", name="Tokyo")
        assert parse(stay["start"]) == datetime(2024, 1, 1, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_end_before_start_rejected(self, async_client, authenticated_headers):
        r = await async_client.post(
            "/history",
            json={"start": "2024-01-05T00:00:00Z", "end": "2024-01-01T00:00:00Z", "name": "Back"},
            headers=authenticated_headers,
        )
        assert r.status_code == 422
        assert r.json()["error_code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_name_required(self, async_client, authenticated_headers):
        r = await async_client.post(
            "/history", json={"start": "2024-01-05T00:00:00Z"}, headers=authenticated_headers
        )
        assert r.status_code == 422


class TestWriteKey:

    @pytest.mark.asyncio
    async def test_missing_key_is_401(self, async_client):
        r = await async_client.post("/history", json={"start": "2024-01-01T00:00:00Z", "name": "X"})
        assert r.status_code == 401
        assert r.json()["error_code"] == "MISSING_API_KEY"

    @pytest.mark.asyncio
    async def test_wrong_key_is_403(self, async_client):
        r = await async_client.post(
            "/history",
            json={"start": "2024-01-01T00:00:00Z", "name": "X"},
            headers={"X-API-Key": "nope"},
        )
        assert r.status_code == 403
        assert r.json()["error_code"] == "INVALID_API_KEY"
        assert (await async_client.get("/history")).json() == []

    @pytest.mark.asyncio
    async def test_key_accepted_as_query_parameter(self, async_client):
        r = await async_client.post(
            "/history",
            params={"key": "test-write-key"},
            json={"start": "2024-01-01T00:00:00Z", "name": "X"},
        )
        assert r.status_code == 201

    @pytest.mark.asyncio
    async def test_no_configured_key_rejects_everything(self, async_client, test_settings):
        test_settings.security.auth_key = None
        r = await async_client.post(
            "/history",
            json={"start": "2024-01-01T00:00:00Z", "name": "X"},
            headers={"X-API-Key": "anything"},
        )
        assert r.status_code == 403

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method,path,body", [
        ("PATCH", "/history/1", {"name": "Y"}),
        ("PUT", "/history/1/blog", {"url": "https://b.example/1", "name": "Post"}),
        ("DELETE", "/history/1/blog", None),
        ("PUT", "/history/1/map", {"url": "https://m.example/1.png"}),
    ])
    async def test_every_write_requires_key(self, async_client, method, path, body):
        r = await async_client.request(method, path, json=body)
        assert r.status_code == 401


class TestUpdates:

    @pytest.mark.asyncio
    async def test_partial_update(self, async_client, authenticated_headers):
        stay = await add(async_client, authenticated_headers,
                         start="2024-01-01T00:00:00Z", name="Oslo", country="Norway")

        r = await async_client.patch(
            f"/history/{stay['id']}",
            json={"end": "2024-01-03T00:00:00Z", "timezone_offset": 0},
            headers=authenticated_headers,
        )
        assert r.status_code == 204

        updated = (await async_client.get("/history")).json()[0]
        assert parse(updated["end"]) == datetime(2024, 1, 3, tzinfo=timezone.utc)
        assert updated["name"] == "Oslo"
        assert updated["country"] == "Norway"
        assert updated["timezone_offset"] == 0

    @pytest.mark.asyncio
    async def test_update_unknown_stay_is_422(self, async_client, authenticated_headers):
        r = await async_client.patch("/history/404", json={"name": "Ghost"}, headers=authenticated_headers)
        assert r.status_code == 422
        assert r.json()["error_code"] == "STAY_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_blog_post_lifecycle(self, async_client, authenticated_headers):
        stay = await add(async_client, authenticated_headers,
                         start="2024-01-01T00:00:00Z", name="Vienna")

        r = await async_client.put(
            f"/history/{stay['id']}/blog",
            json={"url": "https://blog.example/vienna", "name": "Coffee houses"},
            headers=authenticated_headers,
        )
        assert r.status_code == 204

        latest = await async_client.get("/blog/latest")
        assert latest.json() == {"url": "https://blog.example/vienna", "name": "Coffee houses"}

        r = await async_client.delete(f"/history/{stay['id']}/blog", headers=authenticated_headers)
        assert r.status_code == 204
        assert (await async_client.get("/blog/latest")).status_code == 204

    @pytest.mark.asyncio
    async def test_map_attach(self, async_client, authenticated_headers):
        stay = await add(async_client, authenticated_headers,
                         start="2024-01-01T00:00:00Z", name="Prague")
        r = await async_client.put(
            f"/history/{stay['id']}/map",
            json={"url": "https://maps.example/prague.png"},
            headers=authenticated_headers,
        )
        assert r.status_code == 204
        assert (await async_client.get("/history")).json()[0]["map_url"] == "https://maps.example/prague.png"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method,path,body", [
        ("PUT", "/history/77/blog", {"url": "https://b.example/1", "name": "Post"}),
        ("DELETE", "/history/77/blog", None),
        ("PUT", "/history/77/map", {"url": "https://m.example/1.png"}),
    ])
    async def test_attachments_on_unknown_stay_are_422(
        self, async_client, authenticated_headers, method, path, body
    ):
        r = await async_client.request(method, path, json=body, headers=authenticated_headers)
        assert r.status_code == 422
        assert r.json()["error_code"] == "STAY_NOT_FOUND"
