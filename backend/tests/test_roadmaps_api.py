"""Tests for the /roadmaps routes."""

from datetime import datetime

import pytest
from conftest import bearer, fake_generator, make_roadmap_reply
from fastapi import FastAPI
from httpx import AsyncClient

GENERATE_BODY = {
    "roadmapName": "Backend Basics",
    "skillLevel": "beginner",
    "includeProjects": True,
    "techStack": {"languages": ["Python"], "frameworks": ["FastAPI"]},
}


async def _generate(client: AsyncClient, token: str) -> dict:
    resp = await client.post("/api/roadmaps/generate", json=GENERATE_BODY, headers=bearer(token))
    assert resp.status_code == 201, resp.text
    return resp.json()


def _topic_ids(roadmap: dict) -> list[str]:
    return [topic["id"] for stage in roadmap["stages"] for topic in stage["topics"]]


@pytest.mark.asyncio
async def test_generate_returns_camel_case_roadmap(client: AsyncClient, register) -> None:
    token, user = await register()

    roadmap = await _generate(client, token)

    assert roadmap["title"] == "Backend Basics"
    assert roadmap["totalDuration"] == "4 weeks"
    assert roadmap["skillLevel"] == "beginner"
    assert roadmap["includeProjects"] is True
    assert roadmap["techStack"]["frameworks"] == ["FastAPI"]
    assert roadmap["techStack"]["otherTech"] == []
    assert roadmap["createdBy"] == user["id"]
    assert roadmap["totalTopics"] == 5
    assert roadmap["completedTopics"] == 0
    assert roadmap["progress"] == 0

    stage = roadmap["stages"][0]
    assert stage["stageTitle"] == "Stage 1"
    topic = stage["topics"][0]
    assert topic["topicTitle"] == "Topic 1.1"
    assert topic["completed"] is False
    assert topic["completedAt"] is None
    assert len(set(_topic_ids(roadmap))) == 5


@pytest.mark.asyncio
async def test_generate_requires_auth(client: AsyncClient) -> None:
    resp = await client.post("/api/roadmaps/generate", json=GENERATE_BODY)
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_generate_rejects_unknown_skill_level(client: AsyncClient, register) -> None:
    token, _ = await register()

    resp = await client.post(
        "/api/roadmaps/generate",
        json={**GENERATE_BODY, "skillLevel": "wizard"},
        headers=bearer(token),
    )
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid request"


@pytest.mark.asyncio
async def test_generate_unusable_reply(
    client: AsyncClient, test_app: FastAPI, register
) -> None:
    """A reply without a JSON object fails and saves nothing."""
    token, _ = await register()
    test_app.state.text_generator = fake_generator("Sorry, I can't build that roadmap.")

    resp = await client.post("/api/roadmaps/generate", json=GENERATE_BODY, headers=bearer(token))

    assert resp.status_code == 500
    assert resp.json() == {
        "message": "Failed to generate roadmap",
        "error": "Invalid response from AI",
    }
    listed = await client.get("/api/roadmaps", headers=bearer(token))
    assert listed.json() == []


@pytest.mark.asyncio
async def test_generate_reply_with_wrong_shape(
    client: AsyncClient, test_app: FastAPI, register
) -> None:
    token, _ = await register()
    test_app.state.text_generator = fake_generator('{"stages": []}')

    resp = await client.post("/api/roadmaps/generate", json=GENERATE_BODY, headers=bearer(token))

    assert resp.status_code == 500
    assert resp.json()["message"] == "Failed to generate roadmap"


@pytest.mark.asyncio
async def test_list_is_scoped_and_newest_first(
    client: AsyncClient, test_app: FastAPI, register
) -> None:
    ada, _ = await register("ada@example.com")
    grace, _ = await register("grace@example.com", name="Grace")
    test_app.state.text_generator = fake_generator(
        make_roadmap_reply((1,)), make_roadmap_reply((2,)), make_roadmap_reply((3,))
    )

    first = await _generate(client, ada)
    second = await _generate(client, ada)
    await _generate(client, grace)

    resp = await client.get("/api/roadmaps", headers=bearer(ada))
    assert resp.status_code == 200
    assert [r["id"] for r in resp.json()] == [second["id"], first["id"]]


@pytest.mark.asyncio
async def test_get_roadmap(client: AsyncClient, register) -> None:
    token, _ = await register()
    created = await _generate(client, token)

    resp = await client.get(f"/api/roadmaps/{created['id']}", headers=bearer(token))
    assert resp.status_code == 200
    assert resp.json() == created


@pytest.mark.asyncio
async def test_other_users_roadmap_is_not_found(client: AsyncClient, register) -> None:
    """Get, toggle and delete all report 404 for someone else's roadmap."""
    ada, _ = await register("ada@example.com")
    grace, _ = await register("grace@example.com", name="Grace")
    roadmap = await _generate(client, ada)
    topic_id = _topic_ids(roadmap)[0]

    resp = await client.get(f"/api/roadmaps/{roadmap['id']}", headers=bearer(grace))
    assert resp.status_code == 404
    assert resp.json() == {"message": "Roadmap not found"}

    resp = await client.patch(
        f"/api/roadmaps/{roadmap['id']}/topics/{topic_id}/complete",
        json={"completed": True},
        headers=bearer(grace),
    )
    assert resp.status_code == 404

    resp = await client.delete(f"/api/roadmaps/{roadmap['id']}", headers=bearer(grace))
    assert resp.status_code == 404

    # Untouched for the owner
    resp = await client.get(f"/api/roadmaps/{roadmap['id']}", headers=bearer(ada))
    assert resp.json()["completedTopics"] == 0


@pytest.mark.asyncio
async def test_missing_roadmap(client: AsyncClient, register) -> None:
    token, _ = await register()
    resp = await client.get("/api/roadmaps/9999", headers=bearer(token))
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_toggle_topics_updates_progress(client: AsyncClient, register) -> None:
    token, _ = await register()
    roadmap = await _generate(client, token)
    ids = _topic_ids(roadmap)

    for topic_id in ids[:3]:
        resp = await client.patch(
            f"/api/roadmaps/{roadmap['id']}/topics/{topic_id}/complete",
            json={"completed": True},
            headers=bearer(token),
        )
        assert resp.status_code == 200

    body = resp.json()
    assert body["completedTopics"] == 3
    assert body["totalTopics"] == 5
    assert body["progress"] == 60
    done = [t for s in body["stages"] for t in s["topics"] if t["completed"]]
    assert [t["id"] for t in done] == ids[:3]
    assert all(t["completedAt"] is not None for t in done)
    # Topic and roadmap timestamps share one format
    for stamp in (done[0]["completedAt"], body["updatedAt"], body["createdAt"]):
        assert datetime.fromisoformat(stamp).tzinfo is None

    resp = await client.patch(
        f"/api/roadmaps/{roadmap['id']}/topics/{ids[0]}/complete",
        json={"completed": False},
        headers=bearer(token),
    )
    body = resp.json()
    assert body["progress"] == 40
    assert body["stages"][0]["topics"][0]["completedAt"] is None


@pytest.mark.asyncio
async def test_toggle_unknown_topic(client: AsyncClient, register) -> None:
    token, _ = await register()
    roadmap = await _generate(client, token)

    resp = await client.patch(
        f"/api/roadmaps/{roadmap['id']}/topics/nope/complete",
        json={"completed": True},
        headers=bearer(token),
    )
    assert resp.status_code == 404
    assert resp.json() == {"message": "Topic not found"}


@pytest.mark.asyncio
async def test_toggle_requires_completed_flag(client: AsyncClient, register) -> None:
    token, _ = await register()
    roadmap = await _generate(client, token)
    topic_id = _topic_ids(roadmap)[0]

    resp = await client.patch(
        f"/api/roadmaps/{roadmap['id']}/topics/{topic_id}/complete",
        json={},
        headers=bearer(token),
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_delete_roadmap(client: AsyncClient, register) -> None:
    token, _ = await register()
    roadmap = await _generate(client, token)

    resp = await client.delete(f"/api/roadmaps/{roadmap['id']}", headers=bearer(token))
    assert resp.status_code == 200
    assert resp.json() == {"message": "Roadmap deleted successfully"}

    resp = await client.get(f"/api/roadmaps/{roadmap['id']}", headers=bearer(token))
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_stats(client: AsyncClient, test_app: FastAPI, register) -> None:
    token, _ = await register()
    test_app.state.text_generator = fake_generator(
        make_roadmap_reply((2,)), make_roadmap_reply((3,))
    )
    first = await _generate(client, token)
    await _generate(client, token)

    await client.patch(
        f"/api/roadmaps/{first['id']}/topics/{_topic_ids(first)[0]}/complete",
        json={"completed": True},
        headers=bearer(token),
    )

    resp = await client.get("/api/roadmaps/stats", headers=bearer(token))
    assert resp.status_code == 200
    assert resp.json() == {
        "totalRoadmaps": 2,
        "averageProgress": 25,
        "totalTopics": 5,
        "completedTopics": 1,
    }


@pytest.mark.asyncio
async def test_stats_without_roadmaps(client: AsyncClient, register) -> None:
    token, _ = await register()
    resp = await client.get("/api/roadmaps/stats", headers=bearer(token))
    assert resp.json() == {
        "totalRoadmaps": 0,
        "averageProgress": 0,
        "totalTopics": 0,
        "completedTopics": 0,
    }


@pytest.mark.asyncio
async def test_health(client: AsyncClient) -> None:
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"
