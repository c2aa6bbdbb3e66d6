"""HTTP tests for audios, sermons, events and posts."""

import json

from httpx import AsyncClient

from tests.fakes import auth


async def _upload_audio(client: AsyncClient, user, title: str = "Louange du matin"):
    return await client.post(
        "/api/audios",
        data={"title": title, "category": "emission", "description": "Matin"},
        files={"audio": ("louange.mp3", b"ID3-audio-bytes", "audio/mpeg")},
        headers=auth(user),
    )


async def test_multipart_audio_upload(client: AsyncClient, store, storage, push, make_user) -> None:
    """POST /api/audios with a multipart file returns 201 and stores the file."""
    media = make_user("media")
    response = await _upload_audio(client, media)
    assert response.status_code == 201
    body = response.json()
    assert body["audioUrl"] in storage.files
    assert store.data["audios"][body["audioId"]]["uploadedBy"] == media.uid
    assert push.sent[0]["data"]["audioId"] == body["audioId"]


async def test_audio_upload_requires_moderator(client: AsyncClient, make_user) -> None:
    response = await _upload_audio(client, make_user("user"))
    assert response.status_code == 403


async def test_audio_upload_wrong_type(client: AsyncClient, make_user) -> None:
    response = await client.post(
        "/api/audios",
        data={"title": "Mauvais fichier", "category": "podcast"},
        files={"audio": ("notes.txt", b"hello", "text/plain")},
        headers=auth(make_user("media")),
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_FILE_TYPE"


async def test_non_owner_moderator_cannot_modify_audio(client: AsyncClient, make_user) -> None:
    """A moderator who did not upload the audio gets 403 on update and delete."""
    owner = make_user("media")
    other = make_user("pasteur")
    audio_id = (await _upload_audio(client, owner)).json()["audioId"]

    update = await client.put(f"/api/audios/{audio_id}", json={"title": "Pirate"}, headers=auth(other))
    assert update.status_code == 403
    delete = await client.delete(f"/api/audios/{audio_id}", headers=auth(other))
    assert delete.status_code == 403

    admin_delete = await client.delete(f"/api/audios/{audio_id}", headers=auth(make_user("admin")))
    assert admin_delete.status_code == 200


async def test_audio_listing_and_counters(client: AsyncClient, make_user) -> None:
    media = make_user("media")
    audio_id = (await _upload_audio(client, media)).json()["audioId"]

    await client.post(f"/api/audios/{audio_id}/play")
    await client.post(f"/api/audios/{audio_id}/play")
    await client.post(f"/api/audios/{audio_id}/download")

    detail = (await client.get(f"/api/audios/{audio_id}")).json()["audio"]
    assert detail["plays"] == 2
    assert detail["downloads"] == 1

    listing = await client.get("/api/audios", params={"category": "emission"})
    assert listing.json()["pagination"]["total"] == 1

    bad_limit = await client.get("/api/audios", params={"limit": 500})
    assert bad_limit.status_code == 400


async def test_missing_audio_is_404(client: AsyncClient) -> None:
    response = await client.get("/api/audios/nope")
    assert response.status_code == 404
    assert response.json()["error"]["message"] == "Audio not found"


async def test_sermon_upload(client: AsyncClient, store, make_user) -> None:
    response = await client.post(
        "/api/sermons",
        data={"title": "Marcher par la foi", "date": "2024-06-02T10:00:00Z"},
        files={
            "image": ("cover.jpg", b"jpg", "image/jpeg"),
            "pdf": ("notes.pdf", b"%PDF-1.4", "application/pdf"),
        },
        headers=auth(make_user("pasteur")),
    )
    assert response.status_code == 201
    sermon_id = response.json()["sermonId"]
    assert store.data["sermons"][sermon_id]["title"] == "Marcher par la foi"

    listing = await client.get("/api/sermons", params={"year": 2024, "month": 6})
    assert [s["id"] for s in listing.json()["sermons"]] == [sermon_id]


async def test_event_create_with_daily_summaries(client: AsyncClient, store, make_user) -> None:
    response = await client.post(
        "/api/events",
        data={
            "title": "Convention annuelle",
            "description": "Trois jours de louange",
            "startDate": "2030-08-01T09:00:00Z",
            "endDate": "2030-08-03T18:00:00Z",
            "location": "Lomé",
            "dailySummaries": json.dumps([{"date": "2030-08-01", "summary": "Ouverture"}]),
        },
        headers=auth(make_user("media")),
    )
    assert response.status_code == 201
    event = store.data["events"][response.json()["eventId"]]
    assert event["dailySummaries"][0]["summary"] == "Ouverture"

    upcoming = await client.get("/api/events", params={"upcoming": "true"})
    assert upcoming.json()["pagination"]["total"] == 1


async def test_post_create_like_and_forbidden_edit(client: AsyncClient, make_user) -> None:
    author = make_user("pasteur")
    created = await client.post(
        "/api/posts",
        data={"type": "image", "category": "pensee", "content": "Que la paix soit avec vous"},
        files={"media": ("p.png", b"png", "image/png")},
        headers=auth(author),
    )
    assert created.status_code == 201
    post_id = created.json()["postId"]

    await client.post(f"/api/posts/{post_id}/like")
    post = (await client.get(f"/api/posts/{post_id}")).json()["post"]
    assert post["likes"] == 1

    other = make_user("media")
    update = await client.put(f"/api/posts/{post_id}", json={"content": "Autre"}, headers=auth(other))
    assert update.status_code == 403
    delete = await client.delete(f"/api/posts/{post_id}", headers=auth(other))
    assert delete.status_code == 403


async def test_event_with_non_string_summary_date_is_400(client: AsyncClient, make_user) -> None:
    response = await client.post(
        "/api/events",
        data={
            "title": "Veillée",
            "description": "Prière",
            "startDate": "2030-09-01T20:00:00Z",
            "endDate": "2030-09-02T02:00:00Z",
            "location": "Kara",
            "dailySummaries": json.dumps([{"date": 5, "summary": "x"}]),
        },
        headers=auth(make_user("media")),
    )
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Invalid daily summary date"
