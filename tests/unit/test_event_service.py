"""Tests for EventService and daily summary parsing."""

import json
from datetime import UTC, datetime, timedelta

import pytest

from app.application.dtos.uploads import UploadedFile
from app.application.services import EventService
from app.application.services.event_service import parse_daily_summaries
from app.domain.exceptions import AuthorizationException, ValidationException
from app.shared.utils.datetime import utc_now


@pytest.fixture
def events(settings, store, storage, push) -> EventService:
    return EventService(store, settings, storage=storage, push=push)


def test_parse_daily_summaries_from_json() -> None:
    raw = json.dumps([{"date": "2024-08-01", "summary": "<i>Louange</i>"}])
    summaries = parse_daily_summaries(raw)
    assert summaries == [{"summary": "Louange", "date": datetime(2024, 8, 1, tzinfo=UTC)}]


def test_parse_daily_summaries_empty() -> None:
    assert parse_daily_summaries(None) == []
    assert parse_daily_summaries("") == []
    assert parse_daily_summaries([]) == []


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        '{"date": "2024-08-01"}',
        '[{"summary": "no date"}]',
        '[{"date": "yesterday"}]',
        '[{"date": 5}]',
        '[{"date": null}]',
    ],
)
def test_parse_daily_summaries_rejects_bad_input(raw: str) -> None:
    with pytest.raises(ValidationException):
        parse_daily_summaries(raw)


def test_parse_daily_summaries_rejects_deep_nesting() -> None:
    nested: dict = {}
    node = nested
    for _ in range(30):
        node["more"] = {}
        node = node["more"]
    with pytest.raises(ValidationException):
        parse_daily_summaries([{"date": "2024-08-01", "notes": nested}])


async def test_create_event_without_image(events, store, push, make_user) -> None:
    user = make_user("pasteur")
    start = datetime(2030, 8, 1, 9, 0)
    result = await events.create(
        title="Convention",
        description="Trois jours",
        start_date=start,
        end_date=start + timedelta(days=2),
        location="Lomé",
        daily_summaries=None,
        image=None,
        user=user,
    )
    doc = store.data["events"][result["eventId"]]
    assert doc["imageUrl"] == ""
    assert doc["startDate"].tzinfo is not None
    assert doc["createdBy"] == user.uid
    assert push.sent[0]["data"] == {"type": "event", "eventId": result["eventId"]}


async def test_create_event_end_before_start(events, make_user) -> None:
    start = utc_now()
    with pytest.raises(ValidationException) as exc_info:
        await events.create(
            title="Convention", description="", start_date=start, end_date=start - timedelta(hours=1),
            location="", daily_summaries=None, image=None, user=make_user("media"),
        )
    assert exc_info.value.message == "End date must be after start date"


async def test_list_upcoming_soonest_first(events, store) -> None:
    now = utc_now()
    store.data["events"] = {
        "past": {"title": "Past", "startDate": now - timedelta(days=3)},
        "later": {"title": "Later", "startDate": now + timedelta(days=10)},
        "soon": {"title": "Soon", "startDate": now + timedelta(days=1)},
    }
    upcoming = await events.list_all(upcoming=True)
    assert [e["id"] for e in upcoming["events"]] == ["soon", "later"]

    every = await events.list_all()
    assert [e["id"] for e in every["events"]] == ["later", "soon", "past"]


async def test_update_replaces_image_and_checks_owner(events, store, storage, make_user) -> None:
    owner = make_user("media")
    other = make_user("media")
    start = utc_now() + timedelta(days=1)
    image = UploadedFile(field="image", filename="a.png", content_type="image/png", content=b"a")
    event_id = (
        await events.create(
            title="Retraite", description="", start_date=start, end_date=start + timedelta(days=1),
            location="", daily_summaries=None, image=image, user=owner,
        )
    )["eventId"]
    old_url = store.data["events"][event_id]["imageUrl"]

    with pytest.raises(AuthorizationException):
        await events.update(event_id, title="Autre", user=other)

    new_image = UploadedFile(field="image", filename="b.png", content_type="image/png", content=b"b")
    await events.update(event_id, image=new_image, daily_summaries='[{"date": "2030-01-01"}]', user=owner)
    doc = store.data["events"][event_id]
    assert doc["imageUrl"] != old_url
    assert old_url in storage.deleted
    assert len(doc["dailySummaries"]) == 1


async def test_legacy_event_without_owner_is_editable(events, store, make_user) -> None:
    store.data["events"] = {"legacy": {"title": "Old", "startDate": utc_now()}}
    await events.update("legacy", title="Renamed", user=make_user("media"))
    assert store.data["events"]["legacy"]["title"] == "Renamed"
    await events.delete("legacy", user=make_user("pasteur"))
    assert "legacy" not in store.data["events"]
