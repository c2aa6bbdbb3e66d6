"""Tests for SermonService: required files, date windows and stats."""

from datetime import UTC, datetime

import pytest

from app.application.dtos.uploads import UploadedFile
from app.application.services import SermonService
from app.domain.exceptions import ValidationException

_IMAGE = UploadedFile(field="image", filename="cover.jpg", content_type="image/jpeg", content=b"jpg")
_PDF = UploadedFile(field="pdf", filename="notes.pdf", content_type="application/pdf", content=b"%PDF")


@pytest.fixture
def sermons(settings, store, storage, push) -> SermonService:
    return SermonService(store, settings, storage=storage, push=push)


async def test_create_requires_both_files(sermons, make_user) -> None:
    user = make_user("pasteur")
    with pytest.raises(ValidationException) as exc_info:
        await sermons.create(title="La foi", date=datetime(2024, 5, 5), image=_IMAGE, pdf=None, user=user)
    assert exc_info.value.message == "Image and PDF files are required"


async def test_create_normalizes_date_and_notifies(sermons, store, push, make_user) -> None:
    user = make_user("pasteur")
    result = await sermons.create(
        title="La foi", date=datetime(2024, 5, 5, 10, 0), image=_IMAGE, pdf=_PDF, user=user
    )
    doc = store.data["sermons"][result["sermonId"]]
    assert doc["date"] == datetime(2024, 5, 5, 10, 0, tzinfo=UTC)
    assert doc["pdfUrl"].startswith("https://storage.test/sermons/pdfs/")
    assert doc["downloads"] == 0
    assert push.sent[0]["title"] == "📖 Nouveau sermon disponible"


async def test_list_filters_by_year_and_month(sermons, store) -> None:
    store.data["sermons"] = {
        "jan": {"title": "A", "date": datetime(2024, 1, 7, tzinfo=UTC)},
        "feb": {"title": "B", "date": datetime(2024, 2, 4, tzinfo=UTC)},
        "old": {"title": "C", "date": datetime(2023, 12, 31, tzinfo=UTC)},
    }
    year = await sermons.list_all(year=2024)
    assert [s["id"] for s in year["sermons"]] == ["feb", "jan"]

    month = await sermons.list_all(year=2024, month=1)
    assert [s["id"] for s in month["sermons"]] == ["jan"]

    with pytest.raises(ValidationException):
        await sermons.list_all(month=1)


async def test_stats_by_month(sermons, store) -> None:
    store.data["sermons"] = {
        "s1": {"date": datetime(2024, 1, 7, tzinfo=UTC), "downloads": 3},
        "s2": {"date": datetime(2024, 1, 14, tzinfo=UTC), "downloads": 1},
        "s3": {"date": datetime(2024, 3, 3, tzinfo=UTC), "downloads": 2},
    }
    stats = (await sermons.stats())["stats"]
    assert stats["total"] == 3
    assert stats["totalDownloads"] == 6
    assert stats["avgDownloadsPerSermon"] == 2
    assert stats["sermonsByMonth"] == {"2024-01": 2, "2024-03": 1}
