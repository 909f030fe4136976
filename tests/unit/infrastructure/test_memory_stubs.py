"""Unit tests for the in-memory port implementations."""

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from desaconnect.domain.errors.admin import AdminAlreadyExistsError
from desaconnect.domain.errors.submission import (
    DuplicateReferenceError,
    SubmissionNotFoundError,
)
from desaconnect.domain.models.admin_entry import AdminEntry
from desaconnect.domain.models.submission import (
    InternalComment,
    Submission,
    SubmissionStatus,
)
from desaconnect.domain.models.submission_query import SortOrder, SubmissionQuery
from desaconnect.infrastructure.stubs import (
    AdminRosterRepositoryStub,
    FileStorageStub,
    IdentityProviderStub,
    SubmissionRepositoryStub,
)

BASE = datetime(2024, 5, 1, tzinfo=timezone.utc)


def _submission(code: str, day: int, **overrides: Any) -> Submission:
    fields: dict[str, Any] = {
        "reference_id": code,
        "category": "Infrastructure",
        "description": f"Laporan nomor {code}",
        "created_at": BASE + timedelta(days=day),
        "updated_at": BASE + timedelta(days=day),
    }
    fields.update(overrides)
    return Submission(**fields)


class TestSubmissionRepositoryStub:
    """Tests for SubmissionRepositoryStub."""

    @pytest.mark.asyncio
    async def test_duplicate_reference(self) -> None:
        repository = SubmissionRepositoryStub()
        await repository.save(_submission("AAAA1111", 0))

        with pytest.raises(DuplicateReferenceError):
            await repository.save(_submission("AAAA1111", 1))

    @pytest.mark.asyncio
    async def test_list_sorts_and_pages(self) -> None:
        repository = SubmissionRepositoryStub()
        for day, code in enumerate(["AAAA0001", "AAAA0002", "AAAA0003"]):
            await repository.save(_submission(code, day))

        newest, total = await repository.list(SubmissionQuery(), offset=0, limit=2)
        oldest, _ = await repository.list(
            SubmissionQuery(sort=SortOrder.OLDEST_FIRST), offset=0, limit=1
        )

        assert total == 3
        assert [s.reference_id for s in newest] == ["AAAA0003", "AAAA0002"]
        assert [s.reference_id for s in oldest] == ["AAAA0001"]

    @pytest.mark.asyncio
    async def test_replace_comments_compare_and_swap(self) -> None:
        repository = SubmissionRepositoryStub()
        submission = _submission("AAAA1111", 0)
        await repository.save(submission)
        comment = InternalComment("Cek lokasi", "kades@desa.id", BASE + timedelta(days=9))

        stale = await repository.replace_comments(
            submission.id, [comment], comment.created_at, expected_updated_at=None
        )
        fresh = await repository.replace_comments(
            submission.id, [comment], comment.created_at, submission.updated_at
        )

        assert stale is None
        assert fresh is not None
        assert fresh.internal_comments == (comment,)
        assert fresh.updated_at == comment.created_at

    @pytest.mark.asyncio
    async def test_update_missing(self) -> None:
        repository = SubmissionRepositoryStub()

        with pytest.raises(SubmissionNotFoundError):
            await repository.update_fields(_submission("AAAA1111", 0), ["status"])

    @pytest.mark.asyncio
    async def test_clear_admin_references(self) -> None:
        repository = SubmissionRepositoryStub()
        await repository.save(
            _submission("AAAA0001", 0, assigned_to="sekdes@desa.id")
        )
        await repository.save(
            _submission(
                "AAAA0002",
                1,
                assigned_to="kades@desa.id",
                last_updated_by="sekdes@desa.id",
                status=SubmissionStatus.RESOLVED,
            )
        )
        await repository.save(_submission("AAAA0003", 2))

        assert await repository.clear_admin_references("sekdes@desa.id") == 2
        second = await repository.get_by_reference_id("AAAA0002")
        assert second is not None
        assert second.assigned_to == "kades@desa.id"
        assert second.last_updated_by is None


class TestAdminRosterRepositoryStub:
    @pytest.mark.asyncio
    async def test_add_get_remove(self) -> None:
        roster = AdminRosterRepositoryStub([AdminEntry("Kades@Desa.id")])

        assert await roster.get("kades@desa.id") is not None
        with pytest.raises(AdminAlreadyExistsError):
            await roster.add(AdminEntry("kades@desa.id"))
        assert await roster.remove("kades@desa.id") is True
        assert await roster.remove("kades@desa.id") is False
        assert await roster.count() == 0


@pytest.mark.asyncio
async def test_file_storage_stub_keeps_bytes() -> None:
    storage = FileStorageStub()

    url = await storage.store(b"img", "image/jpeg", "jalan.JPG")

    key = url.rsplit("/", 1)[1]
    assert url.startswith("memory://submission-files/")
    assert key.endswith(".jpg")
    assert storage.objects[key] == ("image/jpeg", b"img")


@pytest.mark.asyncio
async def test_identity_provider_stub() -> None:
    provider = IdentityProviderStub()
    provider.register_user("Kades@Desa.id", "rahasia")
    provider.issue_token("kades@desa.id", "tok")

    assert await provider.verify_password("kades@desa.id", "rahasia") is True
    assert await provider.verify_password("kades@desa.id", "salah") is False
    assert await provider.get_user_email("tok") == "kades@desa.id"
    assert await provider.get_user_email("nope") is None
