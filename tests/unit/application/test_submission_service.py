"""Unit tests for the submission service."""

from collections.abc import Iterator
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from desaconnect.application.services.admin_authorization_cache import (
    AdminAuthorizationCache,
)
from desaconnect.application.services.submission_service import (
    SubmissionInput,
    SubmissionService,
)
from desaconnect.domain.errors.admin import AdminNotFoundError
from desaconnect.domain.errors.dependency import FileStorageError
from desaconnect.domain.errors.submission import (
    AttachmentRejectedError,
    ConcurrentModificationError,
    DuplicateReferenceError,
    InvalidCommentError,
    InvalidDescriptionError,
    InvalidStatusError,
    MissingCategoryError,
    SubmissionNotFoundError,
)
from desaconnect.domain.exceptions import InvalidInputError
from desaconnect.domain.models.admin_entry import AdminEntry
from desaconnect.domain.models.submission import (
    Submission,
    SubmissionPriority,
    SubmissionStatus,
)
from desaconnect.domain.models.submission_query import SubmissionQuery
from desaconnect.domain.models.uploaded_file import UploadedFile
from desaconnect.infrastructure.stubs import (
    AdminRosterRepositoryStub,
    FileStorageStub,
    SubmissionRepositoryStub,
)

START = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)
VALID_DESCRIPTION = "Jalan desa berlubang di RT 03"


class SteppingClock:
    """Returns a strictly increasing timestamp on every call."""

    def __init__(self) -> None:
        self.now = START

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


def _codes(*codes: str) -> Iterator[str]:
    yield from codes
    while True:
        yield "ZZZZ9999"


@pytest.fixture
def repository() -> SubmissionRepositoryStub:
    return SubmissionRepositoryStub()


@pytest.fixture
def storage() -> FileStorageStub:
    return FileStorageStub()


@pytest.fixture
def service(
    repository: SubmissionRepositoryStub, storage: FileStorageStub
) -> SubmissionService:
    return SubmissionService(repository, storage, clock=SteppingClock())


async def _create(service: SubmissionService, **overrides: object) -> Submission:
    fields: dict[str, object] = {
        "category": "Infrastructure",
        "description": VALID_DESCRIPTION,
    }
    fields.update(overrides)
    reference_id = await service.create(SubmissionInput(**fields))  # type: ignore[arg-type]
    return await service.get_by_reference_id(reference_id)


class TestCreate:
    """Tests for SubmissionService.create."""

    @pytest.mark.asyncio
    async def test_creates_pending_regular_submission(
        self, service: SubmissionService
    ) -> None:
        submission = await _create(
            service, name="  Budi ", contact_info="", description=f"  {VALID_DESCRIPTION}  "
        )

        assert submission.status is SubmissionStatus.PENDING
        assert submission.priority is SubmissionPriority.REGULAR
        assert submission.internal_comments == ()
        assert submission.description == f"  {VALID_DESCRIPTION}  "
        assert submission.name == "Budi"
        assert submission.contact_info is None
        assert submission.file_url is None
        assert len(submission.reference_id) == 8

    @pytest.mark.asyncio
    @pytest.mark.parametrize("length", [10, 1000])
    async def test_description_bounds_accepted(
        self, service: SubmissionService, length: int
    ) -> None:
        submission = await _create(service, description="x" * length)
        assert len(submission.description) == length

    @pytest.mark.asyncio
    @pytest.mark.parametrize("description", ["x" * 9, "x" * 1001, "   short", " " * 12, ""])
    async def test_description_out_of_range_rejected(
        self,
        service: SubmissionService,
        repository: SubmissionRepositoryStub,
        description: str,
    ) -> None:
        with pytest.raises(InvalidDescriptionError):
            await service.create(
                SubmissionInput(category="Health", description=description)
            )
        assert await repository.list_all() == []

    @pytest.mark.asyncio
    async def test_description_length_counts_surrounding_whitespace(
        self, service: SubmissionService
    ) -> None:
        submission = await _create(service, description=" abcdefghi")
        assert submission.description == " abcdefghi"

    @pytest.mark.asyncio
    async def test_blank_category_rejected(self, service: SubmissionService) -> None:
        with pytest.raises(MissingCategoryError):
            await service.create(
                SubmissionInput(category="  ", description=VALID_DESCRIPTION)
            )

    @pytest.mark.asyncio
    async def test_attachment_is_stored(
        self, service: SubmissionService, storage: FileStorageStub
    ) -> None:
        submission = await _create(
            service,
            file=UploadedFile("foto.png", "image/png", b"\x89PNG data"),
        )

        assert submission.file_url is not None
        assert submission.file_url.startswith("memory://submission-files/")
        assert len(storage.objects) == 1

    @pytest.mark.asyncio
    async def test_attachment_at_size_limit_accepted(
        self, service: SubmissionService
    ) -> None:
        data = b"x" * (5 * 1024 * 1024)
        submission = await _create(
            service, file=UploadedFile("scan.pdf", "application/pdf", data)
        )
        assert submission.file_url is not None

    @pytest.mark.asyncio
    async def test_oversized_attachment_rejected(
        self, service: SubmissionService, storage: FileStorageStub
    ) -> None:
        data = b"x" * (5 * 1024 * 1024 + 1)
        with pytest.raises(AttachmentRejectedError):
            await _create(service, file=UploadedFile("scan.pdf", "application/pdf", data))
        assert storage.objects == {}

    @pytest.mark.asyncio
    async def test_disallowed_type_rejected(self, service: SubmissionService) -> None:
        with pytest.raises(AttachmentRejectedError) as exc_info:
            await _create(
                service, file=UploadedFile("run.exe", "application/x-msdownload", b"MZ")
            )
        assert exc_info.value.field == "file"

    @pytest.mark.asyncio
    async def test_upload_failure_persists_nothing(
        self, repository: SubmissionRepositoryStub
    ) -> None:
        storage = MagicMock()
        storage.store = AsyncMock(side_effect=FileStorageError("foto.png", "bucket down"))
        service = SubmissionService(repository, storage)

        with pytest.raises(FileStorageError):
            await _create(service, file=UploadedFile("foto.png", "image/png", b"png"))
        assert await repository.list_all() == []

    @pytest.mark.asyncio
    async def test_collision_is_retried(self, repository: SubmissionRepositoryStub) -> None:
        codes = _codes("AAAA1111", "AAAA1111", "BBBB2222")
        service = SubmissionService(
            repository, FileStorageStub(), reference_generator=lambda: next(codes)
        )

        first = await service.create(
            SubmissionInput(category="Health", description=VALID_DESCRIPTION)
        )
        second = await service.create(
            SubmissionInput(category="Health", description=VALID_DESCRIPTION)
        )

        assert first == "AAAA1111"
        assert second == "BBBB2222"

    @pytest.mark.asyncio
    async def test_repeated_collisions_surface(
        self, repository: SubmissionRepositoryStub
    ) -> None:
        service = SubmissionService(
            repository, FileStorageStub(), reference_generator=lambda: "AAAA1111"
        )
        await service.create(SubmissionInput(category="Health", description=VALID_DESCRIPTION))

        with pytest.raises(DuplicateReferenceError) as exc_info:
            await service.create(
                SubmissionInput(category="Health", description=VALID_DESCRIPTION)
            )
        assert exc_info.value.reference_id == "AAAA1111"
        assert len(await repository.list_all()) == 1

    @pytest.mark.asyncio
    async def test_increments_metric(self, repository: SubmissionRepositoryStub) -> None:
        metrics = MagicMock()
        service = SubmissionService(repository, FileStorageStub(), metrics=metrics)

        await service.create(SubmissionInput(category="Health", description=VALID_DESCRIPTION))

        metrics.increment_submissions_created.assert_called_once()


class TestLookup:
    """Tests for get_by_reference_id and get_by_id."""

    @pytest.mark.asyncio
    async def test_reference_lookup_is_case_insensitive(
        self, service: SubmissionService
    ) -> None:
        submission = await _create(service)
        found = await service.get_by_reference_id(submission.reference_id.lower())
        assert found.id == submission.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code", ["NOPE0000", "bad", ""])
    async def test_unknown_reference(self, service: SubmissionService, code: str) -> None:
        with pytest.raises(SubmissionNotFoundError):
            await service.get_by_reference_id(code)

    @pytest.mark.asyncio
    async def test_unknown_id(self, service: SubmissionService) -> None:
        with pytest.raises(SubmissionNotFoundError):
            await service.get_by_id(uuid4())


class TestList:
    """Tests for SubmissionService.list."""

    @pytest.mark.asyncio
    async def test_paginates_filtered_set(self, service: SubmissionService) -> None:
        for _ in range(12):
            await _create(service, category="Health")
        for _ in range(3):
            await _create(service, category="Education")

        page = await service.list(SubmissionQuery(category="Health"), page=2, page_size=5)

        assert page.total_count == 12
        assert page.total_pages == 3
        assert len(page.items) == 5
        assert all(item.category == "Health" for item in page.items)

    @pytest.mark.asyncio
    async def test_newest_first_by_default(self, service: SubmissionService) -> None:
        first = await _create(service)
        second = await _create(service)

        page = await service.list()

        assert [item.id for item in page.items] == [second.id, first.id]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(("page", "page_size"), [(0, 10), (1, 0), (1, 101)])
    async def test_out_of_range_paging(
        self, service: SubmissionService, page: int, page_size: int
    ) -> None:
        with pytest.raises(InvalidInputError):
            await service.list(page=page, page_size=page_size)


class TestUpdates:
    """Tests for status, priority and assignment changes."""

    @pytest.mark.asyncio
    async def test_update_status(self, service: SubmissionService) -> None:
        submission = await _create(service)

        updated = await service.update_status(submission.id, "In Progress", "kades@desa.id")

        assert updated.status is SubmissionStatus.IN_PROGRESS
        assert updated.last_updated_by == "kades@desa.id"
        assert updated.first_responded_at is not None
        assert updated.updated_at is not None
        assert updated.updated_at > submission.created_at

    @pytest.mark.asyncio
    async def test_invalid_status(self, service: SubmissionService) -> None:
        submission = await _create(service)
        with pytest.raises(InvalidStatusError):
            await service.update_status(submission.id, "archived", "kades@desa.id")

    @pytest.mark.asyncio
    async def test_update_priority_canonicalizes(self, service: SubmissionService) -> None:
        submission = await _create(service)

        updated = await service.update_priority(submission.id, "URGENT", "kades@desa.id")

        assert updated.priority is SubmissionPriority.URGENT
        assert updated.priority.value == "Urgent"

    @pytest.mark.asyncio
    async def test_update_missing_submission(self, service: SubmissionService) -> None:
        with pytest.raises(SubmissionNotFoundError):
            await service.update_status(uuid4(), "resolved", "kades@desa.id")

    @pytest.mark.asyncio
    async def test_assign_requires_admin(self, repository: SubmissionRepositoryStub) -> None:
        roster = AdminRosterRepositoryStub([AdminEntry(email="sekdes@desa.id")])
        service = SubmissionService(
            repository,
            FileStorageStub(),
            admin_checker=AdminAuthorizationCache(roster),
        )
        submission = await _create(service)

        assigned = await service.assign(submission.id, "Sekdes@Desa.ID", "kades@desa.id")
        assert assigned.assigned_to == "sekdes@desa.id"

        with pytest.raises(AdminNotFoundError):
            await service.assign(submission.id, "warga@desa.id", "kades@desa.id")

        unassigned = await service.assign(submission.id, None, "kades@desa.id")
        assert unassigned.assigned_to is None


class TestAppendComment:
    """Tests for append_comment."""

    @pytest.mark.asyncio
    async def test_comments_append_in_order(self, service: SubmissionService) -> None:
        submission = await _create(service)

        await service.append_comment(submission.id, "Sudah dicek", "kades@desa.id")
        updated = await service.append_comment(submission.id, "Tunggu dana", "sekdes@desa.id")

        assert [c.text for c in updated.internal_comments] == ["Sudah dicek", "Tunggu dana"]
        assert updated.internal_comments[1].author == "sekdes@desa.id"

    @pytest.mark.asyncio
    async def test_blank_comment_rejected(self, service: SubmissionService) -> None:
        submission = await _create(service)
        with pytest.raises(InvalidCommentError):
            await service.append_comment(submission.id, "   ", "kades@desa.id")

    @pytest.mark.asyncio
    async def test_missing_submission(self, service: SubmissionService) -> None:
        with pytest.raises(SubmissionNotFoundError):
            await service.append_comment(uuid4(), "hello", "kades@desa.id")

    @pytest.mark.asyncio
    async def test_lost_race_is_retried(
        self, service: SubmissionService, repository: SubmissionRepositoryStub
    ) -> None:
        submission = await _create(service)
        original = repository.replace_comments
        calls = 0

        async def racing_replace(*args: object, **kwargs: object) -> object:
            nonlocal calls
            calls += 1
            if calls == 1:
                # Another admin's comment lands between read and write.
                await original(
                    submission.id,
                    (),
                    updated_at=START + timedelta(days=1),
                    expected_updated_at=submission.updated_at,
                )
            return await original(*args, **kwargs)  # type: ignore[arg-type]

        repository.replace_comments = racing_replace  # type: ignore[method-assign]

        updated = await service.append_comment(submission.id, "Noted", "kades@desa.id")

        assert calls == 2
        assert [c.text for c in updated.internal_comments] == ["Noted"]

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(
        self, repository: SubmissionRepositoryStub
    ) -> None:
        service = SubmissionService(repository, FileStorageStub(), max_comment_attempts=2)
        submission = await _create(service)
        repository.replace_comments = AsyncMock(return_value=None)  # type: ignore[method-assign]

        with pytest.raises(ConcurrentModificationError):
            await service.append_comment(submission.id, "Noted", "kades@desa.id")
        assert repository.replace_comments.await_count == 2
