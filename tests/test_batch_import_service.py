"""
tests/test_batch_import_service.py

Preview and partial-failure-tolerant commits of the batch import service.
"""

from __future__ import annotations

import logging

import pytest

from app.services.batch_import_service import BatchImportInputError, BatchImportService
from batch_import import ParsedGiftUpdate, ParsedRegistration, UpdateSubMode
from conftest import FakeSession, FakeStreamerRepository, StreamerStub


@pytest.fixture()
def svc() -> BatchImportService:
    return BatchImportService(
        valid_day_minutes=120,
        max_input_lines=10,
        message_locale="en",
        log_rejections=True,
    )


class TestPreview:
    def test_registration_preview(self, svc: BatchImportService, streamer_repository: FakeStreamerRepository) -> None:
        preview = svc.preview_registrations("Ana,12345\nJub,99999\nbad", streamer_repository.list_refs())
        assert (preview.summary.valid, preview.summary.invalid) == (1, 2)
        assert [e.streamer_id for e in preview.valid_entries] == ["12345"]

    def test_gift_update_preview_consolidates(
        self, svc: BatchImportService, streamer_repository: FakeStreamerRepository
    ) -> None:
        preview = svc.preview_gift_updates(
            "10597690 1 1 150\n10597690 1 1 30",
            streamer_repository.list_refs(),
            sub_mode=UpdateSubMode.DUPLICATE,
        )
        [entry] = preview.entries
        assert (entry.minutes, entry.days_count, entry.valid_days_count) == (180, 2, 1)

    def test_line_limit(self, svc: BatchImportService) -> None:
        text = "\n".join(f"Ana{i},{10000 + i}" for i in range(11))
        with pytest.raises(BatchImportInputError, match="limit is 10"):
            svc.preview_registrations(text, [])

    def test_blank_lines_do_not_count_towards_the_limit(self, svc: BatchImportService) -> None:
        text = "\n\n".join(f"Ana{i},{10000 + i}" for i in range(10))
        assert svc.preview_registrations(text, []).summary.valid == 10


class TestCommitRegistrations:
    def test_each_entry_commits_on_its_own(self, svc: BatchImportService, fake_session: FakeSession) -> None:
        repository = FakeStreamerRepository(failing_ids={"67890"})
        preview = svc.preview_registrations("Ana,12345\nBia,67890\nCia,11111\nbad", [])

        result = svc.commit_registrations(preview.entries, repository=repository, db=fake_session)

        assert (result.success, result.failed) == (2, 1)
        assert not result.is_complete
        assert result.errors == ["Bia (67890): store rejected 67890"]
        assert [s.streamer_id for s in repository.streamers] == ["12345", "11111"]
        assert fake_session.commits == 2
        assert fake_session.rollbacks == 1

    def test_rejections_are_logged(
        self,
        svc: BatchImportService,
        fake_session: FakeSession,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        repository = FakeStreamerRepository(failing_ids={"12345"})
        preview = svc.preview_registrations("Ana,12345", [])
        with caplog.at_level(logging.WARNING, logger="app.services.batch_import_service"):
            svc.commit_registrations(preview.entries, repository=repository, db=fake_session)
        assert "streamer_id=12345" in caplog.text

    def test_nothing_valid(self, svc: BatchImportService, fake_session: FakeSession) -> None:
        preview = svc.preview_registrations("bad", [])
        result = svc.commit_registrations(preview.entries, repository=FakeStreamerRepository(), db=fake_session)
        assert (result.success, result.failed, result.errors) == (0, 0, [])
        assert fake_session.commits == 0


class TestCommitGiftUpdates:
    def test_unique_mode_keeps_effective_days(
        self,
        svc: BatchImportService,
        fake_session: FakeSession,
        streamer_repository: FakeStreamerRepository,
    ) -> None:
        preview = svc.preview_gift_updates("10597690,15000,8000,1500", streamer_repository.list_refs())
        result = svc.commit_gift_updates(preview.entries, repository=streamer_repository, db=fake_session)

        jub = streamer_repository.get_by_streamer_id("10597690")
        assert result.success == 1
        assert (jub.luck_gifts, jub.exclusive_gifts, jub.minutes) == (15000, 8000, 1500)
        assert jub.effective_days == 3

    def test_duplicate_mode_sets_effective_days(
        self,
        svc: BatchImportService,
        fake_session: FakeSession,
        streamer_repository: FakeStreamerRepository,
    ) -> None:
        preview = svc.preview_gift_updates(
            "10597690 10 1 150\n10597690 20 2 90\n10597690 30 3 200",
            streamer_repository.list_refs(),
            sub_mode=UpdateSubMode.DUPLICATE,
        )
        svc.commit_gift_updates(preview.entries, repository=streamer_repository, db=fake_session)

        jub = streamer_repository.get_by_streamer_id("10597690")
        assert (jub.luck_gifts, jub.minutes, jub.effective_days) == (60, 440, 2)

    def test_counters_are_overwritten_not_added(
        self,
        svc: BatchImportService,
        fake_session: FakeSession,
    ) -> None:
        repository = FakeStreamerRepository([StreamerStub(streamer_id="12345", name="Ana", luck_gifts=999)])
        preview = svc.preview_gift_updates("12345 1 2 3", repository.list_refs())
        svc.commit_gift_updates(preview.entries, repository=repository, db=fake_session)
        assert repository.streamers[0].luck_gifts == 1

    def test_failure_does_not_abort_the_rest(
        self,
        svc: BatchImportService,
        fake_session: FakeSession,
        streamer_repository: FakeStreamerRepository,
    ) -> None:
        streamer_repository.failing_ids = {"10597690"}
        preview = svc.preview_gift_updates(
            "10597690 1 1 1\n10844565 5 5 5", streamer_repository.list_refs()
        )
        result = svc.commit_gift_updates(preview.entries, repository=streamer_repository, db=fake_session)
        assert (result.success, result.failed) == (1, 1)
        assert result.errors[0].startswith("Jub (10597690): ")
        assert streamer_repository.get_by_streamer_id("10844565").minutes == 5


class TestCommitRechecksSubmittedEntries:
    def test_malformed_registration_is_not_stored(
        self,
        svc: BatchImportService,
        fake_session: FakeSession,
        streamer_repository: FakeStreamerRepository,
    ) -> None:
        forged = ParsedRegistration(name="", streamer_id="abc", is_valid=True)
        result = svc.commit_registrations([forged], repository=streamer_repository, db=fake_session)

        assert (result.success, result.failed) == (0, 1)
        assert result.errors == ["abc: invalid format"]
        assert [s.streamer_id for s in streamer_repository.streamers] == ["10597690", "10844565"]
        assert fake_session.commits == 0

    def test_short_id_is_rejected(self, svc: BatchImportService, fake_session: FakeSession) -> None:
        repository = FakeStreamerRepository()
        forged = ParsedRegistration(name="Ana", streamer_id="1234", is_valid=True)
        result = svc.commit_registrations([forged], repository=repository, db=fake_session)
        assert result.failed == 1
        assert repository.streamers == []

    def test_existing_id_is_rejected_before_the_store(
        self,
        svc: BatchImportService,
        fake_session: FakeSession,
        streamer_repository: FakeStreamerRepository,
    ) -> None:
        forged = ParsedRegistration(name="Outra", streamer_id="10597690", is_valid=True)
        result = svc.commit_registrations([forged], repository=streamer_repository, db=fake_session)
        assert result.errors == ['Outra (10597690): ID "10597690" already exists — skipped']
        assert fake_session.rollbacks == 0

    def test_repeated_submission_is_a_batch_duplicate(
        self, svc: BatchImportService, fake_session: FakeSession
    ) -> None:
        repository = FakeStreamerRepository()
        entry = ParsedRegistration(name="Ana", streamer_id="12345", is_valid=True)
        result = svc.commit_registrations([entry, entry], repository=repository, db=fake_session)
        assert (result.success, result.failed) == (1, 1)
        assert result.errors == ["Ana (12345): duplicate in this batch"]

    def test_unknown_gift_update_id_is_rejected(
        self,
        svc: BatchImportService,
        fake_session: FakeSession,
        streamer_repository: FakeStreamerRepository,
    ) -> None:
        forged = ParsedGiftUpdate(streamer_id="99999", luck_gifts=1, exclusive_gifts=1, minutes=1, is_valid=True)
        result = svc.commit_gift_updates([forged], repository=streamer_repository, db=fake_session)
        assert result.errors == ['99999: ID "99999" not found — skipped']
        assert fake_session.commits == 0

    @pytest.mark.parametrize(
        "overrides",
        [
            {"luck_gifts": -5},
            {"minutes": -1},
            {"days_count": 2, "valid_days_count": 5},
            {"valid_days_count": 1},
            {"streamer_id": "abc"},
        ],
    )
    def test_inconsistent_gift_update_is_rejected(
        self,
        svc: BatchImportService,
        fake_session: FakeSession,
        streamer_repository: FakeStreamerRepository,
        overrides: dict,
    ) -> None:
        values = {"streamer_id": "10597690", "luck_gifts": 1, "exclusive_gifts": 1, "minutes": 1, "is_valid": True}
        values.update(overrides)
        result = svc.commit_gift_updates(
            [ParsedGiftUpdate(**values)], repository=streamer_repository, db=fake_session
        )

        jub = streamer_repository.get_by_streamer_id("10597690")
        assert (result.success, result.failed) == (0, 1)
        assert (jub.luck_gifts, jub.minutes, jub.effective_days) == (0, 1500, 3)
