"""
app/services/batch_import_service.py

Service layer for the batch-import workflow.

Preview runs the pure parsing engine against the current streamer list.
Commit submits the valid entries to the record store one at a time: each
submission commits on its own, so a later failure never undoes earlier
successes. Failures are counted, logged at WARNING level and reported back
in a BatchImportResult; they never abort the remaining submissions.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Generic, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_batch_import_settings
from batch_import import (
    BatchImportResult,
    ImportSummary,
    ParsedGiftUpdate,
    ParsedRegistration,
    StreamerRef,
    UpdateSubMode,
    get_import_summary,
    parse_batch_input,
    parse_gift_update_input,
)
from batch_import.reconciler import reconcile_gift_updates, reconcile_registrations
from batch_import.tokenizer import is_valid_streamer_id
from batch_import.types import GiftCounters
from db.repositories.errors import StreamerRepositoryError
from db.repositories.streamer_repository import StreamerRepository
from db.repositories.types import CounterUpdate, StreamerInput

logger = logging.getLogger(__name__)

EntryT = TypeVar("EntryT", ParsedRegistration, ParsedGiftUpdate)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class BatchImportInputError(ValueError):
    """
    Raised when pasted or uploaded input cannot be handed to the parser.
    """


class BatchImportDecodeError(BatchImportInputError):
    """
    Raised when an uploaded file cannot be decoded into plain text.
    """


# ---------------------------------------------------------------------------
# Result containers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ImportPreview(Generic[EntryT]):
    """
    Annotated entries plus their tally, ready to render before committing.
    """

    entries: list[EntryT]
    summary: ImportSummary

    @property
    def valid_entries(self) -> list[EntryT]:
        return [entry for entry in self.entries if entry.is_valid]


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class BatchImportService:
    """
    Coordinates parsing previews and partial-failure-tolerant commits.
    """

    def __init__(
        self,
        *,
        valid_day_minutes: int,
        max_input_lines: int,
        message_locale: str,
        log_rejections: bool,
    ) -> None:
        self._valid_day_minutes = valid_day_minutes
        self._max_input_lines = max(1, max_input_lines)
        self._message_locale = message_locale
        self._log_rejections = log_rejections

    # ------------------------------------------------------------------
    # Preview
    # ------------------------------------------------------------------

    def preview_registrations(
        self,
        text: str,
        existing: Sequence[StreamerRef],
    ) -> ImportPreview[ParsedRegistration]:
        self._check_size(text)
        entries = parse_batch_input(text, existing, locale=self._message_locale)
        summary = get_import_summary(entries)
        logger.info(
            "Registration preview parsed valid=%d invalid=%d existing=%d",
            summary.valid,
            summary.invalid,
            len(existing),
        )
        return ImportPreview(entries=entries, summary=summary)

    def preview_gift_updates(
        self,
        text: str,
        existing: Sequence[StreamerRef],
        *,
        sub_mode: UpdateSubMode = UpdateSubMode.UNIQUE,
    ) -> ImportPreview[ParsedGiftUpdate]:
        self._check_size(text)
        entries = parse_gift_update_input(
            text,
            existing,
            sub_mode=sub_mode,
            valid_day_minutes=self._valid_day_minutes,
            locale=self._message_locale,
        )
        summary = get_import_summary(entries)
        logger.info(
            "Gift update preview parsed sub_mode=%s valid=%d invalid=%d",
            sub_mode.value,
            summary.valid,
            summary.invalid,
        )
        return ImportPreview(entries=entries, summary=summary)

    # ------------------------------------------------------------------
    # Commit
    # ------------------------------------------------------------------

    def commit_registrations(
        self,
        entries: Sequence[ParsedRegistration],
        *,
        repository: StreamerRepository,
        db: Session,
    ) -> BatchImportResult:
        """
        Create one streamer per valid entry; invalid entries are ignored.

        Entries flagged valid are checked again against the current streamer
        list before anything is written, since the flag comes from the client.
        """

        success = 0
        errors: list[str] = []
        submitted = [entry for entry in entries if entry.is_valid]
        checked = reconcile_registrations(
            [(entry.name, _submitted_ref(entry)) for entry in submitted],
            repository.list_refs(),
            locale=self._message_locale,
        )
        for entry, verdict in zip(submitted, checked):
            if not verdict.is_valid:
                errors.append(self._record_rejection(entry.name, entry.streamer_id, verdict.error))
                continue
            try:
                repository.create(StreamerInput(streamer_id=verdict.streamer_id, name=verdict.name))
                db.commit()
                success += 1
            except (StreamerRepositoryError, SQLAlchemyError) as exc:
                db.rollback()
                errors.append(self._record_rejection(entry.name, entry.streamer_id, exc))

        result = BatchImportResult(success=success, failed=len(errors), errors=errors)
        logger.info("Registration import committed success=%d failed=%d", result.success, result.failed)
        return result

    def commit_gift_updates(
        self,
        entries: Sequence[ParsedGiftUpdate],
        *,
        repository: StreamerRepository,
        db: Session,
    ) -> BatchImportResult:
        """
        Overwrite gift/time counters of each valid entry's streamer.

        Consolidated entries also set ``effective_days`` from their
        ``valid_days_count``. Submitted entries are re-checked first: unknown
        or malformed IDs, negative counters, inconsistent day counts and
        repeated IDs are rejected without touching the store.
        """

        success = 0
        errors: list[str] = []
        submitted = [entry for entry in entries if entry.is_valid]
        checked = reconcile_gift_updates(
            [(entry.streamer_id, _submitted_counters(entry)) for entry in submitted],
            repository.list_refs(),
            sub_mode=UpdateSubMode.UNIQUE,
            locale=self._message_locale,
        )
        for entry, verdict in zip(submitted, checked):
            if not verdict.is_valid:
                errors.append(
                    self._record_rejection(entry.streamer_name or "", entry.streamer_id, verdict.error)
                )
                continue
            try:
                repository.apply_counters(
                    CounterUpdate(
                        streamer_id=verdict.streamer_id,
                        luck_gifts=verdict.luck_gifts,
                        exclusive_gifts=verdict.exclusive_gifts,
                        minutes=verdict.minutes,
                        effective_days=entry.valid_days_count,
                    )
                )
                db.commit()
                success += 1
            except (StreamerRepositoryError, SQLAlchemyError) as exc:
                db.rollback()
                errors.append(self._record_rejection(verdict.streamer_name or "", entry.streamer_id, exc))

        result = BatchImportResult(success=success, failed=len(errors), errors=errors)
        logger.info("Gift update import committed success=%d failed=%d", result.success, result.failed)
        return result

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_size(self, text: str) -> None:
        line_count = sum(1 for line in text.splitlines() if line.strip())
        if line_count > self._max_input_lines:
            raise BatchImportInputError(
                f"Input has {line_count} lines; the limit is {self._max_input_lines}."
            )

    def _record_rejection(self, name: str, streamer_id: str, reason: object) -> str:
        if self._log_rejections:
            logger.warning(
                "Batch import submission rejected streamer_id=%s name=%r error=%s",
                streamer_id,
                name,
                reason,
            )
        label = f"{name} ({streamer_id})" if name else streamer_id
        return f"{label}: {reason}"


def _submitted_ref(entry: ParsedRegistration) -> StreamerRef | None:
    name = entry.name.strip()
    if not name or not is_valid_streamer_id(entry.streamer_id):
        return None
    return StreamerRef(name=name, streamer_id=entry.streamer_id)


def _submitted_counters(entry: ParsedGiftUpdate) -> GiftCounters | None:
    if not is_valid_streamer_id(entry.streamer_id):
        return None
    if min(entry.luck_gifts, entry.exclusive_gifts, entry.minutes) < 0:
        return None
    if entry.valid_days_count is not None and not 0 <= entry.valid_days_count <= (entry.days_count or 0):
        return None
    return GiftCounters(
        streamer_id=entry.streamer_id,
        luck_gifts=entry.luck_gifts,
        exclusive_gifts=entry.exclusive_gifts,
        minutes=entry.minutes,
    )


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_batch_import_service() -> BatchImportService:
    """
    Build and cache the batch import service with env-driven settings.
    """
    settings = get_batch_import_settings()
    return BatchImportService(
        valid_day_minutes=settings.valid_day_minutes,
        max_input_lines=settings.max_input_lines,
        message_locale=settings.message_locale,
        log_rejections=settings.log_rejections,
    )
