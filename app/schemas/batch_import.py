"""
app/schemas/batch_import.py

Request and response schemas for batch import endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from batch_import import (
    BatchImportResult,
    ImportAction,
    ImportErrorKind,
    ImportMode,
    ImportSummary,
    ParsedGiftUpdate,
    ParsedRegistration,
    UpdateSubMode,
)


class BatchTextRequest(BaseModel):
    """
    Pasted import text.
    """

    text: str


class GiftUpdateTextRequest(BaseModel):
    text: str
    sub_mode: UpdateSubMode = UpdateSubMode.UNIQUE


class SpreadsheetImportRequest(BaseModel):
    """
    Shared spreadsheet link whose first tab is parsed like pasted text.
    """

    url: str = Field(..., min_length=1)
    mode: ImportMode = ImportMode.REGISTER
    sub_mode: UpdateSubMode = UpdateSubMode.UNIQUE


class ImportSummaryResponse(BaseModel):
    valid: int = Field(..., ge=0)
    invalid: int = Field(..., ge=0)
    total: int = Field(..., ge=0)

    @classmethod
    def from_summary(cls, summary: ImportSummary) -> "ImportSummaryResponse":
        return cls(valid=summary.valid, invalid=summary.invalid, total=summary.total)


class ParsedRegistrationResponse(BaseModel):
    name: str
    streamer_id: str
    is_valid: bool
    error: str | None = None
    error_kind: ImportErrorKind | None = None
    action: ImportAction | None = None


class ParsedGiftUpdateResponse(BaseModel):
    streamer_id: str
    luck_gifts: int = Field(..., ge=0)
    exclusive_gifts: int = Field(..., ge=0)
    minutes: int = Field(..., ge=0)
    is_valid: bool
    error: str | None = None
    error_kind: ImportErrorKind | None = None
    streamer_name: str | None = None
    days_count: int | None = Field(default=None, ge=0)
    valid_days_count: int | None = Field(default=None, ge=0)


class RegistrationPreviewResponse(BaseModel):
    entries: list[ParsedRegistrationResponse] = Field(default_factory=list)
    summary: ImportSummaryResponse


class GiftUpdatePreviewResponse(BaseModel):
    sub_mode: UpdateSubMode
    entries: list[ParsedGiftUpdateResponse] = Field(default_factory=list)
    summary: ImportSummaryResponse


class RegistrationCommitRequest(BaseModel):
    """
    Entries previously returned by the preview endpoint; only valid ones
    are submitted.
    """

    entries: list[ParsedRegistrationResponse] = Field(default_factory=list)


class GiftUpdateCommitRequest(BaseModel):
    sub_mode: UpdateSubMode = UpdateSubMode.UNIQUE
    entries: list[ParsedGiftUpdateResponse] = Field(default_factory=list)


class BatchImportResultResponse(BaseModel):
    success: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)
    errors: list[str] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: BatchImportResult) -> "BatchImportResultResponse":
        return cls(success=result.success, failed=result.failed, errors=list(result.errors))


def registration_to_response(entry: ParsedRegistration) -> ParsedRegistrationResponse:
    return ParsedRegistrationResponse(
        name=entry.name,
        streamer_id=entry.streamer_id,
        is_valid=entry.is_valid,
        error=entry.error,
        error_kind=entry.error_kind,
        action=entry.action,
    )


def gift_update_to_response(entry: ParsedGiftUpdate) -> ParsedGiftUpdateResponse:
    return ParsedGiftUpdateResponse(
        streamer_id=entry.streamer_id,
        luck_gifts=entry.luck_gifts,
        exclusive_gifts=entry.exclusive_gifts,
        minutes=entry.minutes,
        is_valid=entry.is_valid,
        error=entry.error,
        error_kind=entry.error_kind,
        streamer_name=entry.streamer_name,
        days_count=entry.days_count,
        valid_days_count=entry.valid_days_count,
    )


def registration_from_request(entry: ParsedRegistrationResponse) -> ParsedRegistration:
    return ParsedRegistration(**entry.model_dump())


def gift_update_from_request(entry: ParsedGiftUpdateResponse) -> ParsedGiftUpdate:
    return ParsedGiftUpdate(**entry.model_dump())
