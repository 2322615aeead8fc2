"""
batch_import/reconciler.py

Validator and existing-set reconciler.

Every parsed candidate is annotated with a validity verdict and a reason,
using two lookups: the caller's existing-record snapshot and the entries
already accepted earlier in the same batch. The snapshot is read-only and
nothing here performs I/O.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from batch_import import messages
from batch_import.gift_update import leading_field
from batch_import.registration import INVALID_NAME_PREVIEW_CHARS
from batch_import.types import (
    GiftCounters,
    ImportAction,
    ImportErrorKind,
    ParsedGiftUpdate,
    ParsedRegistration,
    StreamerRef,
    UpdateSubMode,
)


def reconcile_registrations(
    candidates: Sequence[tuple[str, StreamerRef | None]],
    existing: Iterable[StreamerRef],
    *,
    locale: str | None = None,
) -> list[ParsedRegistration]:
    """
    Annotate registration candidates, one entry per ``(line, parsed)`` pair.

    Policy, first match wins:
      - unparseable line             -> invalid format
      - ID already in existing set   -> soft skip
      - name already in existing set -> soft skip
      - ID or name accepted earlier  -> duplicate in this batch
      - otherwise                    -> valid, tagged for creation
    """

    existing_refs = list(existing)
    existing_ids = {ref.streamer_id for ref in existing_refs}
    existing_names = {ref.name for ref in existing_refs}
    accepted_ids: set[str] = set()
    accepted_names: set[str] = set()

    results: list[ParsedRegistration] = []
    for line, parsed in candidates:
        if parsed is None:
            results.append(
                ParsedRegistration(
                    name=line[:INVALID_NAME_PREVIEW_CHARS],
                    streamer_id="",
                    is_valid=False,
                    error=messages.render("invalid_format", locale),
                    error_kind=ImportErrorKind.FORMAT_ERROR,
                )
            )
            continue

        if parsed.streamer_id in existing_ids:
            results.append(
                _rejected_registration(
                    parsed,
                    error=messages.render("id_exists", locale, streamer_id=parsed.streamer_id),
                    kind=ImportErrorKind.DUPLICATE_IN_EXISTING,
                )
            )
        elif parsed.name in existing_names:
            results.append(
                _rejected_registration(
                    parsed,
                    error=messages.render("name_exists", locale, name=parsed.name),
                    kind=ImportErrorKind.DUPLICATE_IN_EXISTING,
                )
            )
        elif parsed.streamer_id in accepted_ids or parsed.name in accepted_names:
            results.append(
                _rejected_registration(
                    parsed,
                    error=messages.render("duplicate_in_batch", locale),
                    kind=ImportErrorKind.DUPLICATE_IN_BATCH,
                )
            )
        else:
            accepted_ids.add(parsed.streamer_id)
            accepted_names.add(parsed.name)
            results.append(
                ParsedRegistration(
                    name=parsed.name,
                    streamer_id=parsed.streamer_id,
                    is_valid=True,
                    action=ImportAction.CREATE,
                )
            )

    return results


def reconcile_gift_updates(
    candidates: Sequence[tuple[str, GiftCounters | None]],
    existing: Iterable[StreamerRef],
    *,
    sub_mode: UpdateSubMode = UpdateSubMode.UNIQUE,
    locale: str | None = None,
) -> list[ParsedGiftUpdate]:
    """
    Annotate gift-update candidates, one entry per ``(line, parsed)`` pair.

    Unknown IDs are skipped. In ``unique`` sub-mode a repeated ID is a batch
    duplicate; in ``duplicate`` sub-mode repeats stay valid so the
    consolidator can merge them.
    """

    names_by_id = {ref.streamer_id: ref.name for ref in existing}
    seen_ids: set[str] = set()

    results: list[ParsedGiftUpdate] = []
    for line, parsed in candidates:
        if parsed is None:
            results.append(
                ParsedGiftUpdate(
                    streamer_id=leading_field(line),
                    luck_gifts=0,
                    exclusive_gifts=0,
                    minutes=0,
                    is_valid=False,
                    error=messages.render("invalid_format", locale),
                    error_kind=ImportErrorKind.FORMAT_ERROR,
                )
            )
            continue

        streamer_name = names_by_id.get(parsed.streamer_id)
        if streamer_name is None:
            results.append(
                _gift_update(
                    parsed,
                    is_valid=False,
                    error=messages.render("id_not_found", locale, streamer_id=parsed.streamer_id),
                    kind=ImportErrorKind.DUPLICATE_IN_EXISTING,
                )
            )
        elif sub_mode is UpdateSubMode.UNIQUE and parsed.streamer_id in seen_ids:
            results.append(
                _gift_update(
                    parsed,
                    is_valid=False,
                    error=messages.render("duplicate_in_batch", locale),
                    kind=ImportErrorKind.DUPLICATE_IN_BATCH,
                    streamer_name=streamer_name,
                )
            )
        else:
            seen_ids.add(parsed.streamer_id)
            results.append(_gift_update(parsed, is_valid=True, streamer_name=streamer_name))

    return results


def _rejected_registration(
    parsed: StreamerRef,
    *,
    error: str,
    kind: ImportErrorKind,
) -> ParsedRegistration:
    return ParsedRegistration(
        name=parsed.name,
        streamer_id=parsed.streamer_id,
        is_valid=False,
        error=error,
        error_kind=kind,
    )


def _gift_update(
    parsed: GiftCounters,
    *,
    is_valid: bool,
    error: str | None = None,
    kind: ImportErrorKind | None = None,
    streamer_name: str | None = None,
) -> ParsedGiftUpdate:
    return ParsedGiftUpdate(
        streamer_id=parsed.streamer_id,
        luck_gifts=parsed.luck_gifts,
        exclusive_gifts=parsed.exclusive_gifts,
        minutes=parsed.minutes,
        is_valid=is_valid,
        error=error,
        error_kind=kind,
        streamer_name=streamer_name,
    )
