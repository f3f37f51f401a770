"""
Turning AI-extracted routines into stored plans.

Flow for one upload:
1. validate_upload() rejects unsupported or oversized files up front
2. the AI extractor returns ExtractedRoutine objects
3. to_drafts() gives each one a temporary id and today's date
4. the user renames / re-dates drafts with update_draft()
5. finalize() produces WorkoutPlan objects for the Plan Store

ImportSession wraps steps 3-5 for a host UI and discards AI responses that
arrive after the user cleared or replaced the selected file.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Iterable

from .config import ACCEPTED_MIME_TYPES, MAX_UPLOAD_BYTES, NEUTRAL_TIME_OF_DAY
from .errors import ValidationFailure
from .models import DraftRoutine, ExtractedRoutine, WorkoutPlan, new_id, validate_iso_date

logger = logging.getLogger(__name__)

DRAFT_FIELDS = ("routine_name", "selected_date")


def validate_upload(filename: str, size: int, mime_type: str | None) -> None:
    """
    Check an uploaded document before it is sent for extraction.

    Raises:
        ValidationFailure: If the type is not JPEG/PNG/WEBP/PDF or the file
            is larger than 20 MB
    """
    if mime_type not in ACCEPTED_MIME_TYPES:
        raise ValidationFailure(
            f"Unsupported format for {filename}. Use JPG, PNG, WEBP or PDF."
        )
    if size > MAX_UPLOAD_BYTES:
        raise ValidationFailure(
            f"{filename} is too large ({size / 1024 / 1024:.1f} MB). Max 20 MB."
        )
    if size == 0:
        raise ValidationFailure(f"{filename} is empty.")


def to_drafts(extracted: Iterable[ExtractedRoutine], today: date | str) -> list[DraftRoutine]:
    """Give every extracted routine a temporary id and ``today`` as its date."""
    day = today if isinstance(today, str) else today.isoformat()
    return [
        DraftRoutine(
            id=new_id(),
            routine_name=routine.routine_name,
            selected_date=day,
            exercises=list(routine.exercises),
        )
        for routine in extracted
    ]


def update_draft(
    drafts: list[DraftRoutine], draft_id: str, field: str, value: str
) -> list[DraftRoutine]:
    """
    Return drafts with one field of the draft ``draft_id`` replaced.

    Unknown ids leave the list unchanged.

    Raises:
        ValueError: If ``field`` is not routine_name/selected_date, or the
            date is not YYYY-MM-DD
    """
    if field not in DRAFT_FIELDS:
        raise ValueError(f"Draft field must be one of {DRAFT_FIELDS}, got '{field}'")
    if field == "selected_date":
        validate_iso_date(value)
    return [replace(d, **{field: value}) if d.id == draft_id else d for d in drafts]


def finalize(drafts: Iterable[DraftRoutine]) -> list[WorkoutPlan]:
    """
    Build permanent plans from confirmed drafts.

    Each plan gets a new id and is dated at noon of its selected day.
    Exercises are copied as they are, with a uid assigned where missing.
    """
    return [
        WorkoutPlan(
            id=new_id(),
            title=d.routine_name,
            date_created=f"{d.selected_date}T{NEUTRAL_TIME_OF_DAY}",
            exercises=[ex.with_uid() for ex in d.exercises],
        )
        for d in drafts
    ]


class ImportSession:
    """
    Draft state for one uploaded document.

    ``begin()`` hands out a token for the extraction request; a result is
    only accepted if its token is still current, so clearing or replacing
    the selection makes late responses harmless.
    """

    def __init__(self) -> None:
        self.drafts: list[DraftRoutine] | None = None
        self._token = 0
        self._pending: int | None = None

    @property
    def in_flight(self) -> bool:
        return self._pending is not None

    def begin(self) -> int:
        """Start an extraction request; previous drafts are dropped."""
        self._token += 1
        self._pending = self._token
        self.drafts = None
        return self._token

    def accept(
        self, token: int, extracted: Iterable[ExtractedRoutine], today: date | str
    ) -> bool:
        """Store drafts for ``token``; False (and ignored) if it is stale."""
        if token != self._pending:
            logger.info("Discarding stale extraction result (token %d)", token)
            return False
        self._pending = None
        self.drafts = to_drafts(extracted, today)
        return True

    def fail(self, token: int) -> None:
        """Mark the request for ``token`` as finished without drafts."""
        if token == self._pending:
            self._pending = None

    def update(self, draft_id: str, field: str, value: str) -> None:
        if self.drafts is not None:
            self.drafts = update_draft(self.drafts, draft_id, field, value)

    def finalize(self) -> list[WorkoutPlan]:
        """Produce the plans and clear the drafts."""
        if not self.drafts:
            return []
        plans = finalize(self.drafts)
        self.drafts = None
        return plans

    def cancel(self) -> None:
        """Discard drafts and forget any in-flight request."""
        self.drafts = None
        self._pending = None
        self._token += 1
