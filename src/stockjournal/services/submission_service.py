from __future__ import annotations

import logging

from stockjournal.domain.errors import SubmissionError, ValidationError
from stockjournal.domain.models import JournalEntry, SubmitAction
from stockjournal.repositories.contracts import EntryDraft, StockJournalGateway

LOGGER_NAME = "stockjournal.submissions"

log = logging.getLogger(LOGGER_NAME)


class SubmissionService:
    def __init__(self, gateway: StockJournalGateway):
        self.gateway = gateway

    def submit(self, draft: EntryDraft, action: SubmitAction | str = SubmitAction.SAVE) -> JournalEntry:
        """
        Validate locally, then create (or update, for an existing draft).

        ``save`` leaves the entry a draft; ``save_and_post`` asks the server to
        post it in the same call. Nothing is sent while validation fails.
        """
        action = SubmitAction(action)
        issues = draft.validate()
        if issues:
            log.info("entry_rejected_locally entry_type=%s issues=%s", draft.entry_type.value, len(issues))
            raise ValidationError(issues)

        payload = draft.to_payload(action)
        try:
            if draft.entry_id is None:
                entry = self.gateway.create(payload)
            else:
                entry = self.gateway.update(draft.entry_id, payload)
        except SubmissionError as e:
            log.warning(
                "entry_submit_failed entry_id=%s entry_type=%s action=%s error=%s",
                draft.entry_id, draft.entry_type.value, action.value, e,
            )
            raise

        log.info(
            "entry_submitted entry_id=%s number=%s entry_type=%s action=%s status=%s items=%s",
            entry.id, entry.journal_number, entry.entry_type.value, action.value, entry.status.value, len(payload["items"]),
        )
        return entry
