"""
Incident Session

Ties the data store, wizard, report generator and evidence storage together
for one user's report session, and executes the actions wizard transitions
ask for.
"""

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from incident_report_service.core.errors import (
    GenerationInProgressError,
    ReportNotReadyError,
    UnknownFieldError,
)
from incident_report_service.core.export_mapper import DocumentBlock, to_document_blocks
from incident_report_service.core.incident_store import IncidentStore
from incident_report_service.core.report_generator import GenerationStatus, ReportGenerator
from incident_report_service.core.validation import can_advance, date_time_validity
from incident_report_service.core.wizard import StepStateMachine, Transition, WizardAction
from incident_report_service.infrastructure.llm.client import ReportClient
from incident_report_service.infrastructure.storage.provider import StorageError, StorageProvider
from incident_report_service.models.incident import LIST_FIELDS, EvidenceFile, IncidentData
from incident_report_service.models.report import ReportData

logger = logging.getLogger(__name__)

# (filename, content, content type) as received from the file chooser
Upload = Tuple[str, bytes, Optional[str]]


def _display_timestamp(moment: datetime) -> str:
    return moment.strftime("%m/%d/%Y, %I:%M:%S %p")


class IncidentSession:
    """One incident report session: form state, wizard position and report"""

    def __init__(
        self,
        client: ReportClient,
        storage: StorageProvider,
        generation_timeout: Optional[float] = None
    ):
        self.store = IncidentStore()
        self.wizard = StepStateMachine()
        self.generator = ReportGenerator(client, timeout=generation_timeout)
        self.storage = storage
        self.report: Optional[ReportData] = None
        self.custom_inputs: Dict[str, str] = {field: "" for field in LIST_FIELDS}
        # Bumped on restart so a generation started before it cannot land afterwards
        self._epoch = 0

    # ── Derived state ────────────────────────────────────────────────────────

    @property
    def data(self) -> IncidentData:
        return self.store.data

    @property
    def step(self) -> int:
        return self.wizard.step

    @property
    def generation_status(self) -> GenerationStatus:
        return self.generator.status

    @property
    def is_generating(self) -> bool:
        return self.generator.in_flight

    def can_proceed(self, now: Optional[datetime] = None) -> bool:
        return can_advance(self.wizard.step, self.store.data, now)

    def date_validation_message(self, now: Optional[datetime] = None) -> str:
        data = self.store.data
        return date_time_validity(data.date, data.time, now).message

    # ── Form edits ───────────────────────────────────────────────────────────

    def set_field(self, field: str, value: str) -> IncidentData:
        return self.store.set_field(field, value)

    def toggle_item(self, field: str, item: str) -> IncidentData:
        return self.store.toggle_array_item(field, item)

    def set_custom_input(self, field: str, value: str) -> None:
        if field not in self.custom_inputs:
            raise UnknownFieldError(f"Not a list field: {field}")
        self.custom_inputs[field] = value

    def add_custom_item(self, field: str, value: Optional[str] = None) -> bool:
        """Append a free-text party/child, taking the buffered input when no value is given.

        The buffer is cleared only when the entry was actually added.
        """
        if field not in self.custom_inputs:
            raise UnknownFieldError(f"Not a list field: {field}")
        candidate = self.custom_inputs[field] if value is None else value
        added = self.store.add_custom_item(field, candidate)
        if added:
            self.custom_inputs[field] = ""
        return added

    async def add_evidence(self, uploads: Iterable[Upload]) -> List[EvidenceFile]:
        """Store uploaded files and append them as evidence in upload order"""
        records = []
        try:
            for filename, content, content_type in uploads:
                mime_type = content_type or "application/octet-stream"
                handle = await self.storage.acquire(filename, content, mime_type)
                records.append(EvidenceFile(
                    name=filename,
                    size=len(content),
                    mime_type=mime_type,
                    timestamp=_display_timestamp(datetime.now()),
                    handle=handle,
                ))
        except StorageError:
            # Nothing from a failed batch reaches the store, so release it here
            released = await self.storage.release_all(r.handle for r in records)
            logger.error(f"Evidence upload failed; released {released} partially stored file(s)")
            raise
        self.store.add_evidence(records)
        return records

    async def remove_evidence(self, index: int) -> EvidenceFile:
        """Drop one evidence entry and release its content.

        Raises:
            IndexError: If there is no evidence at ``index``
        """
        removed = self.store.remove_evidence(index)
        await self.storage.release(removed.handle)
        return removed

    # ── Navigation ───────────────────────────────────────────────────────────

    async def advance(self, now: Optional[datetime] = None) -> Transition:
        transition = self.wizard.advance(
            self.store.data,
            has_report=self.report is not None,
            generation_in_flight=self.is_generating,
            now=now,
        )
        await self._execute(transition)
        return transition

    def retreat(self) -> Transition:
        return self.wizard.retreat()

    async def restart(self) -> Transition:
        transition = self.wizard.restart()
        await self._execute(transition)
        return transition

    async def regenerate(self) -> Transition:
        transition = self.wizard.regenerate(generation_in_flight=self.is_generating)
        await self._execute(transition)
        return transition

    async def _execute(self, transition: Transition) -> None:
        for action in transition.actions:
            if action == WizardAction.GENERATE_REPORT:
                await self._generate_report()
            elif action == WizardAction.RELEASE_EVIDENCE:
                await self.storage.release_all(e.handle for e in self.store.data.evidence)
            elif action == WizardAction.RESET_INCIDENT:
                self.store.reset()
                self._epoch += 1
            elif action == WizardAction.CLEAR_REPORT:
                self.report = None
                self.generator.reset()
            elif action == WizardAction.CLEAR_CUSTOM_INPUTS:
                self.custom_inputs = {field: "" for field in LIST_FIELDS}

    async def _generate_report(self) -> None:
        while True:
            epoch = self._epoch
            snapshot = self.store.data
            self.report = None
            report = await self.generator.generate(snapshot)
            if epoch == self._epoch:
                self.report = report
                return

            logger.info("Session restarted during generation; discarding report")
            self.generator.reset()
            # Review was re-entered while the stale call ran and skipped generation
            if not self.wizard.is_final or self.report is not None:
                return
            logger.info("Review step reached after restart; generating for current data")

    # ── Export ───────────────────────────────────────────────────────────────

    def export_blocks(self) -> List[DocumentBlock]:
        """Document blocks for the current report.

        Raises:
            GenerationInProgressError: If a report is being generated
            ReportNotReadyError: If no report exists yet
        """
        if self.is_generating:
            raise GenerationInProgressError("Export is unavailable while a report is being generated")
        if self.report is None:
            raise ReportNotReadyError("No report has been generated")
        return to_document_blocks(self.store.data, self.report)
