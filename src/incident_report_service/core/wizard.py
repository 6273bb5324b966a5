"""
Step State Machine

Five-step linear wizard. Transitions never perform I/O; they return the
actions the caller has to carry out (generate a report, clear state).
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel

from incident_report_service.core.errors import GenerationInProgressError, InvalidStepError
from incident_report_service.core.validation import FINAL_STEP, FIRST_STEP, can_advance
from incident_report_service.models.incident import IncidentData

STEP_TITLES = {
    1: "Date & Time",
    2: "What Happened",
    3: "Who Was Involved",
    4: "Location & Evidence",
    5: "Review & Export",
}


class WizardAction(str, Enum):
    """Side effects requested by a transition"""
    GENERATE_REPORT = "generate_report"
    RESET_INCIDENT = "reset_incident"
    CLEAR_REPORT = "clear_report"
    CLEAR_CUSTOM_INPUTS = "clear_custom_inputs"
    RELEASE_EVIDENCE = "release_evidence"


class Transition(BaseModel):
    """Result of a transition: whether it moved, where to, and what to do next"""

    moved: bool
    step: int
    actions: Tuple[WizardAction, ...] = ()


class StepStateMachine:
    """Wizard position plus the rules for moving it"""

    def __init__(self, step: int = FIRST_STEP):
        if not FIRST_STEP <= step <= FINAL_STEP:
            raise InvalidStepError(f"Step out of range: {step}")
        self.step = step

    @property
    def title(self) -> str:
        return STEP_TITLES[self.step]

    @property
    def is_final(self) -> bool:
        return self.step == FINAL_STEP

    def advance(
        self,
        data: IncidentData,
        has_report: bool,
        generation_in_flight: bool = False,
        now: Optional[datetime] = None
    ) -> Transition:
        """Move forward one step if the current step is complete.

        Entering the final step asks for a report only when none exists and
        none is being generated, so re-entry never duplicates generation.
        """
        if self.is_final or not can_advance(self.step, data, now):
            return Transition(moved=False, step=self.step)

        self.step += 1
        actions: Tuple[WizardAction, ...] = ()
        if self.is_final and not has_report and not generation_in_flight:
            actions = (WizardAction.GENERATE_REPORT,)
        return Transition(moved=True, step=self.step, actions=actions)

    def retreat(self) -> Transition:
        """Move back one step; the report, if any, is kept"""
        if self.step == FIRST_STEP:
            return Transition(moved=False, step=self.step)
        self.step -= 1
        return Transition(moved=True, step=self.step)

    def restart(self) -> Transition:
        """Return to the first step and ask for all session state to be cleared"""
        moved = self.step != FIRST_STEP
        self.step = FIRST_STEP
        return Transition(
            moved=moved,
            step=self.step,
            actions=(
                WizardAction.RELEASE_EVIDENCE,
                WizardAction.RESET_INCIDENT,
                WizardAction.CLEAR_REPORT,
                WizardAction.CLEAR_CUSTOM_INPUTS,
            ),
        )

    def regenerate(self, generation_in_flight: bool) -> Transition:
        """Ask for a fresh report while in the final step.

        Raises:
            InvalidStepError: If not in the final step
            GenerationInProgressError: If a generation is already running
        """
        if not self.is_final:
            raise InvalidStepError("Reports can only be regenerated from the review step")
        if generation_in_flight:
            raise GenerationInProgressError("A report is already being generated")
        return Transition(moved=False, step=self.step, actions=(WizardAction.GENERATE_REPORT,))
