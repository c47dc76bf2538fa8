# 📄 File: flor/modules/ai_assistant/domain/wizard.py
# 🧭 Purpose (Layman Explanation):
# The step-by-step path of the "add plant with AI" screen: take a photo, see what plant it
# is, type a name if that fails, preview the care sheet and leave feedback.
# 🧪 Purpose (Technical Summary):
# Finite state machine with one frozen dataclass per step and a transition table keyed by
# (step, event type); step_graph() describes the graph for clients.
# 🔗 Dependencies:
# dataclasses, AI domain models, flor.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# flor.modules.ai_assistant.presentation.api.v1.ai (GET /ai/wizard/steps)

"""
AI plant wizard state machine.

The wizard walks a user from a photo to a saved AI plant:

    photo-upload -> identifying -> identification-result -> generating-care
                 -> care-preview -> feedback

with ``manual-name`` as the fallback whenever identification fails, is
rejected, or care generation fails. Each step is an immutable dataclass
that carries only the data gathered so far; ``transition`` returns the next
step or raises ``InvalidWizardTransition``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, List, Optional, Tuple, Type

from flor.shared.core.exceptions import ValidationError

from .models import CareInstructions, PlantIdentificationResult


class WizardStep(str, Enum):
    PHOTO_UPLOAD = "photo-upload"
    IDENTIFYING = "identifying"
    IDENTIFICATION_RESULT = "identification-result"
    MANUAL_NAME = "manual-name"
    GENERATING_CARE = "generating-care"
    CARE_PREVIEW = "care-preview"
    FEEDBACK = "feedback"


STEP_LABELS = {
    WizardStep.PHOTO_UPLOAD: "Photo",
    WizardStep.IDENTIFYING: "Identifying",
    WizardStep.IDENTIFICATION_RESULT: "Confirm",
    WizardStep.MANUAL_NAME: "Name",
    WizardStep.GENERATING_CARE: "Generating",
    WizardStep.CARE_PREVIEW: "Review",
    WizardStep.FEEDBACK: "Feedback",
}


class InvalidWizardTransition(Exception):
    def __init__(self, step: WizardStep, event: "WizardEvent"):
        self.step = step
        self.event = event
        super().__init__(f"Cannot handle {type(event).__name__} in step '{step.value}'")


# =============================================================================
# STATES
# =============================================================================

@dataclass(frozen=True)
class PhotoUpload:
    step: ClassVar[WizardStep] = WizardStep.PHOTO_UPLOAD


@dataclass(frozen=True)
class Identifying:
    step: ClassVar[WizardStep] = WizardStep.IDENTIFYING
    photo_url: Optional[str] = None


@dataclass(frozen=True)
class IdentificationResult:
    step: ClassVar[WizardStep] = WizardStep.IDENTIFICATION_RESULT
    identification: PlantIdentificationResult
    photo_url: Optional[str] = None


@dataclass(frozen=True)
class ManualName:
    step: ClassVar[WizardStep] = WizardStep.MANUAL_NAME
    photo_url: Optional[str] = None
    identification: Optional[PlantIdentificationResult] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class GeneratingCare:
    step: ClassVar[WizardStep] = WizardStep.GENERATING_CARE
    plant_name: str
    photo_url: Optional[str] = None
    identification: Optional[PlantIdentificationResult] = None


@dataclass(frozen=True)
class CarePreview:
    step: ClassVar[WizardStep] = WizardStep.CARE_PREVIEW
    plant_name: str
    care: CareInstructions
    photo_url: Optional[str] = None
    identification: Optional[PlantIdentificationResult] = None


@dataclass(frozen=True)
class Feedback:
    step: ClassVar[WizardStep] = WizardStep.FEEDBACK
    plant_id: str
    care: CareInstructions
    identification: Optional[PlantIdentificationResult] = None

    def snapshot(self) -> Dict[str, Any]:
        """AI output the feedback refers to."""
        return {
            "identification": self.identification.model_dump() if self.identification else None,
            "care_instructions": self.care.model_dump(mode="json"),
        }


WizardState = Any


# =============================================================================
# EVENTS
# =============================================================================

@dataclass(frozen=True)
class PhotoSelected:
    photo_url: Optional[str] = None


@dataclass(frozen=True)
class SkipIdentification:
    pass


@dataclass(frozen=True)
class IdentificationSucceeded:
    identification: PlantIdentificationResult


@dataclass(frozen=True)
class IdentificationFailed:
    error: str


@dataclass(frozen=True)
class IdentificationConfirmed:
    pass


@dataclass(frozen=True)
class IdentificationRejected:
    pass


@dataclass(frozen=True)
class NameEntered:
    name: str


@dataclass(frozen=True)
class CareGenerated:
    care: CareInstructions


@dataclass(frozen=True)
class CareFailed:
    error: str


@dataclass(frozen=True)
class PlantSaved:
    plant_id: str


@dataclass(frozen=True)
class Restart:
    pass


WizardEvent = Any

_TRANSITIONS: Dict[Tuple[WizardStep, Type], Tuple[WizardStep, Callable]] = {}


def _on(source: WizardStep, event_type: Type, target: WizardStep):
    def register(fn: Callable) -> Callable:
        _TRANSITIONS[(source, event_type)] = (target, fn)
        return fn
    return register


@_on(WizardStep.PHOTO_UPLOAD, PhotoSelected, WizardStep.IDENTIFYING)
def _start_identifying(state: PhotoUpload, event: PhotoSelected) -> Identifying:
    return Identifying(photo_url=event.photo_url)


@_on(WizardStep.PHOTO_UPLOAD, SkipIdentification, WizardStep.MANUAL_NAME)
def _skip_to_manual(state: PhotoUpload, event: SkipIdentification) -> ManualName:
    return ManualName()


@_on(WizardStep.IDENTIFYING, IdentificationSucceeded, WizardStep.IDENTIFICATION_RESULT)
def _show_identification(state: Identifying, event: IdentificationSucceeded) -> IdentificationResult:
    return IdentificationResult(identification=event.identification, photo_url=state.photo_url)


@_on(WizardStep.IDENTIFYING, IdentificationFailed, WizardStep.MANUAL_NAME)
def _identification_failed(state: Identifying, event: IdentificationFailed) -> ManualName:
    return ManualName(photo_url=state.photo_url, error=event.error)


@_on(WizardStep.IDENTIFICATION_RESULT, IdentificationConfirmed, WizardStep.GENERATING_CARE)
def _confirm_identification(state: IdentificationResult, event: IdentificationConfirmed) -> GeneratingCare:
    return GeneratingCare(
        plant_name=state.identification.display_name,
        photo_url=state.photo_url,
        identification=state.identification,
    )


@_on(WizardStep.IDENTIFICATION_RESULT, IdentificationRejected, WizardStep.MANUAL_NAME)
def _reject_identification(state: IdentificationResult, event: IdentificationRejected) -> ManualName:
    return ManualName(photo_url=state.photo_url, identification=state.identification)


@_on(WizardStep.MANUAL_NAME, NameEntered, WizardStep.GENERATING_CARE)
def _name_entered(state: ManualName, event: NameEntered) -> GeneratingCare:
    name = (event.name or "").strip()
    if not name:
        raise ValidationError("Plant name is required", field="name")
    return GeneratingCare(plant_name=name, photo_url=state.photo_url, identification=state.identification)


@_on(WizardStep.GENERATING_CARE, CareGenerated, WizardStep.CARE_PREVIEW)
def _care_generated(state: GeneratingCare, event: CareGenerated) -> CarePreview:
    return CarePreview(
        plant_name=state.plant_name,
        care=event.care,
        photo_url=state.photo_url,
        identification=state.identification,
    )


@_on(WizardStep.GENERATING_CARE, CareFailed, WizardStep.MANUAL_NAME)
def _care_failed(state: GeneratingCare, event: CareFailed) -> ManualName:
    return ManualName(photo_url=state.photo_url, identification=state.identification, error=event.error)


@_on(WizardStep.CARE_PREVIEW, PlantSaved, WizardStep.FEEDBACK)
def _plant_saved(state: CarePreview, event: PlantSaved) -> Feedback:
    return Feedback(plant_id=event.plant_id, care=state.care, identification=state.identification)


def start() -> PhotoUpload:
    return PhotoUpload()


def transition(state: WizardState, event: WizardEvent) -> WizardState:
    """
    Apply ``event`` to ``state`` and return the next step.

    ``Restart`` is accepted from every step.

    Raises:
        InvalidWizardTransition: If the step does not accept the event
        ValidationError: If a manually entered name is blank
    """
    if isinstance(event, Restart):
        return PhotoUpload()

    entry = _TRANSITIONS.get((state.step, type(event)))
    if entry is None:
        raise InvalidWizardTransition(state.step, event)

    _, handler = entry
    return handler(state, event)


def step_graph() -> List[Dict[str, Any]]:
    """Steps in wizard order with the events each accepts and where they lead."""
    graph = []
    for step in WizardStep:
        graph.append({
            "step": step.value,
            "label": STEP_LABELS[step],
            "transitions": [
                {"event": event_type.__name__, "to": target.value}
                for (source, event_type), (target, _) in _TRANSITIONS.items()
                if source == step
            ],
        })
    return graph
