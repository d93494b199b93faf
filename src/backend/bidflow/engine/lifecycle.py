"""
Project lifecycle state machine.

A project is tracked in two independent views: the general (estimating)
view and the APM view a project joins once it is sent to APM. The store
keeps five booleans; the engine works with one explicit state per view
and converts at the persistence boundary through ``from_flags`` and
``to_flags`` only.
"""

import enum
from dataclasses import dataclass, fields, replace

from bidflow.core.exceptions import InvalidStateException


class LifecycleView(str, enum.Enum):
    GENERAL = "general"
    APM = "apm"


class GeneralState(str, enum.Enum):
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    ARCHIVED = "archived"


class ApmState(str, enum.Enum):
    NOT_ENROLLED = "not_enrolled"
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    ARCHIVED = "archived"


@dataclass(frozen=True)
class ProjectFlags:
    """Lifecycle flags exactly as stored on a project row."""

    archived: bool = False
    on_hold: bool = False
    sent_to_apm: bool = False
    apm_archived: bool = False
    apm_on_hold: bool = False


@dataclass(frozen=True)
class LifecycleState:
    general: GeneralState = GeneralState.ACTIVE
    apm: ApmState = ApmState.NOT_ENROLLED


@dataclass(frozen=True)
class FlagPatch:
    """
    Flag values to write for one transition.

    Fields left as None are not touched. Turning one flag of a view on
    requires turning its partner off in the same patch, so applying a
    patch can never leave a view both archived and on hold.
    """

    archived: bool | None = None
    on_hold: bool | None = None
    sent_to_apm: bool | None = None
    apm_archived: bool | None = None
    apm_on_hold: bool | None = None

    def __post_init__(self) -> None:
        _check_pair(self.archived, self.on_hold, "archived", "on_hold")
        _check_pair(self.apm_archived, self.apm_on_hold, "apm_archived", "apm_on_hold")

    def as_update(self) -> dict[str, bool]:
        """Column/value mapping for the store, without untouched fields."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}

    def apply(self, flags: ProjectFlags) -> ProjectFlags:
        return replace(flags, **self.as_update())

    @property
    def is_empty(self) -> bool:
        return not self.as_update()


def _check_pair(first: bool | None, second: bool | None, first_name: str, second_name: str) -> None:
    if first and second:
        raise InvalidStateException(f"{first_name} and {second_name} cannot both be set")
    if first and second is not False:
        raise InvalidStateException(f"Setting {first_name} requires clearing {second_name}")
    if second and first is not False:
        raise InvalidStateException(f"Setting {second_name} requires clearing {first_name}")


@dataclass(frozen=True)
class ProjectSnapshot:
    """The parts of a project the lifecycle engine reads."""

    id: int
    name: str = ""
    flags: ProjectFlags = ProjectFlags()

    @property
    def state(self) -> LifecycleState:
        return from_flags(self.flags)


def derive_general_state(flags: ProjectFlags) -> GeneralState:
    # Rows written before the flags were kept exclusive may carry both; archived wins
    if flags.archived:
        return GeneralState.ARCHIVED
    if flags.on_hold:
        return GeneralState.ON_HOLD
    return GeneralState.ACTIVE


def derive_apm_state(flags: ProjectFlags) -> ApmState:
    if not flags.sent_to_apm:
        return ApmState.NOT_ENROLLED
    if flags.apm_archived:
        return ApmState.ARCHIVED
    if flags.apm_on_hold:
        return ApmState.ON_HOLD
    return ApmState.ACTIVE


def from_flags(flags: ProjectFlags) -> LifecycleState:
    return LifecycleState(general=derive_general_state(flags), apm=derive_apm_state(flags))


def to_flags(state: LifecycleState) -> ProjectFlags:
    return ProjectFlags(
        archived=state.general is GeneralState.ARCHIVED,
        on_hold=state.general is GeneralState.ON_HOLD,
        sent_to_apm=state.apm is not ApmState.NOT_ENROLLED,
        apm_archived=state.apm is ApmState.ARCHIVED,
        apm_on_hold=state.apm is ApmState.ON_HOLD,
    )


_GENERAL_PATCHES = {
    GeneralState.ACTIVE: FlagPatch(archived=False, on_hold=False),
    GeneralState.ON_HOLD: FlagPatch(archived=False, on_hold=True),
    GeneralState.ARCHIVED: FlagPatch(archived=True, on_hold=False),
}

_APM_PATCHES = {
    ApmState.ACTIVE: FlagPatch(apm_archived=False, apm_on_hold=False),
    ApmState.ON_HOLD: FlagPatch(apm_archived=False, apm_on_hold=True),
    ApmState.ARCHIVED: FlagPatch(apm_archived=True, apm_on_hold=False),
}

SEND_TO_APM = FlagPatch(sent_to_apm=True)
REMOVE_FROM_APM = FlagPatch(sent_to_apm=False, apm_archived=False, apm_on_hold=False)


def request_transition(
    flags: ProjectFlags,
    target: GeneralState | ApmState,
    view: LifecycleView = LifecycleView.GENERAL,
    *,
    project_id: int | None = None,
) -> FlagPatch:
    """
    Build the flag patch that moves a project to ``target`` in ``view``.

    The patch always sets every flag of the view, so re-applying it to an
    already transitioned project writes the same values again.

    Raises:
        InvalidStateException: target does not belong to the view, or an
            APM transition is requested for a project not sent to APM
    """
    if view is LifecycleView.GENERAL:
        if not isinstance(target, GeneralState):
            raise InvalidStateException(
                f"'{target.value}' is not a general lifecycle state", project_id
            )
        return _GENERAL_PATCHES[target]

    if not isinstance(target, ApmState):
        raise InvalidStateException(f"'{target.value}' is not an APM lifecycle state", project_id)
    if target is ApmState.NOT_ENROLLED:
        return remove_from_apm(flags)
    if not flags.sent_to_apm:
        raise InvalidStateException(
            "Project has not been sent to APM",
            project_id,
            {"requested_state": target.value},
        )
    return _APM_PATCHES[target]


def send_to_apm(flags: ProjectFlags) -> FlagPatch:
    """Enroll a project in the APM view; general-view flags are left alone."""
    return SEND_TO_APM


def remove_from_apm(flags: ProjectFlags) -> FlagPatch:
    """Return a project to general-view tracking only."""
    return REMOVE_FROM_APM


def available_transitions(flags: ProjectFlags, view: LifecycleView) -> list[GeneralState | ApmState]:
    """
    Targets a UI may offer for a project in the given view.

    In the APM view an unenrolled project can only be sent to APM, which
    is reported as ``ApmState.ACTIVE``.
    """
    if view is LifecycleView.GENERAL:
        current = derive_general_state(flags)
        return [state for state in GeneralState if state is not current]

    current_apm = derive_apm_state(flags)
    if current_apm is ApmState.NOT_ENROLLED:
        return [ApmState.ACTIVE]
    return [state for state in ApmState if state is not current_apm]
