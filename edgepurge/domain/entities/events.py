"""Content-change events received from the surrounding system's event bus."""

from dataclasses import dataclass

from edgepurge.domain.enums import ObjectKind
from edgepurge.domain.exceptions import ValidationException


@dataclass(frozen=True)
class PostChangedEvent:
    """A post was created, updated, trashed, deleted or scheduled-published."""

    object_id: int
    action: str

    kind = ObjectKind.POST

    def __post_init__(self) -> None:
        if not self.action:
            raise ValidationException("Event action is required", field="action")


@dataclass(frozen=True)
class TermChangedEvent:
    """A term was edited or deleted."""

    term_id: int
    action: str
    term_taxonomy_id: int = 0
    taxonomy: str = ""

    kind = ObjectKind.TERM

    def __post_init__(self) -> None:
        if not self.action:
            raise ValidationException("Event action is required", field="action")


ContentChangedEvent = PostChangedEvent | TermChangedEvent
