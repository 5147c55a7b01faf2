from dataclasses import dataclass, field
from enum import Enum


class ChangeType(Enum):
    ADD = "ADD"
    UPDATE = "UPDATE"
    REMOVE = "REMOVE"


@dataclass(frozen=True)
class TagChange:
    kind: ChangeType
    key: str
    value: str | None = None  # None for REMOVE


@dataclass(frozen=True)
class FeatureChange:
    """A suggested edit to one segment: what happens to it, and to which tags."""

    identifier: int
    kind: ChangeType
    tag_changes: tuple[TagChange, ...] = field(default_factory=tuple)

    @classmethod
    def set_tag(cls, identifier: int, key: str, value: str) -> "FeatureChange":
        return cls(identifier, ChangeType.UPDATE, (TagChange(ChangeType.UPDATE, key, value),))

    @classmethod
    def unset_tag(cls, identifier: int, key: str) -> "FeatureChange":
        return cls(identifier, ChangeType.UPDATE, (TagChange(ChangeType.REMOVE, key),))
