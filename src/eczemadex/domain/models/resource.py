from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from eczemadex.core.errors import InvalidInputError

TITLE_MAX_CHARS = 100
DESCRIPTION_MAX_CHARS = 500


class ResourceCategory(str, Enum):
    TREATMENT = "Treatment"
    PREVENTION = "Prevention"
    RESEARCH = "Research"
    DIET_ADVICE = "DietAdvice"
    TESTIMONIAL = "Testimonial"
    MEDICAL_ADVICE = "MedicalAdvice"

    @classmethod
    def parse(cls, value: ResourceCategory | str) -> ResourceCategory:
        """Resolve a member or its value (case-insensitive) to a category."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value.lower() == wanted:
                    return member
        allowed = ", ".join(member.value for member in cls)
        raise InvalidInputError(f"Unknown category {value!r}; expected one of: {allowed}")


@dataclass(slots=True)
class Resource:
    id: int
    title: str
    description: str
    category: ResourceCategory
    created_at: datetime
    updated_at: datetime
    verified: bool = False


@dataclass(slots=True)
class ResourcePatch:
    title: str | None = None
    description: str | None = None
    category: ResourceCategory | str | None = None


def validate_title(title: str) -> str:
    if not isinstance(title, str) or not title.strip():
        raise InvalidInputError("Title must not be empty.")
    if len(title) > TITLE_MAX_CHARS:
        raise InvalidInputError(f"Title must be at most {TITLE_MAX_CHARS} characters long.")
    return title


def validate_description(description: str) -> str:
    if not isinstance(description, str):
        raise InvalidInputError("Description must be text.")
    if len(description) > DESCRIPTION_MAX_CHARS:
        raise InvalidInputError(
            f"Description must be at most {DESCRIPTION_MAX_CHARS} characters long."
        )
    return description
