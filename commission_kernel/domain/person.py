"""Person -- the party an operation belongs to."""

from __future__ import annotations

from dataclasses import dataclass

from commission_kernel.domain.settings import CommissionSettings
from commission_kernel.domain.types import PersonType
from commission_kernel.exceptions import UnsupportedPersonTypeError


@dataclass(frozen=True, slots=True)
class Person:
    """
    A party identified by id and type.

    Use ``Person.create`` for raw input: it checks the type against the
    configured allowed set.
    """

    id: int
    type: PersonType

    @classmethod
    def create(
        cls,
        person_id: int,
        person_type: str | PersonType,
        settings: CommissionSettings,
    ) -> Person:
        raw = person_type.value if isinstance(person_type, PersonType) else person_type
        if raw not in settings.person_types:
            raise UnsupportedPersonTypeError(str(raw), settings.person_types)
        try:
            kind = PersonType(raw)
        except ValueError:
            # Configured but unknown to the rules
            raise UnsupportedPersonTypeError(str(raw), settings.person_types) from None
        return cls(id=int(person_id), type=kind)

    @property
    def is_natural(self) -> bool:
        return self.type is PersonType.NATURAL

    @property
    def is_legal(self) -> bool:
        return self.type is PersonType.LEGAL
