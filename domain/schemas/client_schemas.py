"""Schemas for client profiles fetched from the nutrition platform"""

from pydantic import BaseModel, Field
from typing import List, Optional

from domain.enums import DietPreference


class ClientProfile(BaseModel):
    """Client record used to drive an audit.

    The restriction lists are safety-relevant: they are validated strictly
    and never defaulted when the upstream sends something of the wrong type.
    """

    user_id: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    mobile_number: str = ""
    age: int = 0
    gender: str = "Unknown"

    allergies: List[str] = Field(default_factory=list)
    medical_conditions: List[str] = Field(default_factory=list)
    food_aversions: List[str] = Field(default_factory=list)
    diet_preference: DietPreference = DietPreference.VEG

    current_weight: float = 0
    target_weight: float = 0
    program_start_weight: float = 0
    assessment_start_weight: float = 0

    model_config = {"from_attributes": True}

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class ClientProfileOverride(BaseModel):
    """Manual corrections applied over the fetched profile for one audit"""

    allergies: Optional[List[str]] = None
    medical_conditions: Optional[List[str]] = None
    food_aversions: Optional[List[str]] = None
    diet_preference: Optional[DietPreference] = None
    age: Optional[int] = Field(None, ge=0)
    gender: Optional[str] = None

    def apply(self, profile: ClientProfile) -> ClientProfile:
        return profile.model_copy(update=self.model_dump(exclude_none=True))
