from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, PrivateAttr, field_validator

from app.models.profile import Role
from app.utils.stage import UNKNOWN_STAGE, Stage, classify_stage


class MatchAttributes(BaseModel):
    """The matchable attributes of a profile.

    Used both for a requester's context when ranking and as the base of the
    profile write payload.  The stage descriptor is classified once, when
    the model is built.
    """

    primary_category: Optional[str] = None
    secondary_category: Optional[str] = None
    support_tags: list[str] = []
    interest_tags: list[str] = []
    age_bracket: Optional[str] = None
    stage_descriptor: Optional[str] = None
    recurrence: Optional[str] = None

    _stage: Stage = PrivateAttr(default=UNKNOWN_STAGE)

    def model_post_init(self, __context: Any) -> None:
        self._stage = classify_stage(self.stage_descriptor)

    @property
    def stage(self) -> Stage:
        return self._stage


class ProfileUpsert(MatchAttributes):
    role: Role
    first_name: str = Field(min_length=1, max_length=80)
    bio: Optional[str] = Field(None, max_length=200)
    profile_complete: bool = False
    available: Optional[bool] = None
    building: Optional[str] = None
    floor: Optional[str] = None


class AvailabilityUpdate(BaseModel):
    available: bool


class ProfileResponse(BaseModel):
    id: str
    role: Role
    first_name: str
    bio: Optional[str] = None
    profile_complete: bool = False
    primary_category: Optional[str] = None
    secondary_category: Optional[str] = None
    support_tags: list[str] = []
    interest_tags: list[str] = []
    age_bracket: Optional[str] = None
    stage_descriptor: Optional[str] = None
    recurrence: Optional[str] = None
    available: bool = True
    building: Optional[str] = None
    floor: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @field_validator("support_tags", "interest_tags", mode="before")
    @classmethod
    def _null_tags_as_empty(cls, v: Any) -> Any:
        return v or []

    @field_validator("available", mode="before")
    @classmethod
    def _null_means_available(cls, v: Any) -> bool:
        return v is not False

    @field_validator("profile_complete", mode="before")
    @classmethod
    def _null_means_incomplete(cls, v: Any) -> bool:
        return bool(v)
