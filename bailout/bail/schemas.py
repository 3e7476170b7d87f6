from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ParticipantView(_CamelModel):
    name: str
    is_current_user: bool
    # None means "not visible to this caller"; dropped from the output entirely.
    wants_to_bail: Optional[bool] = None


class CurrentUserView(_CamelModel):
    name: str
    wants_to_bail: bool


class PlanView(_CamelModel):
    id: str
    description: Optional[str] = None
    status: str
    participants: List[ParticipantView] = []
    current_user: Optional[CurrentUserView] = None

    def as_public(self) -> dict:
        """
        JSON-ready dict in the wire shape.
        Hidden wantsToBail keys are omitted, currentUser/description stay (possibly null).
        """
        data = self.model_dump(by_alias=True, exclude_none=True)
        data.setdefault("description", None)
        data.setdefault("currentUser", None)
        return data


class CreatedParticipant(_CamelModel):
    name: str
    secret: str
    link: str


class CreatedPlan(_CamelModel):
    plan_id: str
    participants: List[CreatedParticipant]
