"""
API request and response schemas.
What it defines:
- Input payloads (camelCase on the wire)
- Response envelopes

And, the main purpose:
Ensure structured communication between client and server.
"""


from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional

from bailout.bail.policy import MIN_PARTICIPANTS


class _Request(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreatePlanRequest(_Request):
    description: Optional[str] = None
    # Range is checked by creation so the error matches the documented 400.
    num_participants: int = MIN_PARTICIPANTS

class BailRequest(_Request):
    plan_id: str = Field(..., min_length=1)
    participant_secret: str = Field(..., min_length=1)
