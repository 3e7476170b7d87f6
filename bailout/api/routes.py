from fastapi import APIRouter, HTTPException
from bailout.db.session import SessionLocal
from bailout.bail.coordinator import submit_bail, get_status
from bailout.bail.creation import create_plan
from bailout.bail.schemas import PlanView
from bailout.core.errors import NotFound, InvalidParticipant, InvalidPlanRequest, TransientFailure
from bailout.db.models import PLAN_CANCELLED
from bailout.api.types import CreatePlanRequest, BailRequest


"""
FastAPI routes for the bail flow.
What it provides:
- Create plan endpoint (hands out share links)
- Bail endpoint
- Status endpoint (polled by participants)

And, the main purpose:
Expose the coordinator over HTTP. Unknown plans, expired plans and unknown
secrets all produce the same 404.
"""


NOT_FOUND_MSG = "Bailout plan not found or expired."
INTERNAL_MSG = "Internal server error."

router = APIRouter()


def _bail_message(view: PlanView) -> str:
    if view.status == PLAN_CANCELLED:
        return "Plans cancelled! Everyone bailed."
    return "Your bail request is registered."


@router.post("/plans", status_code=201)
async def api_create_plan(req: CreatePlanRequest):
    try:
        created = await create_plan(SessionLocal, req.description, req.num_participants)
    except InvalidPlanRequest as e:
        raise HTTPException(400, str(e))
    except TransientFailure:
        raise HTTPException(500, INTERNAL_MSG)
    return created.model_dump(by_alias=True)

@router.post("/bail")
async def api_bail(req: BailRequest):
    try:
        view = await submit_bail(SessionLocal, req.plan_id, req.participant_secret)
    except (NotFound, InvalidParticipant):
        raise HTTPException(404, NOT_FOUND_MSG)
    except TransientFailure:
        raise HTTPException(500, INTERNAL_MSG)
    return {"message": _bail_message(view), "plan": view.as_public()}

@router.get("/plans/{plan_id}/{participant_secret}")
async def api_status(plan_id: str, participant_secret: str):
    try:
        view = await get_status(SessionLocal, plan_id, participant_secret)
    except (NotFound, InvalidParticipant):
        raise HTTPException(404, NOT_FOUND_MSG)
    except TransientFailure:
        raise HTTPException(500, INTERNAL_MSG)
    return view.as_public()
