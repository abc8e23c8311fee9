from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ...models import Cast
from ...services import CastService
from .projects import load_project_or_404

router = APIRouter(tags=["casts"])


class CreateCastRequest(BaseModel):
    role: str
    actor_name: str = ""
    phone: str = ""


class UpdateCastRequest(BaseModel):
    role: str | None = None
    actor_name: str | None = None
    phone: str | None = None


def load_cast_or_404(cast_id: str) -> Cast:
    try:
        cast = CastService.load(cast_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    if not cast:
        raise HTTPException(status_code=404, detail="Cast not found")
    return cast


@router.get("/projects/{project_id}/casts", response_model=list[Cast])
async def list_casts(project_id: str) -> list[Cast]:
    """List a project's cast by role."""
    load_project_or_404(project_id)
    return CastService.list_for_project(project_id)


@router.post("/projects/{project_id}/casts", response_model=Cast)
async def create_cast(project_id: str, request: CreateCastRequest) -> Cast:
    load_project_or_404(project_id)
    return CastService.create(project_id, **request.model_dump())


@router.patch("/casts/{cast_id}", response_model=Cast)
async def update_cast(cast_id: str, request: UpdateCastRequest) -> Cast:
    cast = load_cast_or_404(cast_id)

    for field, value in request.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(cast, field, value)

    CastService.save(cast)
    return cast


@router.delete("/casts/{cast_id}")
async def delete_cast(cast_id: str) -> dict:
    load_cast_or_404(cast_id)
    CastService.delete(cast_id)
    return {"status": "deleted"}
