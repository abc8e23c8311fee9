from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ...models import DEPARTMENT_LABELS, DepartmentType, Staff
from ...services import StaffService
from .projects import load_project_or_404

router = APIRouter(tags=["staff"])


class CreateStaffRequest(BaseModel):
    name: str
    department: DepartmentType = DepartmentType.OTHER
    position: str = ""
    phone: str = ""
    email: str | None = None


class UpdateStaffRequest(BaseModel):
    name: str | None = None
    department: DepartmentType | None = None
    position: str | None = None
    phone: str | None = None
    email: str | None = None


class StaffResponse(BaseModel):
    id: str
    project_id: str
    name: str
    department: DepartmentType
    department_label: str
    position: str
    phone: str
    email: str | None
    created_at: str
    updated_at: str

    @classmethod
    def from_staff(cls, staff: Staff) -> "StaffResponse":
        return cls(
            id=staff.id,
            project_id=staff.project_id,
            name=staff.name,
            department=staff.department,
            department_label=DEPARTMENT_LABELS[staff.department],
            position=staff.position,
            phone=staff.phone,
            email=staff.email,
            created_at=staff.created_at.isoformat(),
            updated_at=staff.updated_at.isoformat(),
        )


def load_staff_or_404(staff_id: str) -> Staff:
    try:
        staff = StaffService.load(staff_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    if not staff:
        raise HTTPException(status_code=404, detail="Staff not found")
    return staff


@router.get("/projects/{project_id}/staff", response_model=list[StaffResponse])
async def list_staff(project_id: str) -> list[StaffResponse]:
    """List a project's crew by department."""
    load_project_or_404(project_id)
    return [StaffResponse.from_staff(s) for s in StaffService.list_for_project(project_id)]


@router.post("/projects/{project_id}/staff", response_model=StaffResponse)
async def create_staff(project_id: str, request: CreateStaffRequest) -> StaffResponse:
    load_project_or_404(project_id)
    return StaffResponse.from_staff(StaffService.create(project_id, **request.model_dump()))


@router.patch("/staff/{staff_id}", response_model=StaffResponse)
async def update_staff(staff_id: str, request: UpdateStaffRequest) -> StaffResponse:
    staff = load_staff_or_404(staff_id)

    for field, value in request.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(staff, field, value)

    StaffService.save(staff)
    return StaffResponse.from_staff(staff)


@router.delete("/staff/{staff_id}")
async def delete_staff(staff_id: str) -> dict:
    load_staff_or_404(staff_id)
    StaffService.delete(staff_id)
    return {"status": "deleted"}
