from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ...models import Project, ProjectStatus
from ...services import ProjectService

router = APIRouter(prefix="/projects", tags=["projects"])


class CreateProjectRequest(BaseModel):
    title: str
    director: str = ""
    producer: str = ""
    assistant_director: str = ""
    description: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    status: ProjectStatus = ProjectStatus.PREP


class UpdateProjectRequest(BaseModel):
    title: str | None = None
    director: str | None = None
    producer: str | None = None
    assistant_director: str | None = None
    description: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    status: ProjectStatus | None = None


class ProjectResponse(BaseModel):
    id: str
    title: str
    director: str
    producer: str
    assistant_director: str
    description: str | None
    start_date: str | None
    end_date: str | None
    status: ProjectStatus
    created_at: str
    updated_at: str

    @classmethod
    def from_project(cls, project: Project) -> "ProjectResponse":
        return cls(
            id=project.id,
            title=project.title,
            director=project.director,
            producer=project.producer,
            assistant_director=project.assistant_director,
            description=project.description,
            start_date=project.start_date,
            end_date=project.end_date,
            status=project.status,
            created_at=project.created_at.isoformat(),
            updated_at=project.updated_at.isoformat(),
        )


def load_project_or_404(project_id: str) -> Project:
    try:
        project = ProjectService.load(project_id)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.post("", response_model=ProjectResponse)
async def create_project(request: CreateProjectRequest) -> ProjectResponse:
    """Create a new project."""
    fields = request.model_dump(exclude={"title"})
    project = ProjectService.create(request.title, **fields)
    return ProjectResponse.from_project(project)


@router.get("", response_model=list[ProjectResponse])
async def list_projects() -> list[ProjectResponse]:
    """List all projects."""
    projects = ProjectService.list_all()
    return [ProjectResponse.from_project(p) for p in projects]


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: str) -> ProjectResponse:
    """Get a project by ID."""
    return ProjectResponse.from_project(load_project_or_404(project_id))


@router.delete("/{project_id}")
async def delete_project(project_id: str) -> dict:
    """Delete a project and its schedules."""
    load_project_or_404(project_id)
    ProjectService.delete(project_id)
    return {"status": "deleted"}


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(project_id: str, request: UpdateProjectRequest) -> ProjectResponse:
    """Update a project's details."""
    project = load_project_or_404(project_id)

    for field, value in request.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(project, field, value)

    ProjectService.save(project)
    return ProjectResponse.from_project(project)
