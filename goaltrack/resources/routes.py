"""Learning resources attached to objectives."""

from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..auth import get_current_user
from ..database import Database
from ..dependencies import get_db, success
from ..errors import AuthenticationError, NotFoundError
from ..merge import KEEP_IF_FALSY, NULLABLE, merge_with_defaults
from ..objectives.routes import get_owned_objective

RESOURCE_POLICIES = {
    "title": KEEP_IF_FALSY,
    "type": KEEP_IF_FALSY,
    "url": KEEP_IF_FALSY,
    "description": NULLABLE,
}

objective_resources = APIRouter(
    prefix="/api/objectives/{objective_id}/resources", tags=["resources"]
)
router = APIRouter(prefix="/api/resources", tags=["resources"])


class ResourceCreate(BaseModel):
    title: str
    type: str
    url: str
    description: Optional[str] = None


class ResourceUpdate(BaseModel):
    title: Optional[str] = None
    type: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None


def get_owned_resource(db: Database, resource_id: str, user: dict) -> dict[str, Any]:
    """Load a resource whose parent objective belongs to ``user``."""
    resource = db.get_resource(resource_id)
    if resource is None:
        raise NotFoundError("Resource not found")
    objective = db.get_objective(resource["objective_id"])
    if objective is None or objective.user_id != user["id"]:
        raise AuthenticationError("Not authorized to access this resource")
    return resource


@objective_resources.get("")
async def list_resources(
    objective_id: str,
    db: Database = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    get_owned_objective(db, objective_id, user)
    resources = db.list_resources(objective_id)
    return success(resources, count=len(resources))


@objective_resources.post("", status_code=201)
async def create_resource(
    objective_id: str,
    body: ResourceCreate,
    db: Database = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    get_owned_objective(db, objective_id, user)
    return success(db.create_resource(objective_id, body.model_dump()))


@router.get("/{resource_id}")
async def get_resource(
    resource_id: str,
    db: Database = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    return success(get_owned_resource(db, resource_id, user))


@router.put("/{resource_id}")
async def update_resource(
    resource_id: str,
    body: ResourceUpdate,
    db: Database = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    resource = get_owned_resource(db, resource_id, user)
    merged = merge_with_defaults(
        resource, body.model_dump(exclude_unset=True), RESOURCE_POLICIES
    )
    return success(db.update_resource(resource_id, merged))


@router.delete("/{resource_id}")
async def delete_resource(
    resource_id: str,
    db: Database = Depends(get_db),
    user: dict = Depends(get_current_user),
):
    get_owned_resource(db, resource_id, user)
    db.delete_resource(resource_id)
    return success({})
