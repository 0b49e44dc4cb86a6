from pydantic import BaseModel, Field
from typing import List


# Task schemas
class TaskCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    # already checked and de-duplicated by validation.clean_collaborators
    collaborators: List[str] = Field(default_factory=list, max_length=3)


class TaskView(BaseModel):
    """A task as shown on the home page, from one viewer's point of view."""

    id: int
    name: str
    description: str = ""
    owner_name: str = ""
    collaborators: List[str] = []
    is_complete: bool = False
    # presentation only; authorization goes through auth.permissions
    is_my_task: bool = False
