"""Task domain model."""

from pydantic import BaseModel, ConfigDict, Field


class Task(BaseModel):
    """A to-do item belonging to a list, as stored in the tasks table."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int = Field(..., alias="_id", description="Row id assigned by SQLite")
    list_id: int = Field(..., description="Owning list id (not enforced by a foreign key)")
    description: str = Field(..., description="Task text")
    is_complete: bool = Field(default=False, description="Completion flag")
    created_at: str = Field(..., description="Creation timestamp set by SQLite (UTC, 'YYYY-MM-DD HH:MM:SS')")
