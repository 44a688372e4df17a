"""Task list domain model."""

from pydantic import BaseModel, ConfigDict, Field


class TaskList(BaseModel):
    """A named, ordered grouping of tasks."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int = Field(..., alias="_id", description="Row id assigned by SQLite")
    name: str = Field(..., description="List name (up to 255 characters)")
    order_no: int = Field(..., description="Display position")
