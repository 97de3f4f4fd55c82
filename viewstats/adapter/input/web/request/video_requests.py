from pydantic import BaseModel, Field


class AddVideoRequest(BaseModel):
    id: str = Field(..., description="11-character YouTube video id")
    name: str
    description: str | None = None
    color: str | None = Field(default=None, description="Chart line color, e.g. #0070f3")


class UpdateVideoRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    color: str | None = None
