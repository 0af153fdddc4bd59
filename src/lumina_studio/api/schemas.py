"""Pydantic models for API request bodies."""

from pydantic import BaseModel, Field


class PromptUpdate(BaseModel):
    """Background description typed by the user."""

    prompt: str = Field(max_length=2000)


class ReplaceBody(BaseModel):
    """Optional prompt override for a replace dispatch."""

    prompt: str | None = Field(default=None, max_length=2000)
