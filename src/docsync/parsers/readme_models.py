"""Pydantic models for documentation host API resources."""

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


class CategoryType(str, Enum):
    """Kind of a category. Guide is what the host assigns on creation."""

    GUIDE = "guide"
    REFERENCE = "reference"


class Category(BaseModel):
    """A navigational grouping of docs within one version."""

    id: Optional[str] = Field(default=None, alias="_id", description="Host-assigned ID")
    slug: str = Field(description="Host-assigned slug")
    title: str = Field(description="Display title")
    type: CategoryType = Field(default=CategoryType.GUIDE, description="Category kind")
    order: Optional[int] = Field(default=None, description="Display position")

    model_config = {
        "extra": "ignore",
        "populate_by_name": True,
    }


class ApiSpecification(BaseModel):
    """An uploaded OpenAPI document attached to a version."""

    id: str = Field(alias="_id", description="Host-assigned ID")
    title: Optional[str] = Field(default=None, description="Specification title")

    model_config = {
        "extra": "ignore",
        "populate_by_name": True,
    }


class UploadReport(BaseModel):
    """Outcome of one bulk-upload tool invocation."""

    path: Path = Field(description="Uploaded file or directory")
    version: str = Field(description="Target version")
    output: str = Field(default="", description="Combined tool output")
    soft_success: bool = Field(
        default=False,
        description="Accepted by the host although the tool reported an upload timeout",
    )
    attempts: int = Field(default=1, ge=1, description="Invocations needed to succeed")
