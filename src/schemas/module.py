"""Learning module schema definitions."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ContentKind = Literal["text", "url", "markup"]


def _require_title(value: str) -> str:
    title = value.strip()
    if not title:
        raise ValueError("Module title cannot be empty")
    return title


class Module(BaseModel):
    """A teacher-authored unit of learning content."""

    id: str = Field(description="The unique identifier for the module.")
    title: str
    description: str = ""
    content: str = Field(
        default="",
        description="Plain text, an external URL, or embedded markup.",
    )
    teacher_id: str = Field(description="The user id of the owning teacher.")
    created_at: str = Field(description="ISO timestamp of creation.")

    @property
    def content_kind(self) -> ContentKind:
        """Classify the content the way the reader renders it."""
        if self.content.strip().startswith("http"):
            return "url"
        if "<" in self.content and ">" in self.content:
            return "markup"
        return "text"


class ModuleCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str
    description: str = ""
    content: str = ""
    teacher_id: str

    @field_validator("title")
    @classmethod
    def check_title(cls, value: str) -> str:
        return _require_title(value)


class ModuleUpdate(BaseModel):
    """Fields the owning teacher may edit."""

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = None

    @field_validator("title")
    @classmethod
    def check_title(cls, value: Optional[str]) -> Optional[str]:
        return _require_title(value) if value is not None else value


class ModuleRequest(BaseModel):
    """Body for creating a module; the owner comes from the signed-in user."""

    title: str
    description: str = ""
    content: str = ""


class ModuleResponse(Module):
    content_type: ContentKind

    @classmethod
    def from_module(cls, module: Module) -> "ModuleResponse":
        return cls(**module.model_dump(), content_type=module.content_kind)


class ImportedDocument(BaseModel):
    filename: Optional[str] = None
    content: str
