from typing import Literal, Optional

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    text: str


class ChatRequest(BaseModel):
    prompt: str = Field(min_length=1)
    module_id: Optional[str] = Field(
        default=None,
        description="Module whose content is passed to the tutor as context.",
    )


class ChatResponse(BaseModel):
    reply: ChatMessage
