from pydantic import BaseModel, Field, model_validator
from typing import List, Literal, Optional


class MediaRef(BaseModel):
    url: str
    content_type: Optional[str] = None


class ContentPart(BaseModel):
    text: Optional[str] = None
    media: Optional[MediaRef] = None


class ChatTurn(BaseModel):
    role: Literal["user", "model"]
    content: List[ContentPart] = Field(default_factory=list)

    @property
    def text(self) -> str:
        return " ".join(p.text for p in self.content if p.text)

    @property
    def has_media(self) -> bool:
        return any(p.media is not None for p in self.content)


class ChatRequest(BaseModel):
    history: List[ChatTurn] = Field(default_factory=list)
    message: str = ""
    media: Optional[MediaRef] = None

    @model_validator(mode="after")
    def _not_empty(self) -> "ChatRequest":
        if not self.message.strip() and self.media is None:
            raise ValueError("A chat message needs text or an attachment.")
        return self


class ChatReply(BaseModel):
    message: str = Field(..., description="The assistant's reply, in the language of the user's last message")
