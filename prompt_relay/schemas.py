"""Pydantic schemas for relay credentials, requests and results"""
from pydantic import BaseModel, Field, ConfigDict, SecretStr
from typing import Optional, Dict, Any


class Credentials(BaseModel):
    """Endpoint and API key, read once per invocation"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    endpoint: str = Field(..., min_length=1, alias="url", description="Chat-completion API URL")
    api_key: SecretStr = Field(..., alias="apiKey", description="Opaque bearer token")


class ChatMessage(BaseModel):
    """Single role-tagged chat message"""
    model_config = ConfigDict(frozen=True)

    role: str = "user"
    content: str


class ChatRequest(BaseModel):
    """Single-turn chat-completion request"""
    model_config = ConfigDict(frozen=True)

    model: str = Field(..., description="Target model identifier")
    prompt: str = Field(..., description="User content of the single message")


class RelayResult(BaseModel):
    """
    Outcome of one relayed request.

    Success carries all five fields; failure carries only ``status``.
    A missing ``reply`` marks a non-success result.
    """
    api: Optional[str] = None
    model: Optional[str] = None
    prompt: Optional[str] = None
    status: int
    reply: Optional[str] = None

    @classmethod
    def failure(cls, status: int) -> "RelayResult":
        return cls(status=status)

    @classmethod
    def success(cls, api: str, request: ChatRequest, status: int, reply: str) -> "RelayResult":
        return cls(api=api, model=request.model, prompt=request.prompt, status=status, reply=reply)

    @property
    def ok(self) -> bool:
        return self.reply is not None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)

    def to_json(self) -> str:
        """Compact JSON encoding, field order api, model, prompt, status, reply"""
        return self.model_dump_json(exclude_none=True)
