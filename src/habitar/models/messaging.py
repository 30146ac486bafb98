"""
Modelos de mensajería: hilos, participantes y mensajes.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from habitar.config import THREAD_TYPES


class MessageSender(BaseModel):
    email: Optional[str] = None
    role: Optional[str] = None


class Message(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: Optional[str] = None
    thread_id: str
    sender_id: str
    content: str
    created_at: Optional[str] = None
    read_at: Optional[str] = None
    sender: Optional[MessageSender] = None


class ThreadParticipant(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: Optional[str] = None
    thread_id: Optional[str] = None
    user_id: str
    role: str
    joined_at: Optional[str] = None
    left_at: Optional[str] = None
    is_muted: bool = False


class MessageThread(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: str
    title: Optional[str] = None
    thread_type: str = "general"
    listing_id: Optional[str] = None
    property_showing_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    participants: list[ThreadParticipant] = Field(default_factory=list)
    last_message: Optional[Message] = None
    unread_count: int = 0


class NewParticipant(BaseModel):
    user_id: str
    role: str


class ThreadCreateParams(BaseModel):
    """Parámetros para crear un hilo nuevo."""

    title: Optional[str] = None
    thread_type: str = "general"
    listing_id: Optional[str] = None
    property_showing_id: Optional[str] = None
    participants: list[NewParticipant] = Field(default_factory=list)
    initial_message: Optional[str] = None

    @field_validator("thread_type")
    @classmethod
    def known_thread_type(cls, value: str) -> str:
        if value not in THREAD_TYPES:
            raise ValueError(f"Tipo de hilo desconocido: {value}")
        return value
