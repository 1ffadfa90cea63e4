from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ChatCreate(BaseModel):
    user_a: str = Field(min_length=1)
    user_b: str = Field(min_length=1)
    name_a: str = Field(min_length=1)
    name_b: str = Field(min_length=1)


class ChatResponse(BaseModel):
    id: str
    participants: list[str]
    participant_names: dict[str, str]
    last_message: Optional[dict] = None
    last_message_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class LastMessageUpdate(BaseModel):
    text: str
    sender_id: str = Field(min_length=1)
    sender_name: str = Field(min_length=1)


class LastMessageAck(BaseModel):
    chat_id: str
    updated: bool


class OtherParticipantResponse(BaseModel):
    user_id: str
    first_name: str
