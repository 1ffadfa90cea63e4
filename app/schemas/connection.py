from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.models.connection import RequestStatus


class ConnectionStatus(str, Enum):
    NONE = "none"
    PENDING_SENT = "pending_sent"
    PENDING_RECEIVED = "pending_received"
    CONNECTED = "connected"


class SendRequestPayload(BaseModel):
    sender_id: str = Field(min_length=1)
    sender_name: str = Field(min_length=1)
    receiver_id: str = Field(min_length=1)
    receiver_name: str = Field(min_length=1)


class RequestCreatedResponse(BaseModel):
    request_id: UUID


class ConnectionRequestResponse(BaseModel):
    id: UUID
    sender_id: str
    sender_name: str
    receiver_id: str
    receiver_name: str
    status: RequestStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ConnectionStatusResponse(BaseModel):
    status: ConnectionStatus
    request_id: Optional[UUID] = None
    chat_id: Optional[str] = None


class ChatIdResponse(BaseModel):
    chat_id: str
