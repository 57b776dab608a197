"""Input models for the Gmail tools."""

from typing import List, Optional

from pydantic import BaseModel, Field


class Attachment(BaseModel):
    path: str = Field(..., description="Local path of the file to attach")
    name: Optional[str] = Field(
        None, description="File name shown to the recipient, defaults to the file's name"
    )


class SendEmailInput(BaseModel):
    to: str = Field(..., description="Email recipient address")
    subject: str = Field(..., description="Email subject")
    body: str = Field(..., description="Email body content (plain text)")
    cc: Optional[str] = Field(None, description="CC recipients")
    attachments: List[Attachment] = Field(
        default_factory=list, description="Attachments with path and name fields"
    )


class ListUnreadInput(BaseModel):
    max_results: int = Field(
        10, ge=1, le=500, description="Maximum number of emails to retrieve"
    )


class SearchEmailsInput(BaseModel):
    query: str = Field(
        ..., description="Search query, using Gmail search syntax", examples=["from:me newer_than:7d"]
    )
    max_results: int = Field(
        10, ge=1, le=500, description="Maximum number of emails to retrieve"
    )


class MessageIdInput(BaseModel):
    message_id: str = Field(..., description="Gmail message ID")
