"""Gmail tools: send, list, search, read and label messages."""

import base64
import logging
import mimetypes
from email import encoders
from email.message import Message
from email.mime.base import MIMEBase
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from pathlib import Path
from typing import Any, Dict, List, Optional

from googleapiclient.errors import HttpError
from langfuse import observe

from util.config import GoogleOAuthSettings
from util.envelope import error_response, success_response
from util.google_auth import GoogleAuthError, build_service
from util.langfuse import tag_error

from .input_model import (
    Attachment,
    ListUnreadInput,
    MessageIdInput,
    SearchEmailsInput,
    SendEmailInput,
)

logger = logging.getLogger(__name__)

USER_ID = "me"
GMAIL_ERRORS = (HttpError, GoogleAuthError, OSError, ValueError)

_service = None


def get_gmail_service():
    """Get the Gmail API service (lazy initialization, runs OAuth on first use)."""
    global _service
    if _service is None:
        _service = build_service("gmail", "v1", GoogleOAuthSettings.for_gmail())
    return _service


def _attachment_part(attachment: Attachment) -> MIMEBase:
    path = Path(attachment.path)
    if not path.is_file():
        raise FileNotFoundError(f"Attachment file does not exist: {attachment.path}")

    content_type, encoding = mimetypes.guess_type(path.name)
    if content_type is None or encoding is not None:
        content_type = "application/octet-stream"
    main_type, sub_type = content_type.split("/", 1)

    part = MIMEBase(main_type, sub_type)
    part.set_payload(path.read_bytes())
    encoders.encode_base64(part)
    part.add_header(
        "Content-Disposition", "attachment", filename=attachment.name or path.name
    )
    return part


def build_message(
    to: str,
    subject: str,
    body: str,
    cc: Optional[str] = None,
    attachments: Optional[List[Attachment]] = None,
) -> Message:
    """Build a MIME message; multipart only when there are attachments."""
    if attachments:
        message = MIMEMultipart()
        message.attach(MIMEText(body, "plain", "utf-8"))
        for attachment in attachments:
            message.attach(_attachment_part(attachment))
    else:
        message = MIMEText(body, "plain", "utf-8")

    message["to"] = to
    message["subject"] = subject
    if cc:
        message["cc"] = cc
    return message


def encode_message(message: Message) -> Dict[str, str]:
    """Wrap a MIME message as a Gmail API message resource."""
    return {"raw": base64.urlsafe_b64encode(message.as_bytes()).decode("ascii")}


def _decode_body(data: str) -> str:
    padded = data + "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(padded).decode("utf-8", errors="replace")


def extract_content(part: Dict[str, Any]) -> str:
    """Collect the text/plain content of a message payload, depth first."""
    data = part.get("body", {}).get("data")
    if part.get("mimeType") == "text/plain" and data:
        return _decode_body(data)
    if part.get("parts"):
        return "\n".join(extract_content(p) for p in part["parts"])
    return ""


def _header(headers: List[Dict[str, str]], name: str) -> str:
    return next((h["value"] for h in headers if h.get("name") == name), "")


def get_email_content(service, message_id: str) -> Dict[str, Any]:
    full = (
        service.users()
        .messages()
        .get(userId=USER_ID, id=message_id, format="full")
        .execute()
    )
    payload = full.get("payload", {})
    headers = payload.get("headers", [])
    return {
        "id": full.get("id"),
        "thread_id": full.get("threadId"),
        "label_ids": full.get("labelIds", []),
        "snippet": full.get("snippet", ""),
        "subject": _header(headers, "Subject"),
        "from": _header(headers, "From"),
        "to": _header(headers, "To"),
        "date": _header(headers, "Date"),
        "content": extract_content(payload),
    }


def _list_messages(query: str, max_results: int) -> Dict[str, Any]:
    service = get_gmail_service()
    result = (
        service.users()
        .messages()
        .list(userId=USER_ID, q=query, maxResults=max_results)
        .execute()
    )
    emails = [get_email_content(service, m["id"]) for m in result.get("messages", [])]
    return {
        "emails": emails,
        "count": len(emails),
        "has_more": result.get("nextPageToken") is not None,
    }


def _failure(action: str, e: Exception, **context) -> Dict:
    logger.error("Gmail %s failed: %s", action, e)
    tag_error("gmail_error", str(e), action=action)
    return error_response(f"Failed to {action}: {e}", **context)


@observe(name="gmail_send_email")
def send_email(params: SendEmailInput) -> Dict:
    """Send an email with optional CC and attachments."""
    try:
        message = build_message(
            params.to, params.subject, params.body, params.cc, params.attachments
        )
        sent = (
            get_gmail_service()
            .users()
            .messages()
            .send(userId=USER_ID, body=encode_message(message))
            .execute()
        )
    except GMAIL_ERRORS as e:
        return _failure("send email", e, recipient=params.to)

    return success_response(
        message_id=sent.get("id"),
        thread_id=sent.get("threadId"),
        recipient=params.to,
        cc=params.cc,
        subject=params.subject,
        attachments_count=len(params.attachments),
    )


@observe(name="gmail_list_unread_emails")
def list_unread_emails(params: ListUnreadInput) -> Dict:
    try:
        listing = _list_messages("is:unread in:inbox", params.max_results)
    except GMAIL_ERRORS as e:
        return _failure("list unread emails", e)
    return success_response(**listing)


@observe(name="gmail_search_emails")
def search_emails(params: SearchEmailsInput) -> Dict:
    try:
        listing = _list_messages(params.query, params.max_results)
    except GMAIL_ERRORS as e:
        return _failure("search emails", e, query=params.query)
    return success_response(query=params.query, **listing)


def get_email(params: MessageIdInput) -> Dict:
    try:
        email = get_email_content(get_gmail_service(), params.message_id)
    except GMAIL_ERRORS as e:
        return _failure("get email", e, message_id=params.message_id)
    return success_response(email=email)


def _modify_labels(message_id: str, body: Dict[str, List[str]]) -> None:
    (
        get_gmail_service()
        .users()
        .messages()
        .modify(userId=USER_ID, id=message_id, body=body)
        .execute()
    )


def mark_as_read(params: MessageIdInput) -> Dict:
    try:
        _modify_labels(params.message_id, {"removeLabelIds": ["UNREAD"]})
    except GMAIL_ERRORS as e:
        return _failure("mark email as read", e, message_id=params.message_id)
    return success_response(message="Email marked as read", message_id=params.message_id)


def mark_as_unread(params: MessageIdInput) -> Dict:
    try:
        _modify_labels(params.message_id, {"addLabelIds": ["UNREAD"]})
    except GMAIL_ERRORS as e:
        return _failure("mark email as unread", e, message_id=params.message_id)
    return success_response(
        message="Email marked as unread", message_id=params.message_id
    )


def delete_email(params: MessageIdInput) -> Dict:
    """Move a message to the trash."""
    try:
        (
            get_gmail_service()
            .users()
            .messages()
            .trash(userId=USER_ID, id=params.message_id)
            .execute()
        )
    except GMAIL_ERRORS as e:
        return _failure("delete email", e, message_id=params.message_id)
    return success_response(
        message="Email moved to trash", message_id=params.message_id
    )
