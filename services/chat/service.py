"""Chat Service - HTTP API for the municipal complaint assistant."""
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))


from datetime import datetime
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, model_validator
from typing import List, Optional
import time
from nagarassist.services.assistant import ChatAssistant, TurnInProgress
from nagarassist.services.auth import AuthService, LoginError, User
from nagarassist.services.complaint import Complaint, ComplaintStatus, IssueCategory
from nagarassist.services.feedback import FeedbackService, InvalidFeedback
from nagarassist.services.images import PROFILE_IMAGE_MAX_BYTES, ImageRejected, decode_upload
from nagarassist.services.messages import Message, MessageKind
from nagarassist.services.notification import build_handoff_url, compose_handoff_message
from nagarassist.utils.logger import ServiceLogger
from nagarassist.utils.metrics import MetricsCollector

from services.chat import config

app = FastAPI(title="Chat Service")

logger = ServiceLogger(config.SERVICE_NAME, log_dir=config.LOG_DIR, level=config.LOG_LEVEL)
metrics = MetricsCollector(config.SERVICE_NAME)

auth = AuthService()
feedback_svc = FeedbackService()


def build_assistant() -> ChatAssistant:
    return ChatAssistant(
        reply_delay=config.REPLY_DELAY_SECONDS,
        quick_action_delay=config.QUICK_ACTION_DELAY_SECONDS,
    )


assistant = build_assistant()

logger.info("Chat service starting up")


class AttachmentPayload(BaseModel):
    content_type: str
    data: str  # base64


class LoginRequest(BaseModel):
    email: str
    name: str


class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    profile_picture: Optional[AttachmentPayload] = None


class UserResponse(BaseModel):
    id: str
    email: str
    name: str
    login_time: datetime
    profile_picture: str
    phone: str
    address: str


class SendRequest(BaseModel):
    text: str = ""
    attachment: Optional[AttachmentPayload] = None

    @model_validator(mode="after")
    def text_or_attachment(self):
        self.text = self.text.strip()
        if not self.text and self.attachment is None:
            raise ValueError("Type a message or attach an image")
        return self


class QuickActionRequest(BaseModel):
    category: IssueCategory


class MessageResponse(BaseModel):
    id: str
    text: str
    sender: str
    timestamp: datetime
    kind: Optional[str] = None
    metadata: Optional[dict] = None


class TurnResponse(BaseModel):
    replies: List[MessageResponse]
    session: dict


class ResolutionFeedbackResponse(BaseModel):
    is_resolved: bool
    feedback_date: datetime
    user_message: Optional[str] = None


class ComplaintResponse(BaseModel):
    id: str
    category: str
    description: str
    location: str
    images: List[str]
    status: str
    timestamp: datetime
    resolution_feedback: Optional[ResolutionFeedbackResponse] = None
    awaiting_confirmation: bool


class StatusUpdateRequest(BaseModel):
    status: ComplaintStatus


class FeedbackRequest(BaseModel):
    rating: int
    category: str = "general"
    message: str = ""


class HandoffResponse(BaseModel):
    url: str
    message: str
    complaint_id: Optional[str] = None


def _user_out(u: User) -> UserResponse:
    return UserResponse(
        id=u.id, email=u.email, name=u.name, login_time=u.login_time,
        profile_picture=u.profile_picture, phone=u.phone, address=u.address,
    )


def _message_out(m: Message) -> MessageResponse:
    metadata = None
    if m.metadata is not None:
        metadata = {
            "category": m.metadata.category.value if m.metadata.category else None,
            "location": m.metadata.location,
            "images": list(m.metadata.images),
            "complaint_id": m.metadata.complaint_id,
        }
    return MessageResponse(
        id=m.id,
        text=m.text,
        sender=m.sender.value,
        timestamp=m.timestamp,
        kind=m.kind.value if m.kind else None,
        metadata=metadata,
    )


def _complaint_out(c: Complaint) -> ComplaintResponse:
    fb = c.resolution_feedback
    return ComplaintResponse(
        id=c.id,
        category=c.category,
        description=c.description,
        location=c.location,
        images=c.images,
        status=c.status.value,
        timestamp=c.timestamp,
        resolution_feedback=ResolutionFeedbackResponse(
            is_resolved=fb.is_resolved, feedback_date=fb.feedback_date, user_message=fb.user_message
        ) if fb else None,
        awaiting_confirmation=c.awaiting_confirmation,
    )


def _require_user() -> User:
    if auth.current_user is None:
        raise HTTPException(status_code=401, detail="Please sign in first")
    return auth.current_user


def _turn_out(bot: ChatAssistant, replies: List[Message]) -> TurnResponse:
    for m in replies:
        metrics.increment(f"reply_{m.kind.value if m.kind else 'plain'}")
    return TurnResponse(
        replies=[_message_out(m) for m in replies],
        session=bot.controller.sessions.describe(),
    )


@app.post("/auth/login", response_model=UserResponse)
def login(req: LoginRequest):
    try:
        user = auth.login(req.email, req.name)
    except LoginError as e:
        logger.warning(f"Login rejected: {e}", email=req.email)
        raise HTTPException(status_code=422, detail=str(e))
    logger.info(f"User signed in: {user.email}", user_id=user.id)
    metrics.increment("logins_total")
    if len(assistant.controller.messages) == 0:
        assistant.controller.greet(user.first_name)
    return _user_out(user)


@app.get("/auth/me", response_model=UserResponse)
def me():
    return _user_out(_require_user())


@app.put("/auth/profile", response_model=UserResponse)
def update_profile(req: ProfileUpdateRequest):
    _require_user()
    picture = None
    try:
        if req.profile_picture is not None:
            picture = decode_upload(
                req.profile_picture.data, req.profile_picture.content_type, PROFILE_IMAGE_MAX_BYTES
            )
        user = auth.update_profile(name=req.name, phone=req.phone, address=req.address,
                                   profile_picture=picture)
    except (ImageRejected, LoginError) as e:
        raise HTTPException(status_code=422, detail=str(e))
    logger.info("Profile updated", user_id=user.id)
    return _user_out(user)


@app.post("/auth/logout")
def logout():
    auth.logout()
    logger.info("User signed out")
    return {"status": "signed_out"}


@app.post("/chat/send", response_model=TurnResponse)
async def send_message(req: SendRequest):
    _require_user()
    start_time = time.time()
    metrics.increment("requests_total")

    attachment = None
    if req.attachment is not None:
        try:
            attachment = decode_upload(req.attachment.data, req.attachment.content_type)
        except ImageRejected as e:
            raise HTTPException(status_code=422, detail=str(e))

    bot = assistant
    session_before = bot.controller.sessions.describe()["type"]
    logger.info(f"Handling message: \"{req.text[:50]}\"", session=session_before,
                has_attachment=attachment is not None)
    try:
        replies = await bot.send(req.text, attachment)
    except TurnInProgress as e:
        metrics.increment("turns_rejected")
        raise HTTPException(status_code=409, detail=str(e))

    for m in replies:
        if m.kind == MessageKind.COMPLAINT and m.metadata:
            logger.info(f"Complaint submitted: {m.metadata.complaint_id}", complaint_id=m.metadata.complaint_id)
            metrics.increment("complaints_submitted")
    logger.debug(f"Replied with {[m.kind.value if m.kind else None for m in replies]}")
    metrics.timing("turn_ms", (time.time() - start_time) * 1000)
    return _turn_out(bot, replies)


@app.post("/chat/quick-action", response_model=TurnResponse)
async def quick_action(req: QuickActionRequest):
    _require_user()
    bot = assistant
    try:
        started = await bot.select_category(req.category)
    except TurnInProgress as e:
        raise HTTPException(status_code=409, detail=str(e))
    if started is None:
        logger.warning("Quick action rejected: a session is already active", category=req.category.value)
        raise HTTPException(status_code=409, detail="Finish the current conversation first")
    logger.info(f"Complaint session started: {req.category.value}", category=req.category.value)
    metrics.increment(f"category_{req.category.value}")
    return _turn_out(bot, [started])


@app.get("/chat/messages", response_model=List[MessageResponse])
def get_messages(after: Optional[str] = None):
    return [_message_out(m) for m in assistant.controller.messages.since(after)]


@app.get("/chat/session")
def get_session():
    return {**assistant.controller.sessions.describe(), "is_typing": assistant.is_typing}


@app.post("/chat/reset")
def reset_chat():
    """Start over with an empty conversation and complaint list."""
    global assistant
    if assistant.is_typing:
        logger.warning("Reset refused: a reply is still being prepared")
        raise HTTPException(status_code=409, detail="A reply is still being prepared")
    assistant = build_assistant()
    if auth.current_user is not None:
        assistant.controller.greet(auth.current_user.first_name)
    logger.info("Chat state reset")
    return {"status": "reset"}


@app.get("/complaints", response_model=List[ComplaintResponse])
def list_complaints():
    return [_complaint_out(c) for c in assistant.controller.repository.list_all()]


@app.get("/complaints/{complaint_id}", response_model=ComplaintResponse)
def get_complaint(complaint_id: str):
    c = assistant.controller.repository.get(complaint_id)
    if c is None:
        raise HTTPException(status_code=404, detail=f"Complaint {complaint_id} not found")
    return _complaint_out(c)


@app.patch("/complaints/{complaint_id}/status", response_model=ComplaintResponse)
def update_complaint_status(complaint_id: str, req: StatusUpdateRequest):
    try:
        c = assistant.controller.repository.update_status(complaint_id, req.status)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    if c is None:
        raise HTTPException(status_code=404, detail=f"Complaint {complaint_id} not found")
    logger.info(f"Complaint {complaint_id} moved to {req.status.value}", complaint_id=complaint_id)
    return _complaint_out(c)


@app.post("/complaints/{complaint_id}/resolution-check", response_model=TurnResponse)
async def resolution_check(complaint_id: str):
    _require_user()
    bot = assistant
    if bot.controller.repository.get(complaint_id) is None:
        raise HTTPException(status_code=404, detail=f"Complaint {complaint_id} not found")
    if not bot.controller.sessions.is_idle:
        raise HTTPException(status_code=409, detail="Finish the current conversation first")
    try:
        started = await bot.check_resolution(complaint_id)
    except TurnInProgress as e:
        raise HTTPException(status_code=409, detail=str(e))
    if started is None:
        raise HTTPException(status_code=409, detail="This complaint is not awaiting confirmation")
    logger.info(f"Resolution check started for {complaint_id}", complaint_id=complaint_id)
    metrics.increment("resolution_checks")
    return _turn_out(bot, [started])


@app.get("/handoff", response_model=HandoffResponse)
def handoff():
    last = assistant.controller.repository.last_complaint
    return HandoffResponse(
        url=build_handoff_url(config.WHATSAPP_NUMBER, last),
        message=compose_handoff_message(last),
        complaint_id=last.id if last else None,
    )


@app.post("/feedback")
def submit_feedback(req: FeedbackRequest):
    try:
        fb = feedback_svc.submit(req.rating, req.category, req.message)
    except InvalidFeedback as e:
        raise HTTPException(status_code=422, detail=str(e))
    logger.info(f"Service feedback received: {fb.rating} stars", category=fb.category)
    metrics.gauge("feedback_average", feedback_svc.stats()["average_rating"])
    return {"status": "ok", "reply": FeedbackService.thank_you(fb)}


@app.get("/feedback/stats")
def feedback_stats():
    return feedback_svc.stats()


@app.get("/stats")
def stats():
    return {
        "complaints": assistant.controller.repository.stats(),
        "messages": len(assistant.controller.messages),
        "feedback": feedback_svc.stats(),
    }


@app.get("/health")
def health():
    return {"status": "ok", "service": "chat"}


@app.get("/logs")
def get_logs(limit: int = 100):
    """Get recent logs from this service."""
    return logger.get_recent_logs(limit=limit)


@app.get("/metrics")
def get_metrics(period: Optional[int] = 60):
    """Get metrics from this service."""
    return metrics.get_all_metrics(time_period_minutes=period)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
