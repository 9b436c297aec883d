"""Endpoints and websocket handler for the notification inbox."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session

from app.application.use_cases.notifications import (
    count_unread_notifications,
    list_default_rules,
    list_my_notifications,
    list_my_rules,
    mark_all_notifications_read,
    mark_notification_read,
    upsert_default_rule,
    upsert_my_rule,
)
from app.domain.entities import User
from app.infrastructure.database import SessionLocal, get_db
from app.infrastructure.notifications import notification_manager
from app.interfaces.api.dependencies import get_current_user, resolve_current_user, unwrap
from app.interfaces.api.schemas import (
    DefaultRuleRead,
    DefaultRuleUpdate,
    MarkedCountRead,
    NotificationRead,
    NotificationRuleRead,
    NotificationRuleUpdate,
    UnreadCountRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationRead])
def list_notifications(
    include_read: bool = False,
    limit: int | None = None,
    domains: list[str] | None = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[NotificationRead]:
    """Return the most recent notifications for the authenticated user."""

    notifications = unwrap(
        list_my_notifications(
            db,
            user_id=current_user.id,
            include_read=include_read,
            limit=limit,
            domains=domains,
        )
    )
    return [NotificationRead.from_entity(notification) for notification in notifications]


@router.get("/unread-count", response_model=UnreadCountRead)
def unread_count(
    domains: list[str] | None = Query(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> UnreadCountRead:
    count = unwrap(count_unread_notifications(db, user_id=current_user.id, domains=domains))
    return UnreadCountRead(unread=count)


@router.post("/read-all", response_model=MarkedCountRead)
def read_all(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MarkedCountRead:
    updated = unwrap(mark_all_notifications_read(db, user_id=current_user.id))
    return MarkedCountRead(updated=updated)


@router.post("/{notification_id}/read", response_model=NotificationRead)
def read_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> NotificationRead:
    notification = unwrap(
        mark_notification_read(db, user_id=current_user.id, notification_id=notification_id)
    )
    return NotificationRead.from_entity(notification)


@router.get("/rules/me", response_model=list[NotificationRuleRead])
def my_rules(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[NotificationRuleRead]:
    views = unwrap(list_my_rules(db, actor=current_user))
    return [NotificationRuleRead.from_view(view) for view in views]


@router.put("/rules/me", response_model=NotificationRuleRead)
def update_my_rule(
    payload: NotificationRuleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> NotificationRuleRead:
    view = unwrap(
        upsert_my_rule(
            db,
            actor=current_user,
            event_key=payload.event_key,
            responsibility_kind=payload.responsibility_kind,
            enabled=payload.enabled,
        )
    )
    return NotificationRuleRead.from_view(view)


@router.get("/rules/defaults", response_model=list[DefaultRuleRead])
def default_rules(
    sector: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[DefaultRuleRead]:
    rules = unwrap(list_default_rules(db, actor=current_user, sector=sector))
    return [DefaultRuleRead.from_entity(rule) for rule in rules]


@router.put("/rules/defaults", response_model=DefaultRuleRead)
def update_default_rule(
    payload: DefaultRuleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> DefaultRuleRead:
    rule = unwrap(
        upsert_default_rule(
            db,
            actor=current_user,
            sector=payload.sector,
            event_key=payload.event_key,
            responsibility_kind=payload.responsibility_kind,
            enabled=payload.enabled,
        )
    )
    return DefaultRuleRead.from_entity(rule)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that tells the user when their inbox changed."""

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=1008)
        return

    session = SessionLocal()
    try:
        user = resolve_current_user(token, session)
        unread = unwrap(count_unread_notifications(session, user_id=user.id))
    except HTTPException:
        await websocket.close(code=1008)
        return
    finally:
        session.close()

    await notification_manager.connect(user.id, websocket)
    try:
        await websocket.send_json({"type": "init", "data": {"unread": unread}})
        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if isinstance(message, dict) and message.get("type") == "ping":
                await websocket.send_json({"type": "pong"})
    except WebSocketDisconnect:
        notification_manager.disconnect(user.id, websocket)
    except Exception:  # pragma: no cover - unexpected socket failure
        notification_manager.disconnect(user.id, websocket)
        raise
