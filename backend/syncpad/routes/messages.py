"""
Messaging Routes (mini notes between users)
"""
from fastapi import APIRouter, HTTPException, Depends
from datetime import datetime
import logging

from ..models import User, Message, MessageCreate
from ..database import get_messages_collection, get_users_collection
from ..services.auth import require_auth
from ..services.encryption import get_encryption
from ..services.validation import sanitize_input, MAX_MESSAGE_TITLE_LENGTH, MAX_MESSAGE_CONTENT_LENGTH

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/messages", tags=["Messages"])

USER_SUMMARY_FIELDS = {"_id": 0, "id": 1, "name": 1, "email": 1, "unique_id": 1}


def _involving(user_id: str) -> dict:
    return {"$or": [{"sender_id": user_id}, {"receiver_id": user_id}]}


@router.post("/send")
async def send_message(request: MessageCreate, user: User = Depends(require_auth)):
    """Отправить мини-заметку"""
    if not request.receiver_id or not request.content:
        raise HTTPException(status_code=400, detail="Receiver ID and content are required")
    if request.title and len(request.title) > MAX_MESSAGE_TITLE_LENGTH:
        raise HTTPException(status_code=400, detail="Title must be less than 100 characters")
    if len(request.content) > MAX_MESSAGE_CONTENT_LENGTH:
        raise HTTPException(status_code=400, detail="Content must be less than 1000 characters")

    users = get_users_collection()
    receiver = await users.find_one({"id": request.receiver_id}, USER_SUMMARY_FIELDS)
    if not receiver:
        raise HTTPException(status_code=404, detail="Receiver not found")

    message = Message(
        sender_id=user.id,
        receiver_id=request.receiver_id,
        title=sanitize_input(request.title) or "Quick Note",
        content=sanitize_input(request.content),
        message_type=request.message_type,
        linked_note_id=request.linked_note_id,
    )

    messages = get_messages_collection()
    await messages.insert_one(get_encryption().encrypt_message(message.model_dump()))

    logger.info(f"Message {message.id} sent from {user.id} to {request.receiver_id}")
    return {
        "success": True,
        "message": {
            **message.model_dump(),
            "sender": {"id": user.id, "name": user.name, "email": user.email},
        },
    }


@router.get("/conversations")
async def get_conversations(user: User = Depends(require_auth)):
    """Список диалогов с последним сообщением и числом непрочитанных"""
    messages = get_messages_collection()
    cursor = messages.find(_involving(user.id)).sort("created_at", -1)
    messages_list = await cursor.to_list(None)

    enc = get_encryption()
    conversations = {}
    for raw in messages_list:
        message = Message(**enc.decrypt_message(raw))
        other_id = message.receiver_id if message.sender_id == user.id else message.sender_id

        # Сообщения отсортированы от новых к старым, первое и есть последнее
        entry = conversations.setdefault(other_id, {"last_message": message, "unread_count": 0})
        if message.receiver_id == user.id and not message.is_read:
            entry["unread_count"] += 1

    users = get_users_collection()
    others = await users.find(
        {"id": {"$in": list(conversations)}}, USER_SUMMARY_FIELDS
    ).to_list(None)
    others_by_id = {other["id"]: other for other in others}

    return {
        "conversations": [
            {
                "other_user": others_by_id.get(other_id),
                "last_message": entry["last_message"].model_dump(),
                "unread_count": entry["unread_count"],
            }
            for other_id, entry in conversations.items()
        ]
    }


@router.get("/with/{other_user_id}")
async def get_messages(other_user_id: str, user: User = Depends(require_auth)):
    """Переписка с пользователем (помечает входящие как прочитанные)"""
    messages = get_messages_collection()
    cursor = messages.find({
        "$or": [
            {"sender_id": user.id, "receiver_id": other_user_id},
            {"sender_id": other_user_id, "receiver_id": user.id},
        ]
    }).sort("created_at", 1)
    messages_list = await cursor.to_list(None)

    await messages.update_many(
        {"receiver_id": user.id, "sender_id": other_user_id, "is_read": False},
        {"$set": {"is_read": True, "updated_at": datetime.utcnow()}}
    )

    enc = get_encryption()
    return {"messages": [Message(**enc.decrypt_message(m)).model_dump() for m in messages_list]}


@router.get("/unread-count")
async def get_unread_count(user: User = Depends(require_auth)):
    """Количество непрочитанных сообщений"""
    messages = get_messages_collection()
    unread_count = await messages.count_documents({"receiver_id": user.id, "is_read": False})
    return {"unread_count": unread_count}


@router.put("/{message_id}/read")
async def mark_as_read(message_id: str, user: User = Depends(require_auth)):
    """Пометить сообщение прочитанным"""
    messages = get_messages_collection()
    result = await messages.update_one(
        {"id": message_id, "receiver_id": user.id},
        {"$set": {"is_read": True, "updated_at": datetime.utcnow()}}
    )

    if result.matched_count == 0:
        raise HTTPException(status_code=404, detail="Message not found")

    return {"success": True}


@router.delete("/{message_id}")
async def delete_message(message_id: str, user: User = Depends(require_auth)):
    """Удалить сообщение (отправитель или получатель)"""
    messages = get_messages_collection()
    result = await messages.delete_one({"id": message_id, **_involving(user.id)})

    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Message not found")

    return {"success": True}


@router.get("/users")
async def get_messaging_users(user: User = Depends(require_auth)):
    """Все пользователи, кому можно написать"""
    users = get_users_collection()
    cursor = users.find({"id": {"$ne": user.id}}, USER_SUMMARY_FIELDS).sort("name", 1)
    users_list = await cursor.to_list(None)
    return {"users": users_list}
