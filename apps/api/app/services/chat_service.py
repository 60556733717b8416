"""Per-matter chat messages.

Stored in a Redis list per matter (trimmed and expiring) when REDIS_URL is
set, otherwise in a process-local map that does not survive restarts.
"""

from __future__ import annotations

import json
import threading
import uuid
from collections import defaultdict
from datetime import datetime, timezone
from uuid import UUID

from app.core.config import settings
from app.core.redis_client import get_sync_redis_client
from app.db.models import Matter, User

KEY_PREFIX = "chat:matter:"

_lock = threading.Lock()
_memory: dict[str, list[dict]] = defaultdict(list)


def _key(matter_id: UUID) -> str:
    return f"{KEY_PREFIX}{matter_id}"


def list_messages(matter_id: UUID) -> list[dict]:
    client = get_sync_redis_client()
    if client is not None:
        return [json.loads(raw) for raw in client.lrange(_key(matter_id), 0, -1)]
    with _lock:
        return list(_memory.get(_key(matter_id), []))


def post_message(matter: Matter, sender: User, text: str) -> dict:
    message = {
        "id": uuid.uuid4().hex,
        "matter_id": str(matter.id),
        "sender_user_id": str(sender.id),
        "sender_name": sender.display_name,
        "text": text,
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    key = _key(matter.id)
    client = get_sync_redis_client()
    if client is not None:
        pipe = client.pipeline()
        pipe.rpush(key, json.dumps(message))
        pipe.ltrim(key, -settings.CHAT_MAX_MESSAGES, -1)
        pipe.expire(key, settings.CHAT_TTL_SECONDS)
        pipe.execute()
        return message

    with _lock:
        messages = _memory[key]
        messages.append(message)
        del messages[: -settings.CHAT_MAX_MESSAGES]
    return message


def clear_memory() -> None:
    with _lock:
        _memory.clear()
