import logging
from datetime import datetime

from marketplace.models.user import Role, User

logger = logging.getLogger(__name__)


async def log_audit(db, actor_id: int, actor_role: str, action: str, metadata: dict | None = None):
    await db.audit_logs.insert_one({
        "actor_id": actor_id,
        "actor_role": actor_role,
        "action": action,
        "metadata": metadata or {},
        "created_at": datetime.utcnow(),
    })


async def log_role_change(db, user: User, old_role: Role, new_role: Role, action: str):
    logger.info("User %s role %s -> %s", user.id, old_role.value, new_role.value)
    await log_audit(
        db,
        actor_id=user.id,
        actor_role=old_role.value,
        action=action,
        metadata={"from": old_role.value, "to": new_role.value},
    )
