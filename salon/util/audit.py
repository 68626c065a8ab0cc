from salon.models.core import AUDIT_LOG
from salon.store.base import DocumentStore

async def audit(store: DocumentStore, actor_user_id: str | None, entity: str, entity_id: str,
                action: str, before: dict | None = None, after: dict | None = None, reason: str | None = None):
    await store.create(AUDIT_LOG, {
        "actor_user_id": actor_user_id,
        "entity": entity, "entity_id": entity_id,
        "action": action if not reason else f"{action}:{reason}",
        "before": before or None,
        "after": after or None,
    })
