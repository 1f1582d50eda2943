from typing import TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.errors import Forbidden, NotFound
from app.core.security import Identity

OwnedModel = TypeVar("OwnedModel")


def load_owned(db: Session, model: type[OwnedModel], resource_id: str, identity: Identity, label: str = "not found") -> OwnedModel:
    """Fetch a row that must belong to ``identity``.

    Existence is checked first (404) and ownership second (403), so ownership
    is only ever compared on rows that exist. Ownerless rows match nobody.
    """
    resource = db.scalar(select(model).where(model.id == resource_id))
    if resource is None:
        raise NotFound(label)
    if resource.owner_id is None or resource.owner_id != identity.user_id:
        raise Forbidden("access denied")
    return resource
