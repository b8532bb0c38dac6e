from uuid import UUID


def is_owner(*, actor_id: UUID | str | None, owner_id: UUID | str | None) -> bool:
    """Return True if the actor owns the resource (anonymous actors own nothing)."""
    if actor_id is None or owner_id is None:
        return False
    return str(actor_id) == str(owner_id)
