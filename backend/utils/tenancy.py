from sqlalchemy import event, text
from sqlalchemy.orm import Session


def _apply_user_setting(connection, user_id: int) -> None:
    if connection.dialect.name != "postgresql":
        return
    connection.execute(text("SELECT set_config('app.user_id', :user_id, true)"), {"user_id": str(user_id)})


def scope_to_user(db: Session, user_id: int) -> None:
    """
    Scope the database session to ``user_id``.

    The row-level security policies on actividad_reenvasado compare
    ``user_id`` with the transaction-local ``app.user_id`` setting, so reads
    and writes are limited by PostgreSQL itself and not only by the query
    filters. Other dialects have no RLS and rely on the explicit filters.
    """
    db.info["user_id"] = user_id
    if db.in_transaction():
        _apply_user_setting(db.connection(), user_id)


@event.listens_for(Session, "after_begin")
def scope_new_transaction(session, transaction, connection):
    """
    Event listener that re-applies the user scope on every transaction the
    session opens (the setting does not survive a commit).
    """
    user_id = session.info.get("user_id")
    if user_id is not None:
        _apply_user_setting(connection, user_id)
