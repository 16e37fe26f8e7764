"""Transaction scope helpers."""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.orm import Session


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """Provide an all-or-nothing scope over a session.

    The yielded session is the scope value: every write that must be part of
    the same atomic unit goes through it. Commits on normal exit, rolls back
    on any exception (including one raised by the commit itself) and
    re-raises it.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
