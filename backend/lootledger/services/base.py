from contextlib import contextmanager
from typing import ContextManager, Iterator

from sqlalchemy.orm import Session


class BaseService:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def transaction(self, lock: ContextManager) -> Iterator[None]:
        """Kritischer Abschnitt: Lock halten, am Ende genau ein Commit.

        Bei einem Fehler wird zurückgerollt und der Fehler weitergereicht.
        """
        with lock:
            try:
                yield
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise
