import threading
from contextlib import contextmanager
from typing import Dict, Hashable, Iterator


class KeyedLock:
    """Ein Lock pro Schlüssel (Collection-Name oder drop_id).

    Schreibzugriffe auf dieselbe Collection bzw. denselben Drop laufen
    nacheinander, unterschiedliche Schlüssel blockieren sich nicht.
    Ein Eintrag lebt nur, solange jemand den Lock hält oder darauf wartet.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[Hashable, threading.RLock] = {}
        self._users: Dict[Hashable, int] = {}

    def _acquire_entry(self, key: Hashable) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            self._users[key] = self._users.get(key, 0) + 1
            return lock

    def _release_entry(self, key: Hashable) -> None:
        with self._guard:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        lock = self._acquire_entry(key)
        try:
            with lock:
                yield
        finally:
            self._release_entry(key)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


# Prozessweite Locks: Collections und Anteile pro Drop
collection_locks = KeyedLock()
drop_locks = KeyedLock()
