"""
In-memory stand-ins for the repository interfaces, for service tests that
do not need a database.
"""

import copy
import threading
from collections import defaultdict
from uuid import uuid4

from domain.bom.repositories import BOMDocumentRepository, SequenceAllocator
from domain.shared.exceptions import DuplicateBomNumberException, SequenceAllocationException


class InMemorySequenceAllocator(SequenceAllocator):
    """Counters guarded by a lock, like a row lock in the database."""

    def __init__(self, start=None):
        self._lock = threading.Lock()
        self.values = defaultdict(int, start or {})
        self.calls = 0

    def allocate(self, scope_key):
        with self._lock:
            self.calls += 1
            self.values[scope_key] += 1
            return self.values[scope_key]


class FailingSequenceAllocator(InMemorySequenceAllocator):
    """Fails the first ``failures`` calls, then behaves normally."""

    def __init__(self, failures):
        super().__init__()
        self.failures = failures

    def allocate(self, scope_key):
        if self.failures > 0:
            self.failures -= 1
            self.calls += 1
            raise SequenceAllocationException(scope_key)
        return super().allocate(scope_key)


class InMemoryBOMRepository(BOMDocumentRepository):

    def __init__(self):
        self._lock = threading.Lock()
        self.documents = {}
        self.numbers = set()
        self.versions = defaultdict(list)

    def insert(self, document):
        with self._lock:
            if document.bom_number in self.numbers:
                raise DuplicateBomNumberException(document.bom_number)
            bom_id = uuid4()
            self.numbers.add(document.bom_number)
            stored = copy.deepcopy(document)
            stored.id = bom_id
            stored.clear_domain_events()
            self.documents[bom_id] = stored
            return bom_id

    def find_by_id(self, bom_id):
        document = self.documents.get(bom_id)
        return copy.deepcopy(document) if document is not None else None

    def update(self, document, previous=None):
        with self._lock:
            stored = copy.deepcopy(document)
            stored.clear_domain_events()
            self.documents[document.id] = stored
            if previous is not None:
                self.versions[document.id].append(previous)

    def delete(self, bom_id):
        with self._lock:
            document = self.documents.pop(bom_id, None)
            if document is None:
                return False
            self.numbers.discard(document.bom_number)
            return True

    def list_versions(self, bom_id):
        return sorted(self.versions[bom_id], key=lambda v: v.version_number, reverse=True)
