import unittest

from stakepool.nanocontracts.exception import NCViewMethodError
from stakepool.nanocontracts.storage import (
    NCChangesTracker,
    NCMemoryStorage,
    NCMemoryStorageFactory,
    NCReadOnlyStorage,
)
from stakepool.types import ContractId

CONTRACT_ID = ContractId(b'\x01' * 32)


class NCStorageTestCase(unittest.TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.storage = NCMemoryStorage(CONTRACT_ID)

    def test_get_missing(self) -> None:
        with self.assertRaises(KeyError):
            self.storage.get('a')
        self.assertIsNone(self.storage.get('a', None))
        self.assertEqual(self.storage.get('a', 0), 0)
        self.assertFalse(self.storage.has('a'))

    def test_put_get(self) -> None:
        self.storage.put('a', 1)
        self.storage.put(('balances', b'x'), 2)
        self.assertEqual(self.storage.get('a'), 1)
        self.assertEqual(self.storage.get(('balances', b'x')), 2)
        self.assertEqual(len(self.storage), 2)
        self.assertEqual(set(self.storage), {'a', ('balances', b'x')})

    def test_changes_tracker_stages_writes(self) -> None:
        self.storage.put('a', 1)
        changes = NCChangesTracker(CONTRACT_ID, self.storage)
        self.assertTrue(changes.is_empty())

        changes.put('a', 2)
        changes.put('b', 3)
        self.assertFalse(changes.is_empty())
        self.assertEqual(changes.get('a'), 2)
        self.assertTrue(changes.has('b'))
        self.assertEqual(self.storage.get('a'), 1)
        self.assertFalse(self.storage.has('b'))

        changes.commit()
        self.assertEqual(self.storage.get('a'), 2)
        self.assertEqual(self.storage.get('b'), 3)

        with self.assertRaises(AssertionError):
            changes.commit()
        with self.assertRaises(AssertionError):
            changes.put('c', 4)

    def test_nested_changes_tracker(self) -> None:
        outer = NCChangesTracker(CONTRACT_ID, self.storage)
        outer.put('a', 1)
        inner = NCChangesTracker(CONTRACT_ID, outer)
        self.assertEqual(inner.get('a'), 1)
        inner.put('a', 2)

        inner.commit()
        self.assertEqual(outer.get('a'), 2)
        self.assertFalse(self.storage.has('a'))

    def test_discarded_tracker(self) -> None:
        changes = NCChangesTracker(CONTRACT_ID, self.storage)
        changes.put('a', 1)
        del changes
        self.assertFalse(self.storage.has('a'))

    def test_readonly_storage(self) -> None:
        self.storage.put('a', 1)
        readonly = NCReadOnlyStorage(self.storage)
        self.assertEqual(readonly.get('a'), 1)
        self.assertTrue(readonly.has('a'))
        with self.assertRaises(NCViewMethodError):
            readonly.put('a', 2)
        self.assertEqual(self.storage.get('a'), 1)

    def test_storage_factory(self) -> None:
        factory = NCMemoryStorageFactory()
        storage = factory(CONTRACT_ID)
        self.assertIs(factory(CONTRACT_ID), storage)
        self.assertIsNot(factory(ContractId(b'\x02' * 32)), storage)
