import unittest

from stakepool.nanocontracts.access_gate import SimpleAccessGate
from stakepool.nanocontracts.exception import Unauthorized
from stakepool.types import Address, ContractId

OWNER = Address(b'\x0a' * 25)
OTHER = Address(b'\x0b' * 25)
CONTRACT_ID = ContractId(b'\x01' * 32)


class SimpleAccessGateTestCase(unittest.TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.gate = SimpleAccessGate()
        self.gate.register(CONTRACT_ID, OWNER)

    def test_register(self) -> None:
        self.assertEqual(self.gate.get_authority(CONTRACT_ID), OWNER)
        self.assertTrue(self.gate.is_authority(CONTRACT_ID, OWNER))
        self.assertFalse(self.gate.is_authority(CONTRACT_ID, OTHER))
        self.assertFalse(self.gate.is_paused(CONTRACT_ID))
        with self.assertRaises(ValueError):
            self.gate.register(CONTRACT_ID, OTHER)

    def test_unknown_contract(self) -> None:
        unknown = ContractId(b'\x02' * 32)
        self.assertIsNone(self.gate.get_authority(unknown))
        self.assertFalse(self.gate.is_authority(unknown, OWNER))
        with self.assertRaises(Unauthorized):
            self.gate.pause(unknown, OWNER)

    def test_pause_unpause(self) -> None:
        with self.assertRaises(Unauthorized):
            self.gate.pause(CONTRACT_ID, OTHER)
        self.gate.pause(CONTRACT_ID, OWNER)
        self.assertTrue(self.gate.is_paused(CONTRACT_ID))

        with self.assertRaises(Unauthorized):
            self.gate.unpause(CONTRACT_ID, OTHER)
        self.gate.unpause(CONTRACT_ID, OWNER)
        self.assertFalse(self.gate.is_paused(CONTRACT_ID))

    def test_transfer_authority(self) -> None:
        with self.assertRaises(Unauthorized):
            self.gate.transfer_authority(CONTRACT_ID, OTHER, OTHER)
        self.gate.transfer_authority(CONTRACT_ID, OWNER, OTHER)
        self.assertTrue(self.gate.is_authority(CONTRACT_ID, OTHER))
        self.assertFalse(self.gate.is_authority(CONTRACT_ID, OWNER))
        with self.assertRaises(Unauthorized):
            self.gate.pause(CONTRACT_ID, OWNER)
