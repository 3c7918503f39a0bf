"""Unit tests for the ledger client with a mocked RPC connection."""
import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock

from solana.rpc.commitment import Confirmed
from solders.hash import Hash
from solders.instruction import AccountMeta, Instruction
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature

from junto_api.exceptions import LedgerReadError, LedgerSubmitError
from junto_api.ledger.client import AccountState, LedgerClient
from junto_api.ledger.keys import SignerSet


def account_response(data: bytes = b"\x01\x02\x03", lamports: int = 1_000, owner: Pubkey = None):
    account = MagicMock()
    account.lamports = lamports
    account.owner = owner or Pubkey.new_unique()
    account.data = data
    account.executable = False
    resp = MagicMock()
    resp.value = account
    return resp


def blockhash_response():
    resp = MagicMock()
    resp.value.blockhash = Hash.new_unique()
    resp.value.last_valid_block_height = 1234
    return resp


def confirm_response(err=None):
    status = MagicMock()
    status.err = err
    resp = MagicMock()
    resp.value = [status]
    return resp


@pytest.fixture
def connection():
    conn = MagicMock()
    conn.get_account_info = AsyncMock()
    conn.get_latest_blockhash = AsyncMock(return_value=blockhash_response())
    conn.send_transaction = AsyncMock()
    conn.confirm_transaction = AsyncMock(return_value=confirm_response())
    conn.is_connected = AsyncMock(return_value=True)
    conn.close = AsyncMock()
    return conn


@pytest.fixture
def ledger(connection):
    return LedgerClient("http://localhost:8899", connection=connection)


def noop_instruction(payer: Pubkey) -> Instruction:
    return Instruction(Pubkey.new_unique(), b"\x00", [AccountMeta(payer, True, True)])


class TestReadAccountState:

    def test_returns_account_state(self, ledger, connection):
        owner = Pubkey.new_unique()
        connection.get_account_info.return_value = account_response(b"abc", 42, owner)
        address = Pubkey.new_unique()

        state = asyncio.run(ledger.read_account_state(address))

        assert state == AccountState(address=address, lamports=42, owner=owner, data=b"abc", executable=False)
        connection.get_account_info.assert_awaited_once_with(address, commitment=Confirmed)

    def test_missing_account_returns_none(self, ledger, connection):
        resp = MagicMock()
        resp.value = None
        connection.get_account_info.return_value = resp

        assert asyncio.run(ledger.read_account_state(Pubkey.new_unique())) is None

    def test_repeated_reads_are_identical(self, ledger, connection):
        connection.get_account_info.return_value = account_response(b"same-bytes")
        address = Pubkey.new_unique()

        first = asyncio.run(ledger.read_account_state(address))
        second = asyncio.run(ledger.read_account_state(address))

        assert first == second

    def test_transport_failure_raises_read_error(self, ledger, connection):
        connection.get_account_info.side_effect = ConnectionError("connection refused")

        with pytest.raises(LedgerReadError) as exc_info:
            asyncio.run(ledger.read_account_state(Pubkey.new_unique()))
        assert exc_info.value.message == "connection refused"
        assert isinstance(exc_info.value.__cause__, ConnectionError)


class TestSubmitTransaction:

    def test_returns_signature_after_confirmation(self, ledger, connection):
        payer = Keypair()
        signature = Signature.default()
        send_resp = MagicMock()
        send_resp.value = signature
        connection.send_transaction.return_value = send_resp

        result = asyncio.run(ledger.submit_transaction([noop_instruction(payer.pubkey())], SignerSet(payer)))

        assert result == str(signature)
        connection.send_transaction.assert_awaited_once()
        connection.confirm_transaction.assert_awaited_once_with(
            signature, Confirmed, last_valid_block_height=1234
        )

    def test_send_failure_raises_submit_error(self, ledger, connection):
        payer = Keypair()
        connection.send_transaction.side_effect = RuntimeError("Transaction simulation failed")

        with pytest.raises(LedgerSubmitError) as exc_info:
            asyncio.run(ledger.submit_transaction([noop_instruction(payer.pubkey())], SignerSet(payer)))
        assert exc_info.value.message == "Transaction simulation failed"
        connection.confirm_transaction.assert_not_awaited()

    def test_on_chain_error_raises_submit_error(self, ledger, connection):
        payer = Keypair()
        send_resp = MagicMock()
        send_resp.value = Signature.default()
        connection.send_transaction.return_value = send_resp
        connection.confirm_transaction.return_value = confirm_response(err="InstructionError")

        with pytest.raises(LedgerSubmitError) as exc_info:
            asyncio.run(ledger.submit_transaction([noop_instruction(payer.pubkey())], SignerSet(payer)))
        assert "InstructionError" in exc_info.value.message

    def test_confirmation_timeout_raises_submit_error(self, ledger, connection):
        payer = Keypair()
        send_resp = MagicMock()
        send_resp.value = Signature.default()
        connection.send_transaction.return_value = send_resp
        connection.confirm_transaction.side_effect = TimeoutError("Unable to confirm transaction")

        with pytest.raises(LedgerSubmitError):
            asyncio.run(ledger.submit_transaction([noop_instruction(payer.pubkey())], SignerSet(payer)))


class TestHealth:

    def test_is_connected(self, ledger):
        assert asyncio.run(ledger.is_connected()) is True

    def test_is_connected_false_on_error(self, ledger, connection):
        connection.is_connected.side_effect = OSError("unreachable")
        assert asyncio.run(ledger.is_connected()) is False
