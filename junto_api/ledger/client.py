"""
Async client for the Solana JSON-RPC node.

Holds the process-wide connection handle and exposes the two primitives
the DAO service needs: reading account state and submitting a signed
transaction at the ``confirmed`` commitment level.
"""
from dataclasses import dataclass
from typing import Optional, Sequence

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment, Confirmed
from solana.rpc.types import TxOpts
from solders.instruction import Instruction
from solders.message import Message
from solders.pubkey import Pubkey
from solders.transaction import Transaction

from junto_api.exceptions import LedgerReadError, LedgerSubmitError
from junto_api.utils.logger import logger

from .keys import SignerSet


@dataclass(frozen=True)
class AccountState:
    """Raw on-ledger data for one account."""
    address: Pubkey
    lamports: int
    owner: Pubkey
    data: bytes
    executable: bool


class TransactionRejectedError(Exception):
    """The ledger confirmed the transaction but it failed on-chain."""


class LedgerClient:
    """
    Thin holder of the RPC connection.

    Provides methods to:
    - Read the current state of an account
    - Submit a transaction and wait for confirmation

    There is no retry logic; failures are wrapped and surfaced as-is.
    """

    def __init__(
        self,
        rpc_url: str,
        commitment: Commitment = Confirmed,
        connection: Optional[AsyncClient] = None,
    ):
        """
        Initialize the ledger client.

        Args:
            rpc_url: URL of the Solana RPC node
            commitment: Commitment level used for reads and confirmations
            connection: Pre-built AsyncClient (tests inject a mock here)
        """
        self.rpc_url = rpc_url
        self.commitment = commitment
        self.connection = connection or AsyncClient(rpc_url, commitment=commitment)

    async def read_account_state(self, identity: Pubkey) -> Optional[AccountState]:
        """
        Fetch the current on-ledger data for an account.

        Args:
            identity: Address of the account

        Returns:
            AccountState, or None if the account does not exist

        Raises:
            LedgerReadError: If the RPC call or response parsing fails
        """
        logger.debug(f"[Ledger] getAccountInfo {identity}")
        try:
            resp = await self.connection.get_account_info(identity, commitment=self.commitment)
            account = resp.value
            if account is None:
                return None
            return AccountState(
                address=identity,
                lamports=account.lamports,
                owner=account.owner,
                data=bytes(account.data),
                executable=account.executable,
            )
        except Exception as e:
            logger.error(f"[Ledger] Failed to fetch account info for {identity}: {e}")
            raise LedgerReadError(str(e)) from e

    async def submit_transaction(
        self,
        instructions: Sequence[Instruction],
        signers: SignerSet,
    ) -> str:
        """
        Sign, send and confirm a transaction.

        Args:
            instructions: Instructions making up the transaction
            signers: Fee payer plus any additional required signers

        Returns:
            Base58 transaction signature

        Raises:
            LedgerSubmitError: On rejection, network failure or timeout
        """
        try:
            blockhash_resp = await self.connection.get_latest_blockhash(self.commitment)
            blockhash = blockhash_resp.value.blockhash
            last_valid_block_height = blockhash_resp.value.last_valid_block_height

            message = Message.new_with_blockhash(
                list(instructions), signers.fee_payer.pubkey(), blockhash
            )
            txn = Transaction(signers.all(), message, blockhash)

            send_resp = await self.connection.send_transaction(
                txn,
                opts=TxOpts(skip_confirmation=True, preflight_commitment=self.commitment),
            )
            signature = send_resp.value
            logger.info(f"[Ledger] Sent transaction {signature}, awaiting {self.commitment}")

            confirm_resp = await self.connection.confirm_transaction(
                signature,
                self.commitment,
                last_valid_block_height=last_valid_block_height,
            )
            status = confirm_resp.value[0] if confirm_resp.value else None
            if status is not None and status.err is not None:
                raise TransactionRejectedError(f"Transaction {signature} failed: {status.err}")

            return str(signature)
        except Exception as e:
            logger.error(f"[Ledger] Transaction failed: {e}")
            raise LedgerSubmitError(str(e)) from e

    async def is_connected(self) -> bool:
        try:
            return await self.connection.is_connected()
        except Exception as e:
            logger.warning(f"[Ledger] Health check failed: {e}")
            return False

    async def close(self) -> None:
        await self.connection.close()
