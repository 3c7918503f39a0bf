"""
Domain service for the Junto DAO program.

Builds program instructions from validated requests, submits them through
the ledger client and decodes the resulting accounts. All governance rules
(deadlines, voting power, finalisation) are enforced on-chain; failures
come back as ledger errors.
"""
from typing import List

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from solders.system_program import ID as SYS_PROGRAM_ID
from spl.token.instructions import get_associated_token_address

from junto_api.exceptions import AccountNotFoundError
from junto_api.ledger.client import LedgerClient
from junto_api.ledger.keys import Keyring
from junto_api.utils.logger import logger

from . import layouts
from .schemas import DaoStateView, ProposalStatus, ProposalView, VoteReceipt


class DaoService:
    """Pass-through operations against one DAO state account."""

    def __init__(
        self,
        ledger: LedgerClient,
        keyring: Keyring,
        program_id: Pubkey,
        dao_state: Pubkey,
    ):
        self.ledger = ledger
        self.keyring = keyring
        self.program_id = program_id
        self.dao_state = dao_state

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_dao_state(self) -> DaoStateView:
        account = await self.ledger.read_account_state(self.dao_state)
        if account is None:
            raise AccountNotFoundError(f"DAO state account {self.dao_state} not found")
        decoded = layouts.decode_account(
            layouts.DAO_STATE_LAYOUT, layouts.DAO_STATE_DISCRIMINATOR, account.data, "DaoState"
        )
        return DaoStateView(
            address=str(self.dao_state),
            authority=str(decoded.authority),
            governance_mint=str(decoded.governance_mint),
            min_tokens_to_propose=decoded.min_tokens_to_propose,
            proposal_count=decoded.proposal_count,
            max_voting_duration=decoded.max_voting_duration,
        )

    async def get_proposal(self, proposal_id: int) -> ProposalView:
        address = layouts.proposal_address(self.program_id, proposal_id)
        account = await self.ledger.read_account_state(address)
        if account is None:
            raise AccountNotFoundError(f"Proposal {proposal_id} not found")
        decoded = layouts.decode_account(
            layouts.PROPOSAL_LAYOUT, layouts.PROPOSAL_DISCRIMINATOR, account.data, "Proposal"
        )
        return ProposalView(
            proposal_id=decoded.proposal_id,
            address=str(address),
            dao_state=str(decoded.dao_state),
            proposer=str(decoded.proposer),
            title=decoded.title,
            description=decoded.description,
            created_at=decoded.created_at,
            voting_deadline=decoded.voting_deadline,
            votes_for=decoded.votes_for,
            votes_against=decoded.votes_against,
            status=ProposalStatus.from_outcome(decoded.final_outcome),
        )

    # ------------------------------------------------------------------
    # Instructions
    # ------------------------------------------------------------------

    def build_create_proposal(self, proposer: Pubkey, proposal_id: int, title: str, description: str) -> Instruction:
        data = layouts.CREATE_PROPOSAL_DISCRIMINATOR + layouts.CREATE_PROPOSAL_ARGS.build(
            {"title": title, "description": description}
        )
        accounts = [
            AccountMeta(proposer, is_signer=True, is_writable=True),
            AccountMeta(self.dao_state, is_signer=False, is_writable=True),
            AccountMeta(layouts.proposal_address(self.program_id, proposal_id), is_signer=False, is_writable=True),
            AccountMeta(SYS_PROGRAM_ID, is_signer=False, is_writable=False),
        ]
        return Instruction(self.program_id, data, accounts)

    def build_cast_vote(
        self, voter: Pubkey, voter_token_account: Pubkey, proposal_id: int, vote_in_favor: bool
    ) -> Instruction:
        data = layouts.CAST_VOTE_DISCRIMINATOR + layouts.CAST_VOTE_ARGS.build(
            {"proposal_id": proposal_id, "vote_in_favor": vote_in_favor}
        )
        accounts = [
            AccountMeta(voter, is_signer=True, is_writable=True),
            AccountMeta(self.dao_state, is_signer=False, is_writable=False),
            AccountMeta(layouts.proposal_address(self.program_id, proposal_id), is_signer=False, is_writable=True),
            AccountMeta(voter_token_account, is_signer=False, is_writable=False),
        ]
        return Instruction(self.program_id, data, accounts)

    def build_finalize_proposal(self, signer: Pubkey, proposal_id: int) -> Instruction:
        data = layouts.FINALIZE_PROPOSAL_DISCRIMINATOR + layouts.FINALIZE_PROPOSAL_ARGS.build(
            {"proposal_id": proposal_id}
        )
        accounts: List[AccountMeta] = [
            AccountMeta(signer, is_signer=True, is_writable=True),
            AccountMeta(self.dao_state, is_signer=False, is_writable=True),
            AccountMeta(layouts.proposal_address(self.program_id, proposal_id), is_signer=False, is_writable=True),
        ]
        return Instruction(self.program_id, data, accounts)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_proposal(self, proposer: Pubkey, title: str, description: str) -> ProposalView:
        signers = self.keyring.signer_set(proposer)
        dao = await self.get_dao_state()
        proposal_id = dao.proposal_count + 1

        logger.info(f"[DaoService] Creating proposal {proposal_id} for proposer={proposer}")
        ix = self.build_create_proposal(proposer, proposal_id, title, description)
        signature = await self.ledger.submit_transaction([ix], signers)

        proposal = await self.get_proposal(proposal_id)
        proposal.signature = signature
        return proposal

    async def vote_on_proposal(self, voter: Pubkey, proposal_id: int, vote_in_favor: bool) -> VoteReceipt:
        signers = self.keyring.signer_set(voter)
        dao = await self.get_dao_state()
        token_account = get_associated_token_address(voter, Pubkey.from_string(dao.governance_mint))

        logger.info(
            f"[DaoService] Casting vote on proposal {proposal_id}: voter={voter}, in_favor={vote_in_favor}"
        )
        ix = self.build_cast_vote(voter, token_account, proposal_id, vote_in_favor)
        signature = await self.ledger.submit_transaction([ix], signers)

        return VoteReceipt(
            proposal_id=proposal_id,
            voter=str(voter),
            vote_in_favor=vote_in_favor,
            voter_token_account=str(token_account),
            signature=signature,
        )

    async def finalize_proposal(self, proposal_id: int) -> ProposalView:
        authority = self.keyring.wallet.pubkey()
        signers = self.keyring.signer_set(authority)

        logger.info(f"[DaoService] Finalizing proposal {proposal_id}")
        ix = self.build_finalize_proposal(authority, proposal_id)
        signature = await self.ledger.submit_transaction([ix], signers)

        proposal = await self.get_proposal(proposal_id)
        proposal.signature = signature
        return proposal

    async def ping(self) -> bool:
        return await self.ledger.is_connected()
