"""
Pydantic schemas for DAO API requests and responses.

Request and response bodies use camelCase on the wire.
"""
from enum import Enum
from typing import ClassVar, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from junto_api.exceptions import LedgerReadError

U64_MAX = 2**64 - 1


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ==================
# Request Schemas
# ==================

class DaoRequest(CamelModel):
    """Base request: every field is optional so presence is checked explicitly."""

    required_fields: ClassVar[Tuple[str, ...]] = ()

    def missing_fields(self) -> List[str]:
        """
        Return the wire names of required fields that are absent.

        Strings count as missing when empty; other values only when None,
        so ``proposalId = 0`` and ``voteInFavor = false`` are present.
        """
        missing = []
        for name in self.required_fields:
            value = getattr(self, name)
            if value is None or (isinstance(value, str) and not value):
                missing.append(to_camel(name))
        return missing


class CreateProposalRequest(DaoRequest):
    required_fields: ClassVar[Tuple[str, ...]] = ("proposer", "title", "description")

    proposer: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None


class VoteRequest(DaoRequest):
    required_fields: ClassVar[Tuple[str, ...]] = ("voter", "proposal_id", "vote_in_favor")

    voter: Optional[str] = None
    proposal_id: Optional[int] = Field(None, ge=0, le=U64_MAX)
    vote_in_favor: Optional[bool] = None


class FinalizeProposalRequest(DaoRequest):
    required_fields: ClassVar[Tuple[str, ...]] = ("proposal_id",)

    proposal_id: Optional[int] = Field(None, ge=0, le=U64_MAX)


# ==================
# Account Schemas
# ==================

class ProposalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def from_outcome(cls, outcome: int) -> "ProposalStatus":
        try:
            return {0: cls.PENDING, 1: cls.APPROVED, 2: cls.REJECTED}[outcome]
        except KeyError:
            raise LedgerReadError(f"Unknown proposal outcome {outcome}")


class DaoStateView(CamelModel):
    """Decoded DaoState account."""
    address: str
    authority: str
    governance_mint: str
    min_tokens_to_propose: int
    proposal_count: int
    max_voting_duration: int


class ProposalView(CamelModel):
    """Decoded Proposal account."""
    proposal_id: int
    address: str
    dao_state: str
    proposer: str
    title: str
    description: str
    created_at: int
    voting_deadline: int
    votes_for: int
    votes_against: int
    status: ProposalStatus
    signature: Optional[str] = None


class VoteReceipt(CamelModel):
    proposal_id: int
    voter: str
    vote_in_favor: bool
    voter_token_account: str
    signature: str


# ==================
# Response Schemas
# ==================

class CreateProposalResponse(CamelModel):
    message: str = "Proposal created successfully"
    proposal: ProposalView


class VoteResponse(CamelModel):
    message: str = "Vote cast successfully"
    vote: VoteReceipt


class FinalizeProposalResponse(CamelModel):
    message: str = "Proposal finalized successfully"
    finalized_proposal: ProposalView


class ProposalResponse(CamelModel):
    proposal: ProposalView


class DaoStateResponse(CamelModel):
    dao: DaoStateView
