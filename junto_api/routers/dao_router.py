"""
FastAPI router for DAO governance endpoints.

Handlers check field presence, parse identities and delegate to the
DaoService. Typed errors keep their status; anything else surfaces as
500 with the failure's message.
"""
from typing import Awaitable, TypeVar

from fastapi import APIRouter, Depends, Path

from junto_api.dao.schemas import (
    CreateProposalRequest,
    CreateProposalResponse,
    DaoRequest,
    DaoStateResponse,
    FinalizeProposalRequest,
    FinalizeProposalResponse,
    ProposalResponse,
    U64_MAX,
    VoteRequest,
    VoteResponse,
)
from junto_api.dao.service import DaoService
from junto_api.exceptions import InternalError, JuntoError, ValidationError
from junto_api.ledger.keys import parse_identity
from junto_api.utils.logger import logger

from .deps import get_dao_service

router = APIRouter(prefix="/api/dao", tags=["dao"])

T = TypeVar("T")


def _require(body: DaoRequest) -> None:
    missing = body.missing_fields()
    if missing:
        logger.warning(f"[DaoRouter] Rejected request, missing fields: {missing}")
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


async def _delegate(action: str, call: Awaitable[T]) -> T:
    try:
        return await call
    except JuntoError as e:
        logger.error(f"[DaoRouter] {action} failed ({e.code}): {e.message}")
        raise
    except Exception as e:
        logger.error(f"[DaoRouter] {action} failed: {e}", exc_info=True)
        raise InternalError(str(e))


@router.post("/proposals", status_code=201, response_model=CreateProposalResponse)
async def create_proposal(
    body: CreateProposalRequest,
    service: DaoService = Depends(get_dao_service),
) -> CreateProposalResponse:
    """Create a proposal on behalf of ``proposer``."""
    _require(body)
    proposer = parse_identity(body.proposer)

    proposal = await _delegate(
        "create_proposal", service.create_proposal(proposer, body.title, body.description)
    )
    logger.info(f"[DaoRouter] Proposal {proposal.proposal_id} created by {proposer}")
    return CreateProposalResponse(proposal=proposal)


@router.post("/proposals/vote", response_model=VoteResponse)
async def vote_on_proposal(
    body: VoteRequest,
    service: DaoService = Depends(get_dao_service),
) -> VoteResponse:
    """Cast a vote for or against a proposal."""
    _require(body)
    voter = parse_identity(body.voter)

    vote = await _delegate(
        "vote_on_proposal", service.vote_on_proposal(voter, body.proposal_id, body.vote_in_favor)
    )
    return VoteResponse(vote=vote)


@router.post("/proposals/finalize", response_model=FinalizeProposalResponse)
async def finalize_proposal(
    body: FinalizeProposalRequest,
    service: DaoService = Depends(get_dao_service),
) -> FinalizeProposalResponse:
    """Close voting on a proposal and record its outcome."""
    _require(body)

    finalized = await _delegate("finalize_proposal", service.finalize_proposal(body.proposal_id))
    return FinalizeProposalResponse(finalized_proposal=finalized)


@router.get("/proposals/{proposal_id}", response_model=ProposalResponse)
async def get_proposal(
    proposal_id: int = Path(..., ge=0, le=U64_MAX),
    service: DaoService = Depends(get_dao_service),
) -> ProposalResponse:
    proposal = await _delegate("get_proposal", service.get_proposal(proposal_id))
    return ProposalResponse(proposal=proposal)


@router.get("/state", response_model=DaoStateResponse)
async def get_dao_state(service: DaoService = Depends(get_dao_service)) -> DaoStateResponse:
    dao = await _delegate("get_dao_state", service.get_dao_state())
    return DaoStateResponse(dao=dao)
