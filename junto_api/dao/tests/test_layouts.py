"""Tests for the Junto account layouts and instruction encoding."""
import hashlib
import pytest

from solders.pubkey import Pubkey

from junto_api.dao import layouts
from junto_api.exceptions import LedgerReadError


def test_discriminators_match_anchor_sighash():
    assert layouts.CAST_VOTE_DISCRIMINATOR == hashlib.sha256(b"global:cast_vote").digest()[:8]
    assert layouts.PROPOSAL_DISCRIMINATOR == hashlib.sha256(b"account:Proposal").digest()[:8]
    assert len(layouts.DAO_STATE_DISCRIMINATOR) == layouts.DISCRIMINATOR_SIZE


def test_cast_vote_args_are_borsh_encoded():
    encoded = layouts.CAST_VOTE_ARGS.build({"proposal_id": 7, "vote_in_favor": False})
    assert encoded == (7).to_bytes(8, "little") + b"\x00"


def test_create_proposal_args_are_length_prefixed():
    encoded = layouts.CREATE_PROPOSAL_ARGS.build({"title": "Fund", "description": "x"})
    assert encoded == (4).to_bytes(4, "little") + b"Fund" + (1).to_bytes(4, "little") + b"x"


def test_decode_proposal_with_trailing_space():
    proposer = Pubkey.new_unique()
    data = layouts.encode_account(
        layouts.PROPOSAL_LAYOUT,
        layouts.PROPOSAL_DISCRIMINATOR,
        {
            "proposal_id": 3,
            "dao_state": Pubkey.new_unique(),
            "proposer": proposer,
            "title": "Treasury grant",
            "description": "Fund the indexer",
            "created_at": 100,
            "voting_deadline": 86_500,
            "votes_for": 12,
            "votes_against": 4,
            "final_outcome": 0,
        },
    )
    # allocated account space is larger than the serialized struct
    decoded = layouts.decode_account(
        layouts.PROPOSAL_LAYOUT, layouts.PROPOSAL_DISCRIMINATOR, data + bytes(64), "Proposal"
    )
    assert decoded.proposal_id == 3
    assert decoded.proposer == proposer
    assert decoded.title == "Treasury grant"
    assert decoded.votes_for == 12


def test_decode_rejects_wrong_discriminator():
    with pytest.raises(LedgerReadError):
        layouts.decode_account(
            layouts.PROPOSAL_LAYOUT, layouts.DAO_STATE_DISCRIMINATOR, bytes(200), "Proposal"
        )


def test_decode_rejects_truncated_data():
    with pytest.raises(LedgerReadError):
        layouts.decode_account(
            layouts.PROPOSAL_LAYOUT,
            layouts.PROPOSAL_DISCRIMINATOR,
            layouts.PROPOSAL_DISCRIMINATOR + b"\x01",
            "Proposal",
        )


def test_proposal_address_is_deterministic():
    program_id = Pubkey.new_unique()
    assert layouts.proposal_address(program_id, 0) == layouts.proposal_address(program_id, 0)
    assert layouts.proposal_address(program_id, 0) != layouts.proposal_address(program_id, 1)
