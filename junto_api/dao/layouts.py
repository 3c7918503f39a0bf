"""
Borsh layouts and Anchor discriminators for the Junto DAO program.

Account data is prefixed with ``sha256("account:<Name>")[:8]`` and
instruction data with ``sha256("global:<instruction>")[:8]``; the rest is
borsh-encoded in struct field order.
"""
import hashlib

from anchorpy.borsh_extension import BorshPubkey
from borsh_construct import CStruct, Bool, I64, String, U8, U64
from solders.pubkey import Pubkey

from junto_api.exceptions import LedgerReadError

DISCRIMINATOR_SIZE = 8
PROPOSAL_SEED = b"proposal"


def account_discriminator(name: str) -> bytes:
    return hashlib.sha256(f"account:{name}".encode()).digest()[:DISCRIMINATOR_SIZE]


def instruction_discriminator(name: str) -> bytes:
    return hashlib.sha256(f"global:{name}".encode()).digest()[:DISCRIMINATOR_SIZE]


# Accounts
DAO_STATE_LAYOUT = CStruct(
    "authority" / BorshPubkey,
    "governance_mint" / BorshPubkey,
    "min_tokens_to_propose" / U64,
    "proposal_count" / U64,
    "max_voting_duration" / I64,
    "reserved" / U8[64],
)

PROPOSAL_LAYOUT = CStruct(
    "proposal_id" / U64,
    "dao_state" / BorshPubkey,
    "proposer" / BorshPubkey,
    "title" / String,
    "description" / String,
    "created_at" / I64,
    "voting_deadline" / I64,
    "votes_for" / U64,
    "votes_against" / U64,
    "final_outcome" / U8,
)

DAO_STATE_DISCRIMINATOR = account_discriminator("DaoState")
PROPOSAL_DISCRIMINATOR = account_discriminator("Proposal")

# Instruction arguments
CREATE_PROPOSAL_ARGS = CStruct("title" / String, "description" / String)
CAST_VOTE_ARGS = CStruct("proposal_id" / U64, "vote_in_favor" / Bool)
FINALIZE_PROPOSAL_ARGS = CStruct("proposal_id" / U64)

CREATE_PROPOSAL_DISCRIMINATOR = instruction_discriminator("create_proposal")
CAST_VOTE_DISCRIMINATOR = instruction_discriminator("cast_vote")
FINALIZE_PROPOSAL_DISCRIMINATOR = instruction_discriminator("finalize_proposal")


def decode_account(layout: CStruct, discriminator: bytes, data: bytes, name: str):
    """Strip and check the discriminator, then parse the borsh body."""
    if data[:DISCRIMINATOR_SIZE] != discriminator:
        raise LedgerReadError(f"Account data is not a {name} account")
    try:
        return layout.parse(data[DISCRIMINATOR_SIZE:])
    except Exception as e:
        raise LedgerReadError(f"Failed to decode {name} account: {e}") from e


def encode_account(layout: CStruct, discriminator: bytes, values: dict) -> bytes:
    return discriminator + layout.build(values)


def proposal_address(program_id: Pubkey, proposal_id: int) -> Pubkey:
    """PDA of seeds ``["proposal", proposal_id as u64 little-endian]``."""
    address, _bump = Pubkey.find_program_address(
        [PROPOSAL_SEED, proposal_id.to_bytes(8, "little")], program_id
    )
    return address
