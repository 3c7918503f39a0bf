import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file

# --------------------------------------------------
# Defaults
# --------------------------------------------------
DEFAULT_RPC_URL = "https://api.mainnet-beta.solana.com"
DEFAULT_WALLET_PATH = "~/.config/solana/id.json"
DEFAULT_IDL_PATH = "./target/idl/junto.json"
DEFAULT_MIN_TOKENS_TO_PROPOSE = 100
DEFAULT_MAX_VOTING_DURATION = 86400  # seconds


def _split_csv(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    """Process configuration, read once at startup.

    Identity values are kept as raw strings here; they are parsed into
    public keys when the service or the deploy script is built so that a
    bad value surfaces through startup validation rather than on import.
    """

    rpc_url: str = DEFAULT_RPC_URL
    wallet_path: str = DEFAULT_WALLET_PATH
    signer_keypair_paths: List[str] = field(default_factory=list)
    program_id: Optional[str] = None
    dao_state: Optional[str] = None
    authority: Optional[str] = None
    governance_mint: Optional[str] = None
    idl_path: str = DEFAULT_IDL_PATH
    min_tokens_to_propose: int = DEFAULT_MIN_TOKENS_TO_PROPOSE
    max_voting_duration: int = DEFAULT_MAX_VOTING_DURATION
    allowed_origins: List[str] = field(default_factory=list)

    @property
    def expanded_wallet_path(self) -> str:
        return os.path.expanduser(self.wallet_path)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            rpc_url=os.environ.get("SOLANA_RPC_URL") or DEFAULT_RPC_URL,
            wallet_path=os.environ.get("WALLET_PATH") or DEFAULT_WALLET_PATH,
            signer_keypair_paths=_split_csv(os.environ.get("SIGNER_KEYPAIRS")),
            program_id=os.environ.get("PROGRAM_ID") or None,
            dao_state=os.environ.get("DAO_STATE") or None,
            authority=os.environ.get("AUTHORITY") or None,
            governance_mint=os.environ.get("GOVERNANCE_MINT") or None,
            idl_path=os.environ.get("IDL_PATH") or DEFAULT_IDL_PATH,
            min_tokens_to_propose=_int_env("MIN_TOKENS_TO_PROPOSE", DEFAULT_MIN_TOKENS_TO_PROPOSE),
            max_voting_duration=_int_env("MAX_VOTING_DURATION", DEFAULT_MAX_VOTING_DURATION),
            allowed_origins=_split_csv(os.environ.get("ALLOWED_ORIGINS")),
        )
