"""
Identity parsing and local keypair handling.

Identities arrive from HTTP clients as base58 strings; keypairs are read
from Solana CLI key files (a JSON array of 64 integers).
"""
import os
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from junto_api.exceptions import ConfigurationError, IdentityParseError, SignerUnavailableError
from junto_api.utils.logger import logger


def parse_identity(value: str) -> Pubkey:
    """
    Parse a base58 string into a public key.

    Raises:
        IdentityParseError: If the value is not a valid 32-byte base58 key.
    """
    if not isinstance(value, str):
        raise IdentityParseError(f"Invalid public key input: {value!r}", value=str(value))
    try:
        return Pubkey.from_string(value.strip())
    except ValueError as e:
        raise IdentityParseError(str(e), value=value) from e


def load_keypair(path: str) -> Keypair:
    """Load a keypair from a Solana CLI key file. ``~`` is expanded."""
    expanded = os.path.expanduser(path)
    try:
        with open(expanded, "r") as f:
            return Keypair.from_json(f.read())
    except FileNotFoundError:
        raise ConfigurationError(f"Keypair file not found at {expanded}")
    except ValueError as e:
        raise ConfigurationError(f"Invalid keypair file {expanded}: {e}")


@dataclass(frozen=True)
class SignerSet:
    """Keypairs that sign one transaction. The fee payer always signs first."""

    fee_payer: Keypair
    signers: Tuple[Keypair, ...] = ()

    def all(self) -> List[Keypair]:
        seen = {self.fee_payer.pubkey()}
        ordered = [self.fee_payer]
        for kp in self.signers:
            if kp.pubkey() not in seen:
                seen.add(kp.pubkey())
                ordered.append(kp)
        return ordered


@dataclass
class Keyring:
    """Keypairs held by this process, indexed by public key."""

    wallet: Keypair
    _keys: Dict[Pubkey, Keypair] = field(default_factory=dict)

    def __post_init__(self):
        self._keys[self.wallet.pubkey()] = self.wallet

    @classmethod
    def from_files(cls, wallet_path: str, extra_paths: Iterable[str] = ()) -> "Keyring":
        keyring = cls(load_keypair(wallet_path))
        for path in extra_paths:
            keyring.add(load_keypair(path))
        logger.info(f"[Keyring] Loaded {len(keyring)} keypair(s), wallet={keyring.wallet.pubkey()}")
        return keyring

    def add(self, keypair: Keypair) -> None:
        self._keys[keypair.pubkey()] = keypair

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, identity: Pubkey) -> bool:
        return identity in self._keys

    def signer_set(self, identity: Pubkey) -> SignerSet:
        """
        Build the signer set for a transaction acted on by ``identity``.

        Raises:
            SignerUnavailableError: If no keypair for ``identity`` is held.
        """
        keypair = self._keys.get(identity)
        if keypair is None:
            raise SignerUnavailableError(str(identity))
        return SignerSet(fee_payer=self.wallet, signers=(keypair,))
