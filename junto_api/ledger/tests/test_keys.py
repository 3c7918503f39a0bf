"""Unit tests for identity parsing and keyring handling."""
import json
import pytest

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from junto_api.exceptions import ConfigurationError, IdentityParseError, SignerUnavailableError
from junto_api.ledger.keys import Keyring, SignerSet, load_keypair, parse_identity


def write_keypair(path, keypair: Keypair) -> str:
    path.write_text(json.dumps(list(bytes(keypair))))
    return str(path)


class TestParseIdentity:

    def test_valid_key(self):
        key = Pubkey.new_unique()
        assert parse_identity(str(key)) == key

    def test_surrounding_whitespace_is_ignored(self):
        key = Pubkey.new_unique()
        assert parse_identity(f"  {key} ") == key

    @pytest.mark.parametrize("value", ["", "not-a-key", "0OIl", "1111"])
    def test_invalid_strings_raise(self, value):
        with pytest.raises(IdentityParseError) as exc_info:
            parse_identity(value)
        assert exc_info.value.code == 400
        assert exc_info.value.value == value

    def test_non_string_raises(self):
        with pytest.raises(IdentityParseError):
            parse_identity(12345)


class TestKeypairFiles:

    def test_load_keypair(self, tmp_path):
        keypair = Keypair()
        path = write_keypair(tmp_path / "id.json", keypair)
        assert load_keypair(path).pubkey() == keypair.pubkey()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_keypair(str(tmp_path / "missing.json"))

    def test_keyring_from_files(self, tmp_path):
        wallet, voter = Keypair(), Keypair()
        keyring = Keyring.from_files(
            write_keypair(tmp_path / "wallet.json", wallet),
            [write_keypair(tmp_path / "voter.json", voter)],
        )
        assert len(keyring) == 2
        assert voter.pubkey() in keyring


class TestSignerSet:

    def test_wallet_identity_signs_once(self):
        wallet = Keypair()
        signers = Keyring(wallet).signer_set(wallet.pubkey())
        assert [kp.pubkey() for kp in signers.all()] == [wallet.pubkey()]

    def test_extra_identity_signs_after_fee_payer(self):
        wallet, voter = Keypair(), Keypair()
        keyring = Keyring(wallet)
        keyring.add(voter)
        signers = keyring.signer_set(voter.pubkey())
        assert signers.fee_payer.pubkey() == wallet.pubkey()
        assert [kp.pubkey() for kp in signers.all()] == [wallet.pubkey(), voter.pubkey()]

    def test_unknown_identity_raises(self):
        with pytest.raises(SignerUnavailableError) as exc_info:
            Keyring(Keypair()).signer_set(Pubkey.new_unique())
        assert exc_info.value.code == 403

    def test_signer_set_defaults(self):
        payer = Keypair()
        assert SignerSet(payer).all() == [payer]
