"""
One-shot bootstrap for a Junto DAO.

Loads the program IDL, binds a client to the program address and sends a
single ``initialize`` transaction that creates a fresh DAO state account.
There is no rollback: a failed initialisation leaves no DAO state behind.

Usage:
    python -m junto_api.scripts.deploy
"""
import asyncio
from pathlib import Path
from typing import Optional

from anchorpy import Context, Idl, Program, Provider, Wallet
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed
from solders.keypair import Keypair
from solders.system_program import ID as SYS_PROGRAM_ID

from junto_api.config.settings import Settings
from junto_api.ledger.keys import load_keypair, parse_identity
from junto_api.utils.logger import logger
from junto_api.utils.startup_validation import validate_startup


def load_idl(path: str) -> Idl:
    return Idl.from_json(Path(path).read_text())


async def deploy_program(settings: Settings) -> Optional[str]:
    """
    Initialize a DAO and return the new DAO state address.

    Returns None if initialisation failed; the failure is logged.
    """
    provider = None
    try:
        idl = load_idl(settings.idl_path)
        program_id = parse_identity(settings.program_id)
        wallet = Wallet(load_keypair(settings.wallet_path))
        provider = Provider(AsyncClient(settings.rpc_url, commitment=Confirmed), wallet)
        program = Program(idl, program_id, provider)

        logger.info("[Deploy] Deploying Junto DAO program...")
        logger.info(f"[Deploy] Program ID: {program_id}")
        logger.info(f"[Deploy] Wallet: {settings.wallet_path}")

        dao_state = Keypair()
        signature = await program.rpc["initialize"](
            parse_identity(settings.authority),
            settings.min_tokens_to_propose,
            settings.max_voting_duration,
            ctx=Context(
                accounts={
                    "dao_state": dao_state.pubkey(),
                    "governance_mint": parse_identity(settings.governance_mint),
                    "payer": wallet.public_key,
                    "system_program": SYS_PROGRAM_ID,
                },
                signers=[dao_state],
            ),
        )
        logger.info(f"[Deploy] Junto DAO successfully initialized (tx={signature})")
        logger.info(f"[Deploy] Set DAO_STATE={dao_state.pubkey()} for the API")
        return str(dao_state.pubkey())
    except Exception as e:
        logger.error(f"[Deploy] Deployment failed: {e}", exc_info=True)
        return None
    finally:
        if provider is not None:
            await provider.connection.close()


def main() -> None:
    settings = Settings.from_env()
    if not validate_startup(settings, for_deploy=True):
        logger.error("[Deploy] Configuration is incomplete, aborting")
        return
    asyncio.run(deploy_program(settings))


if __name__ == "__main__":
    main()
