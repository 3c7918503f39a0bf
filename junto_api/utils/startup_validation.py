"""
Startup validation utilities to check configuration before serving requests.

Collects critical errors (missing DAO state, unreadable wallet, malformed
keys) and non-critical warnings, then reports them through the logger.
"""

import os
import sys
from typing import List

from junto_api.config.settings import DEFAULT_RPC_URL, Settings
from junto_api.exceptions import IdentityParseError
from junto_api.ledger.keys import parse_identity
from junto_api.utils.logger import logger


class StartupValidator:
    """Configuration checks for the API process and the deploy script."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def validate_all(self, for_deploy: bool = False) -> bool:
        """
        Run all validation checks.

        Args:
            for_deploy: Check the variables the deploy script needs instead
                of the ones the API needs.

        Returns:
            True if all critical checks pass, False otherwise.
        """
        logger.info("StartupValidator: Beginning configuration validation")

        self._validate_identities(for_deploy)
        self._validate_wallet()
        if for_deploy:
            self._validate_idl()
        else:
            self._validate_optional_config()

        self._report_results()
        return len(self.errors) == 0

    def _validate_identities(self, for_deploy: bool) -> None:
        required = {"PROGRAM_ID": self.settings.program_id}
        if for_deploy:
            required["AUTHORITY"] = self.settings.authority
            required["GOVERNANCE_MINT"] = self.settings.governance_mint
        else:
            required["DAO_STATE"] = self.settings.dao_state

        for var, value in required.items():
            if not value:
                self.errors.append(f"Missing required environment variable: {var}")
                continue
            try:
                parse_identity(value)
            except IdentityParseError as e:
                self.errors.append(f"{var} is not a valid public key: {e.message}")

    def _validate_wallet(self) -> None:
        paths = [self.settings.expanded_wallet_path]
        paths.extend(os.path.expanduser(p) for p in self.settings.signer_keypair_paths)
        for path in paths:
            if not os.path.isfile(path):
                self.errors.append(f"Keypair file not found: {path}")

    def _validate_idl(self) -> None:
        if not os.path.isfile(self.settings.idl_path):
            self.errors.append(f"IDL file not found: {self.settings.idl_path}")

    def _validate_optional_config(self) -> None:
        if self.settings.rpc_url == DEFAULT_RPC_URL:
            self.warnings.append("SOLANA_RPC_URL not set, using public mainnet endpoint")
        if not self.settings.allowed_origins:
            self.warnings.append("ALLOWED_ORIGINS not set, CORS middleware disabled")

    def _report_results(self) -> None:
        """Report validation results."""
        if self.errors:
            logger.error("StartupValidator: %d critical errors found:", len(self.errors))
            for error in self.errors:
                logger.error("  - %s", error)

        if self.warnings:
            logger.warning("StartupValidator: %d warnings found:", len(self.warnings))
            for warning in self.warnings:
                logger.warning("  - %s", warning)

        if not self.errors and not self.warnings:
            logger.info("StartupValidator: All validation checks passed successfully")
        elif not self.errors:
            logger.info("StartupValidator: Critical validation passed with %d warnings", len(self.warnings))


def validate_startup(settings: Settings, for_deploy: bool = False) -> bool:
    """Run startup validation and return success status."""
    return StartupValidator(settings).validate_all(for_deploy=for_deploy)


if __name__ == "__main__":
    # Allow running validation as a standalone script
    if not validate_startup(Settings.from_env()):
        sys.exit(1)
