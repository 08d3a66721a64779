"""
Certificate Client

Runs certbot and the reverse proxy reload as argument lists.
Commands never pass through a shell.
"""

import asyncio
import logging
from typing import List, Optional

from core.config import DomainConfig

from ..protocols import CertificateIssuanceError

logger = logging.getLogger(__name__)


class CertbotClient:
    """Issues certificates with certbot's nginx plugin"""

    def __init__(self, config: Optional[DomainConfig] = None):
        self.config = config or DomainConfig()

    def build_certbot_args(self, domain: str) -> List[str]:
        return [
            *self.config.certbot_command,
            "certonly",
            "--nginx",
            "-d", domain,
            "--non-interactive",
            "--agree-tos",
            "--email", f"{self.config.certbot_email_local_part}@{domain}",
        ]

    async def issue_certificate(self, domain: str) -> str:
        """
        Issue a certificate for domain, then reload the proxy.

        Args:
            domain: Canonical, already validated domain name

        Returns:
            Combined certbot output

        Raises:
            CertificateIssuanceError: certbot or the reload failed
        """
        output = await self._run(self.build_certbot_args(domain))
        logger.info(f"Certbot finished for {domain}")

        await self._run(list(self.config.proxy_reload_command))
        logger.info(f"Proxy reloaded after certificate issuance for {domain}")
        return output

    async def _run(self, args: List[str]) -> str:
        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (FileNotFoundError, PermissionError) as e:
            raise CertificateIssuanceError(f"Cannot execute {args[0]}: {e}")

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self.config.certbot_timeout_seconds
            )
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            raise CertificateIssuanceError(
                f"{args[0]} timed out after {self.config.certbot_timeout_seconds}s"
            )

        output = "\n".join(
            part for part in (
                stdout.decode("utf-8", errors="replace").strip(),
                stderr.decode("utf-8", errors="replace").strip(),
            ) if part
        )
        if process.returncode != 0:
            logger.error(f"Command {' '.join(args)} exited with {process.returncode}: {output}")
            raise CertificateIssuanceError(
                f"Command failed with exit code {process.returncode}", output=output
            )
        return output


__all__ = ["CertbotClient"]
