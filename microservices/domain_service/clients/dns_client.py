"""
DNS Client

Asynchronous DNS lookups with dnspython. Resolver failures are reported
as DnsLookupError carrying a short code.
"""

import logging
from typing import Callable, List, Optional

import dns.asyncresolver
import dns.exception
import dns.resolver

from ..protocols import DnsLookupError

logger = logging.getLogger(__name__)


class DnsClient:
    """Resolver for the record types the domain service inspects"""

    def __init__(self, timeout: float = 5.0, resolver: Optional[dns.asyncresolver.Resolver] = None):
        self.resolver = resolver or dns.asyncresolver.Resolver()
        self.resolver.lifetime = timeout

    async def resolve_txt(self, name: str) -> List[str]:
        """
        TXT values of name.

        The character strings of one record are joined, since publishers split
        values longer than 255 bytes into several strings of a single record.
        """
        return await self._resolve(
            name, "TXT", lambda rdata: b"".join(rdata.strings).decode("utf-8", errors="replace")
        )

    async def resolve_a(self, name: str) -> List[str]:
        return await self._resolve(name, "A", lambda rdata: rdata.address)

    async def resolve_cname(self, name: str) -> List[str]:
        return await self._resolve(name, "CNAME", lambda rdata: rdata.target.to_text(omit_final_dot=True))

    async def _resolve(self, name: str, rdtype: str, extract: Callable) -> List[str]:
        try:
            answer = await self.resolver.resolve(name, rdtype)
        except dns.resolver.NXDOMAIN:
            raise DnsLookupError("NXDOMAIN")
        except dns.resolver.NoAnswer:
            raise DnsLookupError("NODATA")
        except dns.resolver.NoNameservers:
            raise DnsLookupError("NONAMESERVERS")
        except dns.exception.Timeout:
            raise DnsLookupError("TIMEOUT")
        except dns.exception.DNSException as e:
            logger.warning(f"{rdtype} lookup for {name} failed: {e}")
            raise DnsLookupError("ERROR", str(e))

        return [extract(rdata) for rdata in answer]


__all__ = ["DnsClient"]
