"""
Domain Service Clients

External collaborators: DNS resolution and certificate issuance.
"""

from .certificate_client import CertbotClient
from .dns_client import DnsClient

__all__ = ["CertbotClient", "DnsClient"]
