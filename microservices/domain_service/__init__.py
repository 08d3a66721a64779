"""
Domain Service

Custom domain management microservice providing:
- Domain registration with a DNS TXT verification token
- Ownership verification against _verification.<domain>
- Certificate issuance for verified domains (production only)
- DNS configuration diagnostics

Port: 8260
"""

__version__ = "1.0.0"
__service__ = "domain_service"
