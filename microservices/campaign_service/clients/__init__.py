"""
Campaign Service Clients

External collaborators of the campaign service.
"""

from .email_client import ResendEmailClient

__all__ = ["ResendEmailClient"]
