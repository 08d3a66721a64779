"""
Campaign Service

Email campaign dispatch microservice providing:
- One-shot campaign sends to mailing list subscribers in paced batches
- Per-recipient failure isolation and delivery statistics
- Workflow emails and workflow test sends

Port: 8261
"""

__version__ = "1.0.0"
__service__ = "campaign_service"
