"""
Ticket receipt domain model.
"""

from pydantic import BaseModel, Field


class TicketReceipt(BaseModel):
    """What the ticket sink returned for a filed proposal."""

    ticket_id: str = Field(..., min_length=1)
    ticket_url: str = Field(..., min_length=1)
    status: str = Field(default="created")
