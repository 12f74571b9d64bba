"""
Business logic services.
"""

from intake_bot.services.delivery import (
    NullOutboundSink,
    OutboundSink,
    WebhookOutboundSink,
    create_outbound_sink,
)
from intake_bot.services.replies import ReplyTemplates
from intake_bot.services.ticket_service import (
    FallbackTicketSink,
    HttpTicketSink,
    MockTicketSink,
    TicketRequest,
    TicketSink,
    create_ticket_sink,
)
from intake_bot.services.turn_controller import TurnController, TurnResult

__all__ = [
    "NullOutboundSink",
    "OutboundSink",
    "WebhookOutboundSink",
    "create_outbound_sink",
    "ReplyTemplates",
    "FallbackTicketSink",
    "HttpTicketSink",
    "MockTicketSink",
    "TicketRequest",
    "TicketSink",
    "create_ticket_sink",
    "TurnController",
    "TurnResult",
]
