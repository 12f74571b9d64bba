"""
Plain-text bot replies.
"""

from typing import Optional

from intake_bot.core.constants import (
    DIFFICULTY_DESCRIPTIONS,
    IMPACT_DESCRIPTIONS,
    PRIORITY_DESCRIPTIONS,
    Priority,
)
from intake_bot.domain.proposal import Proposal
from intake_bot.domain.ticket import TicketReceipt

PROPOSAL_TEMPLATE = """He analizado tu initiative y preparé esta propuesta:

📋 **{title}**
{short_description}

🔍 Prioridad: {priority} ({priority_description})
⚙️ Dificultad: {difficulty}/3 ({difficulty_description})
📈 Impacto: {impact_score}/3 ({impact_description})
🏢 Business Unit: {business_unit}
📁 Proyecto: {project}
🧠 Tecnología: {core_technology}
👥 Equipo: {assignee}
🏷️ Etiquetas: {labels}

📝 **Descripción:**
{description}

💡 **Impacto esperado:** {impact}

¿Te parece correcto? Responde "sí" para crear el ticket, "no" para descartarlo o dime qué quieres cambiar."""

TICKET_CREATED_TEMPLATE = """🎉 ¡Perfecto! Tu ticket **{ticket_id}** ha sido creado exitosamente.

🔗 Ver ticket: {ticket_url}

El equipo lo revisará y te contactará si necesita información adicional."""


class ReplyTemplates:
    """Renders every fixed reply the bot sends."""

    def __init__(self, bot_name: str = "Sapira") -> None:
        self.bot_name = bot_name

    def greeting(self, name: str) -> str:
        return (
            f"¡Hola {name}! Soy {self.bot_name}, te ayudo a registrar initiatives de "
            "automatización e IA. ¿Qué proceso o tarea te gustaría mejorar?"
        )

    def proposal(self, proposal: Proposal) -> str:
        priority = Priority(proposal.priority)
        return PROPOSAL_TEMPLATE.format(
            title=proposal.title,
            short_description=proposal.short_description,
            priority=priority.value,
            priority_description=PRIORITY_DESCRIPTIONS[priority],
            difficulty=proposal.difficulty,
            difficulty_description=DIFFICULTY_DESCRIPTIONS[proposal.difficulty],
            impact_score=proposal.impact_score,
            impact_description=IMPACT_DESCRIPTIONS[proposal.impact_score],
            business_unit=proposal.business_unit or "Sin asignar",
            project=proposal.project or "Sin asignar",
            core_technology=proposal.core_technology,
            assignee=proposal.assignee_suggestion,
            labels=", ".join(proposal.suggested_labels) or "ninguna",
            description=proposal.description,
            impact=proposal.impact,
        )

    def ticket_created(self, receipt: TicketReceipt) -> str:
        return TICKET_CREATED_TEMPLATE.format(
            ticket_id=receipt.ticket_id,
            ticket_url=receipt.ticket_url,
        )

    def submission_failed(self) -> str:
        return (
            "Lo siento, hubo un error al crear el ticket. La propuesta sigue guardada: "
            "responde \"sí\" para intentarlo de nuevo."
        )

    def rejected(self) -> str:
        return (
            "Entendido, no se creará el ticket. Si necesitas ayuda en el futuro, "
            "no dudes en escribirme."
        )

    def modify_follow_up(self) -> str:
        return "¿Qué te gustaría cambiar del ticket propuesto?"

    def unclear(self) -> str:
        return (
            "No estoy seguro de haberte entendido. ¿Quieres que cree el ticket (\"sí\"), "
            "que lo descarte (\"no\") o prefieres cambiar algo?"
        )

    def completed_reminder(self, receipt: Optional[TicketReceipt]) -> str:
        filed = f" (ticket {receipt.ticket_id})" if receipt else ""
        return (
            f"Esta conversación ya está cerrada{filed}. Si quieres registrar otra "
            "initiative, escribe \"nueva initiative\" y empezamos de nuevo."
        )

    def apology(self) -> str:
        return "Lo siento, ha ocurrido un error procesando tu mensaje. ¿Puedes intentarlo de nuevo?"
