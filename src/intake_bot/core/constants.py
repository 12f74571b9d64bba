"""
System-wide constants for the intake bot.
"""

from enum import Enum


# =============================================================================
# Enums
# =============================================================================


class MessageSender(str, Enum):
    """Who wrote a message in a conversation."""

    USER = "user"
    BOT = "bot"


class ConversationState(str, Enum):
    """Conversation lifecycle states."""

    ACTIVE = "active"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    COMPLETED = "completed"


class FeedbackAction(str, Enum):
    """What the user wants done with a pending proposal."""

    CONFIRM = "confirm"
    REJECT = "reject"
    MODIFY = "modify"
    UNCLEAR = "unclear"


class Confidence(str, Enum):
    """Confidence levels reported by the oracle-backed components."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Priority(str, Enum):
    """Ticket priorities, P0 being the most urgent."""

    P0 = "P0"
    P1 = "P1"
    P2 = "P2"
    P3 = "P3"


# =============================================================================
# API Constants
# =============================================================================

API_VERSION = "v1"
API_PREFIX = f"/api/{API_VERSION}"

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# =============================================================================
# Proposal Constants
# =============================================================================

MIN_SCORE = 1
MAX_SCORE = 3

# difficulty + impact_score -> priority; sums not listed fall back to P3
PRIORITY_BY_TOTAL_SCORE = {
    6: Priority.P0,
    5: Priority.P1,
    4: Priority.P2,
    3: Priority.P2,
    2: Priority.P3,
}

PRIORITY_DESCRIPTIONS = {
    Priority.P0: "Crítica - Impacto máximo",
    Priority.P1: "Alta - Impacto significativo",
    Priority.P2: "Media - Impacto moderado",
    Priority.P3: "Baja - Mejora menor",
}

DIFFICULTY_DESCRIPTIONS = {1: "Simple", 2: "Media", 3: "Compleja"}
IMPACT_DESCRIPTIONS = {1: "Menor", 2: "Significativo", 3: "Crítico"}

UNDETERMINED = "Por determinar"
DEFAULT_ORIGIN = "teams"
DEFAULT_ASSIGNEE = "AI Team"
ASSIGNEE_OPTIONS = ("AI Team", "Tech Team", "Product Team")

FALLBACK_PROPOSAL_TITLE = "Initiative reportada desde Teams"
FALLBACK_PROPOSAL_SUMMARY = "Initiative de automatización/IA"
FALLBACK_PROPOSAL_LABELS = ("teams", "auto-generated")

# =============================================================================
# Conversation Vocabulary
# =============================================================================

GREETING_WORDS = frozenset({
    "hola", "holi", "buenas", "buenos", "dias", "días", "tardes", "noches",
    "hey", "hi", "hello", "saludos", "qué", "que", "tal", "good", "morning",
    "afternoon", "evening", "sapira",
})

NEW_TOPIC_PHRASES = (
    "nuevo tema",
    "nueva initiative",
    "nueva iniciativa",
    "nueva idea",
    "otra initiative",
    "otra iniciativa",
    "otra idea",
    "empezar de nuevo",
    "empezar otra vez",
    "new topic",
    "new initiative",
    "start over",
)

CONFIRM_WORDS = frozenset({
    "sí", "ok", "okay", "vale", "perfecto", "correcto", "adelante", "crear",
    "créalo", "crealo", "confirmo", "confirmar", "yes", "yep", "sure", "confirm",
    "dale",
})

# Ambiguous on their own ("si" is also "if"), only trusted as the opening word
LEADING_CONFIRM_WORDS = CONFIRM_WORDS | {"si", "go"}

REJECT_WORDS = frozenset({"no", "cancelar", "cancela", "cancel", "nope", "descartar"})

REJECT_PHRASES = (
    "mejor no",
    "no crear",
    "no lo crees",
    "no hace falta",
    "don't create",
    "do not create",
)
