"""
Prompt templates for the readiness, guidance, generation and feedback calls.

All wording lives in PROMPT_TEMPLATES; everything that varies between
deployments (persona, tone, taxonomy, vocabularies) is a named field of
PromptRubric.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from intake_bot.core.constants import ASSIGNEE_OPTIONS
from intake_bot.domain.proposal import Proposal
from intake_bot.domain.taxonomy import DEFAULT_TAXONOMY, Taxonomy

PROMPT_TEMPLATES = {
    "readiness": """
Eres {bot_name}, un asistente para la gestión de initiatives de automatización e IA en {organization}.
Analiza esta conversación:

{transcript}

¿Hay suficiente información para redactar una initiative coherente?

CRITERIOS (deben cumplirse TODOS):
{criteria}

Si tienes dudas, responde false: es mejor hacer una pregunta más que proponer
una initiative vaga.

Responde SOLO: true o false""",

    "guide": """
Eres {bot_name}, asistente especializado en initiatives de automatización e IA para {organization}.
Tu tono es {tone}.

Conversación hasta ahora:
{transcript}

INSTRUCCIONES:
- Haz UNA pregunta específica para entender mejor la initiative propuesta
- Mantén la respuesta corta (máximo {max_reply_sentences} frases)
- No repitas preguntas ya hechas

INFORMACIÓN ÚTIL A OBTENER:
{topics}

Responde SOLO con tu siguiente pregunta o mensaje (sin prefijos como "{bot_name}:"):""",

    "proposal": """
Conversación sobre una initiative de automatización/IA:
{transcript}

CONTEXTO DE {organization_upper}:
{taxonomy}

Genera una initiative basada en esta conversación. Responde SOLO con JSON válido:

{{
  "title": "Nombre descriptivo de la initiative (máx 100 chars)",
  "short_description": "Descripción breve del alcance en 1 línea",
  "description": "Descripción detallada con contexto completo",
  "impact": "Impacto en el negocio",
  "core_technology": "Tecnología core a usar",
  "difficulty": 1|2|3,
  "impact_score": 1|2|3,
  "priority": "P0|P1|P2|P3",
  "business_unit": "{business_units}",
  "project": "{projects}",
  "suggested_labels": ["etiqueta1", "etiqueta2"],
  "assignee_suggestion": "{assignees}",
  "confidence": "high|medium|low"
}}

TECNOLOGÍAS CORE COMUNES:
{technologies}

IMPACTOS COMUNES:
{impacts}

DIFFICULTY (complejidad técnica):
- 1: Solución simple, tecnología madura, pocas integraciones
- 2: Complejidad media, requiere integración, desarrollo moderado
- 3: Alta complejidad, tecnología emergente, múltiples sistemas

IMPACT_SCORE (impacto en negocio):
- 1: Mejora menor, afecta pocos usuarios/procesos
- 2: Mejora significativa, afecta departamento
- 3: Impacto crítico, afecta toda la organización

PRIORIDAD (difficulty + impact_score): 6 -> P0, 5 -> P1, 3-4 -> P2, 2 -> P3

LABELS COMUNES:
{labels}

CONFIDENCE:
- high: initiative clara con tecnología e impacto bien definidos
- medium: initiative identificada pero faltan algunos detalles
- low: idea vaga o información incompleta""",

    "feedback": """
El usuario ha respondido a una propuesta de initiative: "{utterance}"
Propuesta actual: {proposal}

Clasifica la respuesta del usuario:

- confirm: acepta la propuesta ("sí", "ok", "perfecto", "adelante"), también si pide
  un retoque menor sin cambiar el fondo.
  {{"action": "confirm", "confidence": "high|medium|low"}}
- reject: no quiere crear la initiative ("no", "cancelar", "mejor no").
  {{"action": "reject", "confidence": "high|medium|low"}}
- modify: pide cambios de alcance o contenido.
  {{"action": "modify", "changes": "qué quiere cambiar", "natural_response": "respuesta breve para el usuario", "confidence": "high|medium|low"}}
- unclear: pregunta algo o la respuesta no se entiende.
  {{"action": "unclear", "natural_response": "pregunta aclaratoria breve", "confidence": "high|medium|low"}}

Responde SOLO con JSON válido:""",
}


def _bullets(items: tuple[str, ...]) -> str:
    return "\n".join(f"- {item}" for item in items)


@dataclass
class PromptRubric:
    """Named parameters shared by every oracle prompt."""

    bot_name: str = "Sapira"
    organization: str = "Gonvarri"
    tone: str = "amigable, profesional y eficiente"
    max_reply_sentences: int = 2
    taxonomy: Taxonomy = field(default_factory=lambda: DEFAULT_TAXONOMY)
    readiness_criteria: tuple[str, ...] = (
        "Se identifica el problema o proceso que se quiere mejorar",
        "Se menciona (o se puede inferir) una tecnología o enfoque: IA, RPA, Analytics, IDP, GenAI...",
        "Se indica un beneficio o impacto esperado, aunque sea aproximado",
        "Hay concreción suficiente para escribir una descripción coherente",
    )
    discovery_topics: tuple[str, ...] = (
        "¿Qué proceso o tarea se quiere automatizar o mejorar?",
        "¿Qué tecnología se considera usar? (IA, RPA, Analytics, IDP, GenAI...)",
        "¿Cuál es el impacto esperado en el negocio? (reducción de costes, eficiencia...)",
        "¿Qué departamento o Business Unit se beneficiaría?",
        "¿Cuál es la complejidad técnica estimada?",
    )
    technologies: tuple[str, ...] = (
        "GenAI (Chatbot) - asistentes virtuales",
        "GenAI (Copilot) - asistentes de trabajo",
        "GenAI (Translation) - traducción",
        "Predictive AI - predicciones y detección",
        "RPA - automatización de procesos",
        "IDP - procesamiento inteligente de documentos",
        "Advanced Analytics - análisis avanzados",
        'Combinaciones: "RPA + IDP", "GenAI + Analytics", "IDP + Predictive AI"',
    )
    impacts: tuple[str, ...] = (
        "Reduced repetitive tasks",
        "Increased productivity",
        "Reduced processing costs",
        "Improve decision-making",
        "Reduce time on investigations",
    )
    labels: tuple[str, ...] = (
        "automation", "ai", "rpa", "genai", "predictive-ai", "analytics", "idp",
        "finance", "operations", "hr", "sales", "process-improvement",
    )

    def readiness_prompt(self, transcript: str) -> str:
        return PROMPT_TEMPLATES["readiness"].format(
            bot_name=self.bot_name,
            organization=self.organization,
            transcript=transcript,
            criteria=_bullets(self.readiness_criteria),
        )

    def guide_prompt(self, transcript: str) -> str:
        return PROMPT_TEMPLATES["guide"].format(
            bot_name=self.bot_name,
            organization=self.organization,
            tone=self.tone,
            transcript=transcript,
            max_reply_sentences=self.max_reply_sentences,
            topics=_bullets(self.discovery_topics),
        )

    def proposal_prompt(self, transcript: str) -> str:
        return PROMPT_TEMPLATES["proposal"].format(
            transcript=transcript,
            organization_upper=self.organization.upper(),
            taxonomy=self.taxonomy.describe(),
            business_units="|".join(self.taxonomy.business_unit_names()),
            projects="|".join(self.taxonomy.project_names()),
            assignees="|".join(ASSIGNEE_OPTIONS),
            technologies=_bullets(self.technologies),
            impacts=_bullets(self.impacts),
            labels=", ".join(self.labels),
        )

    def feedback_prompt(self, utterance: str, proposal: Proposal) -> str:
        return PROMPT_TEMPLATES["feedback"].format(
            utterance=utterance,
            proposal=json.dumps(proposal.model_dump(mode="json"), ensure_ascii=False),
        )
