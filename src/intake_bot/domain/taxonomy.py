"""
Business-unit and project taxonomy used to tag proposals.

Tags are inferred by keyword scoring over the transcript when the oracle does
not provide them, and the same data is rendered into the generation prompt.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class BusinessUnit:
    name: str
    keywords: tuple[str, ...]
    projects: tuple[str, ...]


@dataclass(frozen=True)
class Project:
    name: str
    keywords: tuple[str, ...]
    business_units: tuple[str, ...]


@dataclass(frozen=True)
class ExampleInitiative:
    title: str
    business_unit: str
    project: str
    short_description: str
    impact: str
    core_technology: str


def _keyword_score(text: str, keywords: tuple[str, ...]) -> int:
    # Prefix match so "factura" also counts "facturas" and "facturación"
    return sum(1 for keyword in keywords if re.search(rf"\b{re.escape(keyword)}", text))


@dataclass
class Taxonomy:
    """Fixed categorical taxonomy with keyword-based inference."""

    business_units: list[BusinessUnit] = field(default_factory=list)
    projects: list[Project] = field(default_factory=list)
    examples: list[ExampleInitiative] = field(default_factory=list)

    def business_unit_names(self) -> list[str]:
        return [unit.name for unit in self.business_units]

    def project_names(self) -> list[str]:
        return [project.name for project in self.projects]

    def infer_business_unit(self, text: str) -> Optional[str]:
        """Return the business unit whose keywords match the text best, if any."""
        text = text.lower()
        best_match: Optional[str] = None
        max_score = 0

        for unit in self.business_units:
            score = _keyword_score(text, unit.keywords)
            if score > max_score:
                max_score = score
                best_match = unit.name

        return best_match

    def infer_project(self, text: str, business_unit: Optional[str] = None) -> Optional[str]:
        """
        Return the best matching project.

        When a business unit is given only its projects are considered.
        """
        text = text.lower()
        best_match: Optional[str] = None
        max_score = 0

        for project in self.projects:
            if business_unit and business_unit not in project.business_units:
                continue
            score = _keyword_score(text, project.keywords)
            if score > max_score:
                max_score = score
                best_match = project.name

        return best_match

    def describe(self) -> str:
        """Render the taxonomy as prompt context."""
        lines = ["BUSINESS UNITS (departamentos principales):"]
        lines.extend(f"- {unit.name}: {', '.join(unit.projects)}" for unit in self.business_units)
        lines.append("")
        lines.append("PROJECTS (áreas de trabajo dentro de cada BU):")
        lines.extend(
            f"- {project.name}: pertenece a {' o '.join(project.business_units)}"
            for project in self.projects
        )
        if self.examples:
            lines.append("")
            lines.append("EJEMPLOS REALES de initiatives:")
            lines.extend(
                f'- "{example.title}" -> BU: {example.business_unit}, Project: {example.project}, '
                f"Tech: {example.core_technology}, Impact: {example.impact}"
                for example in self.examples
            )
        return "\n".join(lines)


DEFAULT_TAXONOMY = Taxonomy(
    business_units=[
        BusinessUnit(
            name="Finance",
            keywords=(
                "pricing", "invoice", "invoicing", "financial", "fraud", "debt", "accounting",
                "payment", "receivable", "payable", "billing", "consolidation", "finance",
                "cost", "expense", "factura", "precio", "pago", "contabilidad", "fraude",
                "finanzas", "coste",
            ),
            projects=("Pricing", "Invoicing", "Accounting"),
        ),
        BusinessUnit(
            name="Sales",
            keywords=(
                "offer", "proposal", "bid", "tender", "customer", "negotiation", "crafter",
                "sales", "selling", "rfp", "quotation", "oferta", "cliente", "ventas",
                "presupuesto",
            ),
            projects=("Processing", "Negotiation"),
        ),
        BusinessUnit(
            name="Legal",
            keywords=(
                "contract", "legal", "compliance", "advisory", "regulatory", "law", "agreement",
                "terms", "contrato", "cumplimiento", "normativa",
            ),
            projects=("Advisory", "Compliance"),
        ),
        BusinessUnit(
            name="HR",
            keywords=(
                "employee", "talent", "recruitment", "onboarding", "attrition", "career",
                "upskilling", "sentiment", "nps", "hr", "human resources", "people", "retention",
                "satisfaction", "training", "empleado", "rrhh", "formación", "formacion",
                "selección", "talento",
            ),
            projects=("NPS", "Upskilling", "Retention", "Reporting"),
        ),
        BusinessUnit(
            name="Procurement",
            keywords=(
                "supplier", "procurement", "purchasing", "rfp", "spend", "acquisition", "vendor",
                "sourcing", "buying", "proveedor", "compras", "aprovisionamiento",
            ),
            projects=("Negotiation", "Operations", "Outbound", "Reporting"),
        ),
    ],
    projects=[
        Project("Pricing", ("pricing", "discount", "margin", "price", "cost", "precio", "descuento", "margen"), ("Finance",)),
        Project("Processing", ("processing", "automation", "rpa", "workflow", "process", "automatiza", "proceso"), ("Sales", "Procurement")),
        Project("Advisory", ("contract", "legal", "compliance", "advisory", "consulting", "advice", "contrato", "asesor"), ("Legal",)),
        Project("Invoicing", ("invoice", "billing", "payment", "collection", "receivable", "payable", "factura", "cobro", "pago"), ("Finance",)),
        Project("Negotiation", ("negotiation", "supplier", "customer", "deal", "bargain", "negociación", "negociacion"), ("Procurement", "Sales")),
        Project("NPS", ("employee", "sentiment", "satisfaction", "nps", "onboarding", "chatbot", "experience", "empleado", "satisfacción"), ("HR",)),
        Project("Upskilling", ("career", "training", "upskilling", "learning", "development", "education", "formación", "formacion", "carrera"), ("HR",)),
        Project("Retention", ("attrition", "retention", "turnover", "quit", "leave", "rotación", "retención"), ("HR",)),
        Project("Reporting", ("reporting", "analytics", "insight", "dashboard", "analysis", "informe", "análisis", "cuadro de mando"), ("HR", "Procurement", "Finance")),
        Project("Compliance", ("compliance", "regulatory", "risk", "audit", "regulation", "auditoría", "riesgo", "normativa"), ("Legal",)),
        Project("Accounting", ("accounting", "financial", "consolidation", "ledger", "reconciliation", "contabilidad", "conciliación"), ("Finance",)),
        Project("Operations", ("operations", "inquiry", "handling", "operational", "consulta", "operaciones"), ("Procurement",)),
        Project("Outbound", ("rfp", "outbound", "request", "solicitud"), ("Procurement",)),
    ],
    examples=[
        ExampleInitiative("Agile pricing", "Finance", "Pricing", "AI for pricing and discount margins", "Reduced repetitive tasks", "Predictive AI"),
        ExampleInitiative("Contract concierge", "Legal", "Advisory", "Virtual assistant for legal documents", "Increased productivity", "IDP + GenAI"),
        ExampleInitiative("Employee desk", "HR", "NPS", "Virtual assistant chatbot for employee issues", "Increased productivity", "GenAI (Chatbot)"),
        ExampleInitiative("Invoice AutoFlow", "Finance", "Invoicing", "Automated invoice processing", "Increased efficiency", "RPA + IDP"),
        ExampleInitiative("FraudFinder AI", "Finance", "Invoicing", "Fraudulent transactions detection", "Reduce time on investigations", "IDP + Predictive AI"),
        ExampleInitiative("Automated supplier inquiry handling", "Procurement", "Operations", "Automate supplier interactions", "Increased efficiency", "RPA + GenAI"),
    ],
)
