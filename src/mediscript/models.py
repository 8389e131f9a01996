"""Pydantic data models for mediscript.

Input models (``Patient``, ``Prescription``) come from the form / roster
layer. Output models (``Analysis``, ``ComparisonResult``) are produced by
the review engine and are frozen once constructed.

All models accept and emit camelCase aliases (``overallScore``,
``needsHumanReview``) so payloads match the agents' JSON shape; Python
code uses the snake_case attribute names.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator, model_validator
from pydantic.alias_generators import to_camel

# Prior-medication status values treated as currently taken.
ACTIVE_MEDICATION_STATUSES = frozenset({"activo", "active"})

FINDING_CATEGORIES: tuple[str, ...] = ("allergies", "interactions", "dosage", "contraindications")


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


class _FrozenCamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# ── Enums ────────────────────────────────────────────────────────────


class ReviewStatus(str, Enum):
    """A reviewer's overall verdict."""

    APPROVED = "approved"
    WARNING = "warning"
    REJECTED = "rejected"


class AgreementLevel(str, Enum):
    """How closely the two reviewers' verdicts align."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# ── Patient / prescription (consumed) ────────────────────────────────


class Allergy(_CamelModel):
    """A known patient allergy."""

    allergen: str
    severity: str = ""
    reaction: Optional[str] = None
    notes: Optional[str] = None


class PriorMedication(_CamelModel):
    """A medication previously prescribed to the patient."""

    generic_name: str
    status: str
    concentration: str = ""
    route: str = ""
    dose: str = ""
    unit: str = ""
    frequency: str = ""
    indication: Optional[str] = None
    notes: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status.strip().lower() in ACTIVE_MEDICATION_STATUSES


class Patient(_CamelModel):
    """Patient record as supplied by the roster layer."""

    name: str = Field(min_length=1)
    birth_date: date
    weight_kg: float = Field(gt=0)
    allergies: list[Allergy] = Field(default_factory=list)
    prior_medications: list[PriorMedication] = Field(default_factory=list)

    @field_validator("birth_date")
    @classmethod
    def _birth_date_not_in_future(cls, v: date) -> date:
        if v > date.today():
            raise ValueError("birth date cannot be in the future")
        return v

    def age(self, today: date | None = None) -> int:
        """Age in whole years, counting a birthday only once it has passed."""
        today = today or date.today()
        years = today.year - self.birth_date.year
        if (today.month, today.day) < (self.birth_date.month, self.birth_date.day):
            years -= 1
        return years

    def allergen_names(self) -> list[str]:
        return [a.allergen for a in self.allergies]

    def active_medications(self) -> list[PriorMedication]:
        return [m for m in self.prior_medications if m.is_active]


class PrescribedMedication(_CamelModel):
    """One line of the prescription being evaluated."""

    name: str = Field(min_length=1)
    route: str = Field(min_length=1)
    dose: str = Field(min_length=1)
    unit: str = Field(min_length=1)
    single_dose: bool = False
    frequency: Optional[str] = None
    frequency_unit: Optional[str] = None

    @model_validator(mode="after")
    def _frequency_required_unless_single_dose(self) -> PrescribedMedication:
        if not self.single_dose and not (self.frequency or "").strip():
            raise ValueError("frequency is required when the medication is not a single dose")
        return self

    def describe(self) -> str:
        """Compact ``name dose+unit route`` line used in prompts."""
        text = f"{self.name} {self.dose}{self.unit} ({self.route})"
        if self.single_dose:
            return f"{text}, single dose"
        if self.frequency:
            return f"{text}, every {self.frequency} {self.frequency_unit or ''}".rstrip()
        return text


class Prescription(_CamelModel):
    """The prescription submitted for evaluation."""

    diagnosis: str = Field(min_length=3)
    medications: list[PrescribedMedication] = Field(min_length=1)

    @field_validator("diagnosis")
    @classmethod
    def _strip_diagnosis(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 3:
            raise ValueError("diagnosis must have at least 3 characters")
        return v


# ── Analysis (one per reviewer) ──────────────────────────────────────


class SafetyFinding(_FrozenCamelModel):
    """Allergy / interaction / contraindication sub-report."""

    safe: StrictBool
    issues: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)

    @property
    def flag(self) -> bool:
        return self.safe


class DosageFinding(_FrozenCamelModel):
    """Dose appropriateness sub-report."""

    appropriate: StrictBool
    issues: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)

    @property
    def flag(self) -> bool:
        return self.appropriate


class Findings(_FrozenCamelModel):
    """The four named sub-reports of an analysis."""

    allergies: SafetyFinding
    interactions: SafetyFinding
    dosage: DosageFinding
    contraindications: SafetyFinding

    def flag(self, category: str) -> bool:
        """Boolean safety flag of ``category`` (``appropriate`` for dosage)."""
        if category not in FINDING_CATEGORIES:
            raise KeyError(category)
        return getattr(self, category).flag


class Analysis(_FrozenCamelModel):
    """One reviewer's verdict on a prescription.

    ``status`` and ``overall_score`` are reported independently and are
    not cross-validated.
    """

    status: ReviewStatus
    overall_score: int = Field(ge=0, le=100)
    findings: Findings
    summary: str
    recommendations: list[str] = Field(default_factory=list)
    critical_alerts: list[str] = Field(default_factory=list)
    timestamp: Optional[datetime] = None


# ── Comparison (one per pair of analyses) ────────────────────────────


class StatusDiscrepancy(_FrozenCamelModel):
    """Status comparison carrying both raw verdicts."""

    primary: ReviewStatus
    secondary: ReviewStatus
    conflict: bool
    differences: list[str] = Field(default_factory=list)


class CategoryDiscrepancy(_FrozenCamelModel):
    """Per-category comparison record."""

    conflict: bool = False
    differences: list[str] = Field(default_factory=list)


class Discrepancies(_FrozenCamelModel):
    """The fixed set of five comparison records."""

    status: StatusDiscrepancy
    allergies: CategoryDiscrepancy = Field(default_factory=CategoryDiscrepancy)
    interactions: CategoryDiscrepancy = Field(default_factory=CategoryDiscrepancy)
    dosage: CategoryDiscrepancy = Field(default_factory=CategoryDiscrepancy)
    contraindications: CategoryDiscrepancy = Field(default_factory=CategoryDiscrepancy)


class ComparisonResult(_FrozenCamelModel):
    """Reconciled decision over two analyses."""

    needs_human_review: bool
    score_difference: int = Field(ge=0)
    agreement: AgreementLevel
    discrepancies: Discrepancies
    final_recommendation: str
    comparison_summary: str


class EvaluationReport(_FrozenCamelModel):
    """Everything the presentation layer receives for one submission."""

    primary: Analysis
    secondary: Analysis
    comparison: ComparisonResult
    reviewers: list[str] = Field(default_factory=list)
    session_id: str = ""
    degraded: bool = False


# ── Session analytics ────────────────────────────────────────────────


class StageMetrics(BaseModel):
    """Timing for one stage of an evaluation (a review or the reconciliation)."""

    stage: str
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    duration_ms: float = 0.0
    succeeded: bool = True
    error: str = ""


class EvaluationSession(BaseModel):
    """Per-submission analytics, collected through ``hooks.session_tracker``."""

    session_id: str
    started_at: datetime
    ended_at: Optional[datetime] = None
    status: str = "running"
    stages: list[StageMetrics] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    degraded: bool = False
    total_duration_ms: float = 0.0

    def finalize(self) -> None:
        self.ended_at = datetime.now(self.started_at.tzinfo)
        self.total_duration_ms = (self.ended_at - self.started_at).total_seconds() * 1000
        if self.status == "running":
            self.status = "completed"
