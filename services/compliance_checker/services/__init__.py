"""
Compliance Checker Services
===========================

Business logic for the compliance checker.

Services:
- select_candidate_regulations: Applicable-regulation selection
- ComplianceEvaluator: Score, risk, deadlines and recommendations
- RegulationRepository: Regulation corpus and catalogue reads
- BusinessService: Business profile management
- ComplianceService: Compliance check orchestration and history

Version: 0.1.0
"""

from services.compliance_checker.services.applicability import (
    DEFAULT_RULES,
    ApplicabilityRules,
    select_candidate_regulations,
)
from services.compliance_checker.services.businesses import BusinessService
from services.compliance_checker.services.compliance import (
    ComplianceService,
    compliance_cache_key,
)
from services.compliance_checker.services.evaluator import (
    ComplianceEvaluator,
    ScoreBreakdown,
    ScoringRules,
)
from services.compliance_checker.services.jurisdictions import (
    JurisdictionLabels,
    jurisdiction_labels,
)
from services.compliance_checker.services.regulations import RegulationRepository


__all__ = [
    # Applicability
    "ApplicabilityRules",
    "DEFAULT_RULES",
    "select_candidate_regulations",
    "JurisdictionLabels",
    "jurisdiction_labels",
    # Evaluation
    "ComplianceEvaluator",
    "ScoreBreakdown",
    "ScoringRules",
    # Data access
    "RegulationRepository",
    "BusinessService",
    "ComplianceService",
    "compliance_cache_key",
]
