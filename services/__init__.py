"""
BIZCOMPLY Services
==================

Services for the bizcomply small-business compliance platform.

Services:
- compliance_checker: Regulation applicability, compliance scoring,
  business profiles and the regulation catalogue
"""

__all__ = [
    "compliance_checker",
]
