"""
Compliance Checker Routes
=========================

API route handlers for the Compliance Checker Service.
"""

from services.compliance_checker.routes import businesses, compliance, regulations


__all__ = ["businesses", "compliance", "regulations"]
