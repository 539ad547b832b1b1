"""
Compliance Checker Service
==========================

Small-business regulation applicability and compliance scoring service.

Features:
- Applicable-regulation selection by jurisdiction, industry and size
- Compliance score, risk level, deadlines and recommendations
- Business profile management and compliance history
- Regulation catalogue browsing and full-text search

Port: 5000
"""

__version__ = "0.1.0"
