"""
BIZCOMPLY Test Suite
====================

Test organization:
- tests/unit/                          - Shared library tests (no external dependencies)
- tests/services/compliance_checker/   - Engine, service and route tests (mocked storage)

Run tests:
    pytest                          # All tests
    pytest tests/unit               # Unit tests only
    pytest --cov=shared             # With coverage
"""
