"""
Tests for authentication app.

This package contains test modules for:
- test_models.py: User model and UserManager tests
- test_services.py: EntitlementService tests

Usage:
    pytest authentication/tests/
"""
