"""Utility module for Appcast Notifier.

This module provides cross-cutting utilities:
- Logging: Configured logging with secret redaction
- Validators: Input validation for URLs, versions and intervals
- Threading: Background worker for update checks
"""
