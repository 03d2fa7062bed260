"""Test suite for contactflow.

This package contains tests for:
- Field validation rules and UI side effects
- The pipeline state machine and event stream
- Submission tracker, debounce helper and notifications
- The HTTP transport against a mock endpoint
- End-to-end submit scenarios (success, invalid input, spam, duplicates, failures)
"""
