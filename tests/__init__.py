"""
Test suite for floatlab

Contains:
- tests/unit/          : Unit tests for individual modules
"""
