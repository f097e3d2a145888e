"""
Test suite for the load plan parser.

Run all tests: pytest
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_load_plan_parser.py -v
"""
