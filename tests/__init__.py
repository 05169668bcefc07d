"""
PayWay Relay Test Suite

This package contains all tests for the relay including:
- Unit tests for signing, transaction ids and request building
- Gateway response classification and pushback verification
- Adapter and handler tests against a mocked gateway
- HTTP endpoint tests
"""
