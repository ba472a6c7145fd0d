"""Test package for the chat relay.

Unit tests for isolated logic and integration tests for the relay app.

Structure:
    - unit/: Parser, chunk decoding, reducer, store, config and client tests
    - integration/: Relay endpoint and client-to-upstream workflows

The upstream API is always an httpx.MockTransport; no network is needed.
Leverages pytest with pytest-check for soft assertions.
"""
