"""Unit tests for individual components in isolation.

Coverage:
    - streaming/: Incremental line parsing across chunk boundaries
    - models/: Stream chunk decoding and precedence
    - chat/: Reducer, conversation store, client and controller
    - relay/: Configuration and upstream relaying

Follows single responsibility per test function. Leverages pytest-check
for multiple assertions per test.
"""
