"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Chat message display with live streaming updates
    - Conversation sidebar with new/switch actions
    - Copy, reaction, delete, clear and export actions

Contains no stream or state-transition logic. Delegates to ``src.chat``.
"""
