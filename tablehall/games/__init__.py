"""
Games module - Game-specific implementations.

Each game has its own subpackage with:
- Card definitions
- Deck and hand models
- A rules engine implementing the shared action interface
"""
