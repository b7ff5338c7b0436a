"""
Tablehall - Cooperative card-game campaign engine

A deterministic, rules-driven engine for a cooperative boss-battling card
game played by one to four players. The engine provides:
- Card, deck and hand models
- A turn and phase state machine with explicit action results
- Session management with lobbies and inactivity expiry
- A REST API and a hot-seat terminal game
"""

__version__ = "0.1.0"
