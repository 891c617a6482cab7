"""Core interfaces/abstractions.

Why:
- Contracts (Protocol) implemented by concrete adapters.
- The core depends on abstractions, so tests can swap in fakes.
"""
