"""Core: configuration, domain models, contracts and orchestration.

The core does not print; user-facing output belongs to `cli`.
"""
