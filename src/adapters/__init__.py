"""Adapters: filesystem, YAML and subprocess access.

Each module implements one concrete concern used by `core.services`.
"""
