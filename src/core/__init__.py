"""
Core datum codec, swap math, domain models, and invariants.

This module contains the foundational building blocks that are independent
of external systems (chain data providers, APIs, wallets, etc.).
"""
