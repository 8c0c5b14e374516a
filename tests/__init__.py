"""
Test suite for dex-datum-core

Contains:
- tests/unit/          : Unit tests for the datum codec, contracts, swap math,
                         domain models and the SaturnSwap connector
"""
