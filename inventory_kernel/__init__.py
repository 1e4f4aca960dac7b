"""
Inventory Kernel

An append-only stock ledger for a small shop's inventory and billing:
- Stock on hand derived from signed movements, never stored
- Atomic sale / purchase submission
- Immutable movements and sales (corrections are offsetting inserts)
- Typed, code-carrying errors and structured JSON logging
"""

__version__ = "0.1.0"
