"""
Core types for shoply.

Re-exports from kungfu + domain-wide aliases.
"""

from __future__ import annotations

from kungfu import Result, Ok, Error, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Identity Aliases
# ═══════════════════════════════════════════════════════════════════════════════

type OwnerId = str
"""Authenticated user id. Partitions cart lines and orders."""

type ProductId = str
"""Catalog product id."""

type OrderId = str
"""Client-generated order id (UUID string)."""

type Cents = int
"""Money in minor units. Never a float."""

# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Aliases
    "OwnerId",
    "ProductId",
    "OrderId",
    "Cents",
)
