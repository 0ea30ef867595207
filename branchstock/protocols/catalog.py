"""
Catalog Protocol — Interface for product/branch validation.

Branchstock defines this protocol, the host project's catalog implements it.
The ledger only needs to know whether an id refers to something real.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class CatalogBackend(Protocol):
    """
    Protocol for product and branch existence checks.

    Called before every stock mutation when
    BRANCHSTOCK['VALIDATE_REFERENCES'] is enabled.
    """

    def product_exists(self, product_id: int) -> bool:
        """
        Check if a product exists.

        Args:
            product_id: Product primary key

        Returns:
            True if the product can hold stock
        """
        ...

    def branch_exists(self, branch_id: int) -> bool:
        """
        Check if a branch exists.

        Args:
            branch_id: Branch primary key

        Returns:
            True if the branch can hold stock
        """
        ...
