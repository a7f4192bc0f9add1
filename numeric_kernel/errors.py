"""
Exception types for caller programming errors.

Numerical out-of-domain inputs never raise: they saturate to documented
values. These exceptions only flag inputs the kernel cannot interpret at all.
"""
from __future__ import annotations


class KernelError(Exception):
    """Base class for numeric_kernel errors."""


class ScalarConversionError(KernelError, TypeError):
    """Input could not be turned into a finite Decimal (floats included)."""


class InsufficientDataError(KernelError, ValueError):
    """An input sequence the operation requires was empty."""
