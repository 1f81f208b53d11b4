"""
Kernel layer.

This package groups the deterministic integer kernels used by the exchange.
`neuswap/kernels/python/` holds small, human-readable implementations with
explicit rounding; `neuswap.core` wraps them with domain errors.
"""
