"""Bit flags for the land-ice classification masks.

The classification itself (which edges are thick enough to flow, which are
floating, and so on) is done upstream; here we only name the bits and test
them.
"""

import enum
import jax.numpy as jnp


class EdgeMask(enum.IntFlag):
    """Bits of the integer mask carried on cells, edges and vertices."""
    ICE = 1
    DYNAMIC_ICE = 2
    FLOATING = 4
    MARGIN = 8
    DYNAMIC_MARGIN = 16
    INITIAL_ICE_EXTENT = 32


def is_dynamic_ice(mask):
    """Return True where the mask marks actively flowing ice."""
    mask = int(mask) if isinstance(mask, int) else jnp.asarray(mask)
    return jnp.bitwise_and(mask, int(EdgeMask.DYNAMIC_ICE)) != 0
