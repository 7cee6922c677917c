"""Core utilities for IceBento.

Includes:
    LOCATIONS: The mesh elements that a Field can be defined on.
    Field: A class for storing data fields.
"""

import jax.numpy as jnp
import equinox as eqx


LOCATIONS = ["cell", "vertex", "edge"]


class Field(eqx.Module):
    """Stores spatially variable data.

    Layered fields keep the mesh element on their last axis, so a velocity
    with one value per layer per edge has shape (level, edge) and location
    "edge".

    Attributes:
        value: An array-like object containing the data.
        units: A string indicating the units of the data.
        location: A string indicating the location of the data.
    """
    value: jnp.ndarray = eqx.field(converter = jnp.asarray)
    units: str = eqx.field(converter = str)
    location: str = eqx.field(converter = str)

    def __post_init__(self):
        if self.location not in LOCATIONS:
            raise ValueError("Invalid location for field.")
