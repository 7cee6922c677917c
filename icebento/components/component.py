"""Base class shared by the process models that run on a MeshGeometry.

A Component declares which fields it reads and writes, and where on the mesh
each one lives, so that a driver can check a StateSnapshot before handing it
over. Numerical work happens in run_one_step(), which stays free of host-side
checks so it can be wrapped in jax.jit; checks on concrete arrays belong in
check_fields() or a Component's own validate().
"""

import equinox as eqx
from abc import abstractmethod
from icebento.core import Field
from icebento.utils import MeshGeometry, SIAConfig, StateSnapshot, MissingField, ShapeMismatch


class Component(eqx.Module):
    """A process model bound to one mesh and one set of physical constants.

    Subclasses fill in input_fields and output_fields and implement
    run_one_step(dt, snapshot), which maps a StateSnapshot to a dict of output
    Fields. Without an explicit SIAConfig the default constants are used.

    Attributes:
        mesh: The MeshGeometry object that the Component operates on.
        config: The physical constants used by the Component.
        input_fields: A dictionary with {name: location} of all input fields.
        output_fields: A dictionary with {name: location} of all output fields.

    Methods:
        with_config: Return a copy of the Component with new constants.
        check_fields: Check that the snapshot has every field, in the right place.
        run_one_step: Advance the model by one time step.
    """

    _mesh: MeshGeometry
    config: SIAConfig
    input_fields: dict[str, str]
    output_fields: dict[str, str]

    @abstractmethod
    def __init__(self, mesh, config = None):
        """Components should be able to be instantiated with only a mesh."""
        self._mesh = mesh
        self.config = SIAConfig() if config is None else config

    def with_config(self, config: SIAConfig) -> "Component":
        """Return a copy of the Component that uses different constants."""
        return eqx.tree_at(lambda component: component.config, self, config)

    def check_fields(self, snapshot: StateSnapshot) -> None:
        """Check that all required fields are present in the correct locations."""
        required = {**self.input_fields, **self.output_fields}

        for name, location in required.items():
            field = getattr(snapshot, name, None)

            if field is None:
                raise MissingField(f"Field {name} is required but not provided.")

            if field.location != location:
                raise ShapeMismatch(f"Field {name} must be defined on mesh element: {location}.")

            if field.value.ndim == 0 or field.value.shape[-1] != self._mesh.number_of_elements(location):
                raise ShapeMismatch(
                    f"Field {name} must have {self._mesh.number_of_elements(location)} "
                    f"values at each {location}."
                )

    @abstractmethod
    def run_one_step(self, dt: float, snapshot: StateSnapshot) -> dict[str, Field]:
        """Advance the model by one time step."""
        pass
