"""Entry points for driving the SIA velocity solver from a host model.

A host driver calls init() once per run, block_init() once per mesh block,
then solve() once per time step per block, and finalize() at the end. These
return ErrorCode values rather than raising, so that a driver can decide
whether to abort the time step or the run. Only the velocity at the
requested time level ever changes.
"""

import logging
from typing import NamedTuple
from icebento.components import ShallowIceApproximation
from icebento.utils import (
    ErrorCode,
    SIAError,
    MissingField,
    MeshGeometry,
    FieldStore,
    SIAConfig,
    is_dynamic_ice
)

logger = logging.getLogger(__name__)


class SolveResult(NamedTuple):
    """Outcome of a velocity solve.

    On failure, field_store is the store that was passed in, untouched.
    """
    error: ErrorCode
    field_store: FieldStore

    @property
    def ok(self) -> bool:
        return self.error == ErrorCode.SUCCESS


def init(domain) -> ErrorCode:
    """No setup is needed for the SIA solver."""
    return ErrorCode.SUCCESS


def block_init(block) -> ErrorCode:
    """No per-block setup is needed for the SIA solver."""
    return ErrorCode.SUCCESS


def solve(
    mesh: MeshGeometry,
    field_store: FieldStore,
    time_level: int,
    config: SIAConfig = None
) -> SolveResult:
    """Compute the normal velocity on edges for each layer at one time level.

    Every input is checked before anything is written; a failed check is
    reported through the error code of the result. The config has no
    default: leaving it out is reported as MISSING_FIELD.
    """
    try:
        if config is None:
            raise MissingField("No SIAConfig was provided.")

        snapshot = field_store.get(time_level)
        sia = ShallowIceApproximation(mesh, config)
        sia.validate(snapshot)
        output = sia.run_one_step(0.0, snapshot)
        updated = field_store.with_normal_velocity(time_level, output['normal_velocity'].value)

    except SIAError as error:
        logger.error(f"An error has occurred in the SIA solve ({error.code.name}): {error}")
        return SolveResult(error.code, field_store)

    logger.debug(
        f"SIA velocity on {int(is_dynamic_ice(snapshot.edge_mask.value).sum())} "
        f"of {mesh.number_of_edges} edges at time level {time_level}."
    )

    return SolveResult(ErrorCode.SUCCESS, updated)


def finalize(domain) -> ErrorCode:
    """No cleanup is needed for the SIA solver."""
    return ErrorCode.SUCCESS
