"""Pydantic model classes for the common processors."""

# System modules
from typing import Optional

# Third party modules
from pydantic import (
    confloat,
    conint,
    conlist,
    field_validator,
)

# Local modules
from D3DR.models import D3DRBaseModel


class FindNormConfig(D3DRBaseModel):
    """p-norm configuration class.

    :ivar p: The p-space value of the norm, defaults to `2.0`.
    :type p: float, optional
    """
    p: Optional[float] = 2.0

    @field_validator('p')
    @classmethod
    def validate_p(cls, p):
        """Validate the p-space value.

        :param p: The p-space value.
        :type p: float
        :raises ValueError: If `p` is negative.
        :return: The p-space value.
        :rtype: float
        """
        if p < 0:
            raise ValueError(
                'p-space value must be greater than or equal to 0 '
                f'(error -11002, got {p})')
        return p


class ImageGeometryConfig(D3DRBaseModel):
    """Image geometry configuration class.

    :ivar dimensions: Number of cells along x, y and z.
    :type dimensions: list[int]
    :ivar spacing: Cell size along x, y and z,
        defaults to `[1.0, 1.0, 1.0]`.
    :type spacing: list[float], optional
    :ivar origin: Coordinates of the corner of the first cell,
        defaults to `[0.0, 0.0, 0.0]`.
    :type origin: list[float], optional
    """
    dimensions: conlist(item_type=conint(ge=1), min_length=3, max_length=3)
    spacing: Optional[conlist(
        item_type=confloat(gt=0, allow_inf_nan=False),
        min_length=3, max_length=3)] = [1.0, 1.0, 1.0]
    origin: Optional[conlist(
        item_type=confloat(allow_inf_nan=False),
        min_length=3, max_length=3)] = [0.0, 0.0, 0.0]

    @property
    def num_cells(self):
        """Return the total number of cells."""
        return self.dimensions[0] * self.dimensions[1] * self.dimensions[2]


class AverageVertexConfig(D3DRBaseModel):
    """Vertex averaging configuration class.

    :ivar num_vertices: Number of vertices of the geometry, defaults
        to one more than the largest vertex index in the connectivity.
    :type num_vertices: int, optional
    """
    num_vertices: Optional[conint(ge=0)] = None
