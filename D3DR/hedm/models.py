"""HEDM Pydantic model classes."""

# System modules
from typing import (
    Literal,
    Optional,
)

# Third party modules
from pydantic import (
    confloat,
    conlist,
    constr,
    model_validator,
)

# Local modules
from D3DR.models import D3DRBaseModel

ColumnName = Literal[
    'Euler1', 'Euler2', 'Euler3', 'Confidence', 'Phase', 'X', 'Y']


class MicPhase(D3DRBaseModel):
    """Class representing one crystallographic phase of a mic file.

    :ivar phase_index: The phase index as stored in the file,
        defaults to `0`.
    :type phase_index: int, optional
    :ivar lattice_constants: The lattice constants
        (a, b, c, alpha, beta, gamma), defaults to all zeros.
    :type lattice_constants: list[float], optional
    :ivar basis_atoms: Free text basis atom descriptor,
        defaults to `''`.
    :type basis_atoms: str, optional
    :ivar symmetry: Free text symmetry descriptor, defaults to `''`.
    :type symmetry: str, optional
    """
    phase_index: Optional[int] = 0
    lattice_constants: Optional[conlist(
        item_type=confloat(allow_inf_nan=True),
        min_length=6, max_length=6)] = [0.0]*6
    basis_atoms: Optional[str] = ''
    symmetry: Optional[str] = ''


class MicHeader(D3DRBaseModel):
    """Class representing the scalar header fields of a mic file.

    :ivar x_res: Step size along x, defaults to `0.0`.
    :type x_res: float, optional
    :ivar y_res: Step size along y, defaults to `0.0`.
    :type y_res: float, optional
    :ivar x_dim: Number of grid points along x, defaults to `0`.
    :type x_dim: int, optional
    :ivar y_dim: Number of grid points along y, defaults to `0`.
    :type y_dim: int, optional
    :ivar original_header: The verbatim free text header of the
        source file, defaults to `''`.
    :type original_header: str, optional
    """
    x_res: Optional[float] = 0.0
    y_res: Optional[float] = 0.0
    x_dim: Optional[int] = 0
    y_dim: Optional[int] = 0
    original_header: Optional[str] = ''


class H5MicReaderConfig(D3DRBaseModel):
    """Class representing the configuration of a mic file read.

    :ivar filename: Path to the `.h5` mic file.
    :type filename: str
    :ivar h5path: Path of the scan group inside the file.
    :type h5path: str
    :ivar arrays: Names of the data columns to read, defaults to
        `None` (no explicit selection).
    :type arrays: list[Literal[
        'Euler1', 'Euler2', 'Euler3', 'Confidence', 'Phase', 'X', 'Y']],
        optional
    :ivar read_all_arrays: Read every data column regardless of
        `arrays`, defaults to `True` unless `arrays` is given.
    :type read_all_arrays: bool, optional
    :ivar header_only: Stop after reading the header,
        defaults to `False`.
    :type header_only: bool, optional
    :ivar sort_phases: Order the phases by their stored phase index
        instead of the enumeration order of the file,
        defaults to `False`.
    :type sort_phases: bool, optional
    """
    filename: constr(strip_whitespace=True, min_length=1)
    h5path: constr(strip_whitespace=True, min_length=1)
    arrays: Optional[conlist(item_type=ColumnName)] = None
    read_all_arrays: Optional[bool] = True
    header_only: Optional[bool] = False
    sort_phases: Optional[bool] = False

    @model_validator(mode='before')
    @classmethod
    def validate_h5micreaderconfig_before(cls, data):
        """Only read the selected columns when a selection is given
        and `read_all_arrays` is not set explicitly.

        :param data: Pydantic validator data object.
        :type data: H5MicReaderConfig,
            pydantic_core._pydantic_core.ValidationInfo
        :return: The currently validated list of class properties.
        :rtype: dict
        """
        if isinstance(data, dict):
            if isinstance(data.get('arrays'), str):
                data['arrays'] = [data['arrays']]
            if data.get('read_all_arrays') is None:
                data['read_all_arrays'] = data.get('arrays') is None
        return data
