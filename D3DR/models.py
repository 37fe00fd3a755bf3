"""Common Pydantic model classes."""

# System modules
import os
from typing import (
    Literal,
    Optional,
)

# Third party modules
import numpy as np
from pydantic import (
    BaseModel,
    DirectoryPath,
    field_validator,
    model_validator,
)

LogLevel = Literal['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


class D3DRBaseModel(BaseModel):
    """Base D3DR model class. Dumps default to field aliases and hold
    only plain python values: numpy arrays and scalars become lists
    and numbers, paths become strings.
    """
    def model_dump(self, *args, **kwargs):
        kwargs.setdefault('by_alias', True)
        return _plain(super().model_dump(*args, **kwargs))


def _plain(value):
    """Return `value` with every container, path and numpy object
    converted to its plain python counterpart.
    """
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (tuple, list)):
        return [_plain(v) for v in value]
    if isinstance(value, os.PathLike):
        return os.fspath(value)
    if isinstance(value, (np.ndarray, np.generic)):
        return value.tolist()
    return value


class RunConfig(D3DRBaseModel):
    """Filter run configuration class.

    :ivar inputdir: Input directory, used only if an input file of a
        `Reader` is not an absolute path, defaults to the current
        working directory.
    :type inputdir: str, optional
    :ivar log_level: Logger level (not case sensitive),
        defaults to `'INFO'`.
    :type log_level: Literal[
        'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], optional
    """
    inputdir: Optional[DirectoryPath] = None
    log_level: Optional[LogLevel] = 'INFO'

    @model_validator(mode='before')
    @classmethod
    def validate_runconfig_before(cls, data):
        """Ensure that a valid and readable input directory is
        provided.

        :param data: Pydantic validator data object.
        :type data: RunConfig,
            pydantic_core._pydantic_core.ValidationInfo
        :raises OSError: If the input directory does not exist or is
            not readable.
        :return: The currently validated list of class properties.
        :rtype: dict
        """
        if isinstance(data, dict):
            inputdir = data.get('inputdir')
            if inputdir is None:
                inputdir = os.getcwd()
            inputdir = os.path.normpath(os.path.realpath(inputdir))
            if not os.path.isdir(inputdir):
                raise OSError(f'input directory does not exist ({inputdir})')
            if not os.access(inputdir, os.R_OK):
                raise OSError(
                    'input directory is not accessible for reading '
                    f'({inputdir})')
            data['inputdir'] = inputdir
        return data

    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, log_level):
        """Capitalize log_level."""
        return log_level.upper()
