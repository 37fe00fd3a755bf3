#!/usr/bin/env python
#-*- coding: utf-8 -*-
#pylint: disable=
"""
File       : h5mic.py
Description: Reader engine for HEDM `.h5` mic files

A mic scan lives under a configurable group path and is laid out as::

    <h5path>/Header/XRes, YRes, XDim, YDim, OriginalHeader
    <h5path>/Header/Phases/<name>/Phase, LatticeConstants,
                                  BasisAtoms, Symmetry
    <h5path>/Data/Euler1, Euler2, Euler3, Confidence, Phase, X, Y

Missing groups abort a read with an `H5MicError`. Missing fields
inside an existing group only log a warning and leave the field at
its default (or a zero filled column).
"""

# System modules
from contextlib import contextmanager
from copy import deepcopy
from logging import getLogger
from time import time

# Third party modules
import numpy as np

# Local modules
from D3DR.hedm.models import (
    MicHeader,
    MicPhase,
)
from D3DR.hedm.navigator import (
    H5Navigator,
    opened_file,
    opened_group,
)

HEADER = 'Header'
PHASES = 'Phases'
DATA = 'Data'
ORIGINAL_HEADER = 'OriginalHeader'

# Header datasets: (key, type, default, MicHeader attribute)
HEADER_FIELDS = (
    ('XRes', float, 0.0, 'x_res'),
    ('YRes', float, 0.0, 'y_res'),
    ('XDim', int, 0, 'x_dim'),
    ('YDim', int, 0, 'y_dim'),
)

# Phase datasets: (key, type, default, MicPhase attribute)
PHASE_FIELDS = (
    ('Phase', int, 0, 'phase_index'),
    ('LatticeConstants', list, [0.0]*6, 'lattice_constants'),
    ('BasisAtoms', str, '', 'basis_atoms'),
    ('Symmetry', str, '', 'symmetry'),
)

# Data columns in read order: (key, element type)
COLUMNS = (
    ('Euler1', np.float32),
    ('Euler2', np.float32),
    ('Euler3', np.float32),
    ('Confidence', np.float32),
    ('Phase', np.int32),
    ('X', np.float32),
    ('Y', np.float32),
)
COLUMN_NAMES = tuple(name for name, _ in COLUMNS)


class H5MicError(RuntimeError):
    """Base class of all structural mic file read failures.

    :ivar code: Numeric error code (negative).
    :type code: int
    :ivar message: Human readable error message.
    :type message: str
    """
    code = -1

    def __init__(self, message, code=None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class CannotOpenFile(H5MicError):
    code = -100


class MissingInternalPath(H5MicError):
    code = -101


class EmptyConfiguredPath(H5MicError):
    code = -102


class MissingHeaderGroup(H5MicError):
    code = -105


class MissingPhasesGroup(H5MicError):
    code = -106


class NoPhasesFound(H5MicError):
    code = -107


class MissingDataGroup(H5MicError):
    code = -108


class InvalidDimensions(H5MicError):
    code = -200


class H5MicReader():
    """Reader for the header, phases and data columns of one HEDM
    mic scan stored in an HDF5 file.

    An instance owns every column array it allocates and is meant for
    a single file read at a time; it is not safe for concurrent use.

    :ivar filename: Path to the HDF5 file.
    :type filename: str
    :ivar h5path: Path of the scan group inside the file.
    :type h5path: str
    :ivar arrays_to_read: Names of the columns to read when
        `read_all_arrays` is `False`.
    :type arrays_to_read: set[str]
    :ivar read_all_arrays: Read every column, defaults to `True`.
    :type read_all_arrays: bool
    :ivar sort_phases: Order the phases by their stored phase index,
        defaults to `False` (enumeration order of the file).
    :type sort_phases: bool
    :ivar error_code: Code of the last structural failure, `0` after
        a successful read.
    :type error_code: int
    :ivar error_message: Message of the last structural failure.
    :type error_message: str
    """
    def __init__(
            self, filename=None, h5path=None, arrays=None,
            read_all_arrays=True, sort_phases=False, navigator=None,
            logger=None):
        self.filename = filename
        self.h5path = h5path
        self.arrays_to_read = set(arrays or ())
        self.read_all_arrays = bool(read_all_arrays)
        self.sort_phases = bool(sort_phases)
        self.navigator = H5Navigator() if navigator is None else navigator
        self.logger = getLogger(__name__) if logger is None else logger
        self.error_code = 0
        self.error_message = ''
        self._header = MicHeader()
        self._phases = []
        self._columns = dict.fromkeys(COLUMN_NAMES)
        self._number_of_elements = 0

    def set_arrays_to_read(self, names):
        """Select the columns to read when `read_all_arrays` is
        `False`.
        """
        self.arrays_to_read = set(names)

    def read_all(self, flag=True):
        """Set or clear the read-all-columns flag."""
        self.read_all_arrays = bool(flag)

    def reset(self):
        """Release every column array owned by the reader."""
        self._columns = dict.fromkeys(COLUMN_NAMES)
        self._number_of_elements = 0

    @property
    def header(self):
        return self._header

    @property
    def phases(self):
        return list(self._phases)

    @property
    def x_resolution(self):
        return self._header.x_res

    @property
    def y_resolution(self):
        return self._header.y_res

    @property
    def x_dimension(self):
        return self._header.x_dim

    @property
    def y_dimension(self):
        return self._header.y_dim

    @property
    def original_header(self):
        return self._header.original_header

    @property
    def number_of_elements(self):
        return self._number_of_elements

    @property
    def columns(self):
        """Every column name mapped onto its array, or `None` for
        columns that were not read.
        """
        return dict(self._columns)

    def get_array(self, name):
        """Return the array of column `name`, or `None` if the column
        was not read.

        :raises KeyError: If `name` is not a known column.
        """
        if name not in self._columns:
            raise KeyError(f'Unknown mic column {name}')
        return self._columns[name]

    @property
    def euler1(self):
        return self._columns['Euler1']

    @property
    def euler2(self):
        return self._columns['Euler2']

    @property
    def euler3(self):
        return self._columns['Euler3']

    @property
    def confidence(self):
        return self._columns['Confidence']

    @property
    def phase(self):
        return self._columns['Phase']

    @property
    def x(self):
        return self._columns['X']

    @property
    def y(self):
        return self._columns['Y']

    def read_file(self):
        """Read the header, the phases and the selected data columns.

        :raises H5MicError: On the first structural failure, after
            closing every group and file opened up to that point.
        :return: The column arrays (see `columns`).
        :rtype: dict[str, numpy.ndarray]
        """
        t0 = time()
        with self._recorded_errors(), self._opened_scan() as gid:
            self.read_header(gid)
            columns = self.read_data(gid)
        self.logger.debug(
            f'Read {self.filename} in {time()-t0:.3f} seconds')
        return columns

    def read_header_only(self):
        """Read the header and the phases, never touching the `Data`
        group.

        :raises H5MicError: On the first structural failure, after
            closing every group and file opened up to that point.
        :return: The header.
        :rtype: D3DR.hedm.models.MicHeader
        """
        t0 = time()
        with self._recorded_errors(), self._opened_scan() as gid:
            header = self.read_header(gid)
        self.logger.debug(
            f'Read header of {self.filename} in {time()-t0:.3f} seconds')
        return header

    def read_header(self, group):
        """Read the `Header` group below `group`, including every
        phase in `Header/Phases`. Any previously read columns are
        released first.

        :param group: The open scan group.
        :type group: h5py.Group
        :raises MissingHeaderGroup: If there is no `Header` group.
        :raises MissingPhasesGroup: If there is no `Phases` group.
        :raises NoPhasesFound: If `Phases` has no child groups.
        :return: The header.
        :rtype: D3DR.hedm.models.MicHeader
        """
        # Columns sized for the previous header must not outlive it
        self.reset()
        nav = self.navigator
        with opened_group(nav, group, HEADER, MissingHeaderGroup(
                f'Could not open "{HEADER}" group in {self.h5path}')) as hid:
            self._header = MicHeader(
                **self._read_fields(hid, HEADER_FIELDS, HEADER))
            self._phases = []
            with opened_group(nav, hid, PHASES, MissingPhasesGroup(
                    f'Could not open "{HEADER}/{PHASES}" group in '
                    f'{self.h5path}. Is this an older file?')) as pid:
                names = nav.group_names(pid)
                if not names:
                    raise NoPhasesFound(
                        f'There were no phase groups in "{HEADER}/{PHASES}"')
                phases = []
                for name in names:
                    with opened_group(nav, pid, name) as phid:
                        phases.append(MicPhase(**self._read_fields(
                            phid, PHASE_FIELDS, f'{HEADER}/{PHASES}/{name}')))
                if self.sort_phases:
                    phases.sort(key=lambda phase: phase.phase_index)
                self._phases = phases
            original_header, err = nav.read_string(hid, ORIGINAL_HEADER)
            if err < 0:
                self.logger.warning(
                    f'Unable to read {HEADER}/{ORIGINAL_HEADER} (error {err})')
            self._header.original_header = original_header
        self.logger.info(
            f'Read header: {self._header.x_dim} x {self._header.y_dim} '
            f'points, {len(self._phases)} phase(s)')
        return self._header

    def read_data(self, group):
        """Read the selected columns from the `Data` group below
        `group`. Any previously read columns are released first.

        :param group: The open scan group.
        :type group: h5py.Group
        :raises InvalidDimensions: If the header holds no valid grid
            dimensions.
        :raises MissingDataGroup: If there is no `Data` group.
        :return: The column arrays (see `columns`).
        :rtype: dict[str, numpy.ndarray]
        """
        self.reset()
        x_dim = self._header.x_dim
        y_dim = self._header.y_dim
        if y_dim < 1 or x_dim < 0:
            raise InvalidDimensions(
                f'Invalid grid dimensions ({x_dim} x {y_dim})')
        total_rows = x_dim * y_dim

        with opened_group(self.navigator, group, DATA, MissingDataGroup(
                f'Could not open "{DATA}" group in {self.h5path}')) as did:
            self._number_of_elements = total_rows
            for name, dtype in COLUMNS:
                if not (self.read_all_arrays or name in self.arrays_to_read):
                    continue
                buffer = np.zeros(total_rows, dtype=dtype)
                err = self.navigator.read_array(did, name, buffer)
                if err < 0:
                    self.logger.warning(
                        f'Unable to read {DATA}/{name} (error {err}), '
                        'keeping a zero filled array')
                self._columns[name] = buffer
        return self.columns

    @contextmanager
    def _opened_scan(self):
        """Open the file and the configured scan group."""
        if not self.h5path or not str(self.h5path).strip():
            raise EmptyConfiguredPath('HDF5 path is empty')
        if not self.filename:
            raise CannotOpenFile('No HDF5 file name given')
        nav = self.navigator
        with opened_file(nav, self.filename, CannotOpenFile(
                f'Could not open HDF5 file {self.filename}')) as fid:
            with opened_group(nav, fid, self.h5path, MissingInternalPath(
                    f'Could not open path {self.h5path}')) as gid:
                yield gid

    @contextmanager
    def _recorded_errors(self):
        """Record the code and message of a structural failure."""
        self.error_code = 0
        self.error_message = ''
        try:
            yield
        except H5MicError as exc:
            self.error_code = exc.code
            self.error_message = exc.message
            self.logger.error(f'{exc.message} (error {exc.code})')
            raise

    def _read_fields(self, group, fields, location):
        """Read the datasets described by `fields` from `group`,
        falling back on each field's default when it is missing.
        """
        values = {}
        for key, kind, default, attr in fields:
            if kind is str:
                value, err = self.navigator.read_string(group, key)
            elif kind is list:
                buffer = np.zeros(len(default), dtype=np.float32)
                err = self.navigator.read_array(group, key, buffer)
                value = buffer.tolist()
            else:
                value, err = self.navigator.read_scalar(group, key, default)
            if err < 0:
                self.logger.warning(
                    f'Unable to read {location}/{key} (error {err}), '
                    f'using {default!r}')
                value = deepcopy(default)
            values[attr] = value
        return values
