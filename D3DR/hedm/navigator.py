#!/usr/bin/env python
#-*- coding: utf-8 -*-
"""
File       : navigator.py
Description: File and group navigation on top of h5py

`H5Navigator` is the only place that touches h5py objects directly.
It opens files and groups, enumerates child groups and reads scalar,
array and string datasets. The field level readers report failures
through integer return codes (`0` on success, negative otherwise) so
that the caller decides whether a missing field is fatal.

The `opened_file` and `opened_group` context managers pair every open
with exactly one close on every exit path.
"""

# System modules
from contextlib import contextmanager
from logging import getLogger

# Third party modules
import numpy as np

logger = getLogger(__name__)


class H5Navigator():
    """Navigator for HDF5 files read through h5py."""

    def open_file(self, filename):
        """Open an HDF5 file for reading.

        :param filename: Path to the HDF5 file.
        :type filename: str
        :raises OSError: If the file does not exist or is not a valid
            HDF5 file.
        :return: The open file.
        :rtype: h5py.File
        """
        # Third party modules
        from h5py import File

        return File(filename, 'r')

    def open_group(self, parent, path):
        """Open the group at `path` relative to `parent`.

        :param parent: Parent file or group.
        :type parent: h5py.Group
        :param path: Group path relative to `parent`.
        :type path: str
        :raises KeyError: If `path` does not exist or is not a group.
        :return: The group.
        :rtype: h5py.Group
        """
        # Third party modules
        from h5py import Group

        try:
            group = parent[path]
        except (KeyError, ValueError) as exc:
            raise KeyError(path) from exc
        if not isinstance(group, Group):
            raise KeyError(path)
        return group

    def close(self, handle):
        """Close `handle`. Groups carry no resources of their own in
        h5py, only files are closed.
        """
        # Third party modules
        from h5py import File

        if isinstance(handle, File):
            handle.close()

    def group_names(self, group):
        """Return the names of the immediate child groups of `group`
        in the enumeration order of the store.
        """
        # Third party modules
        from h5py import Group

        return [k for k in group.keys() if isinstance(group.get(k), Group)]

    def read_scalar(self, group, key, default):
        """Read the scalar dataset `key` from `group`.

        :return: The value cast to the type of `default` and an error
            code, or `default` and a negative error code if the
            dataset is missing or unreadable.
        :rtype: tuple[object, int]
        """
        dset = self._dataset(group, key)
        if dset is None:
            return default, -1
        try:
            value = np.asarray(dset[()]).reshape(-1)
            if not value.size:
                return default, -2
            return type(default)(value[0]), 0
        except (TypeError, ValueError, OverflowError, OSError):
            return default, -3

    def read_array(self, group, key, buffer):
        """Read the dataset `key` from `group` into `buffer` in place.

        :param buffer: Preallocated destination array, left untouched
            on failure.
        :type buffer: numpy.ndarray
        :return: Error code, `0` on success.
        :rtype: int
        """
        dset = self._dataset(group, key)
        if dset is None:
            return -1
        if dset.size != buffer.size:
            return -2
        try:
            buffer[...] = np.asarray(dset[()]).reshape(buffer.shape)
        except (TypeError, ValueError, OSError):
            return -3
        return 0

    def read_string(self, group, key):
        """Read the string dataset `key` from `group`.

        :return: The decoded string and an error code, or `''` and a
            negative error code if the dataset is missing.
        :rtype: tuple[str, int]
        """
        dset = self._dataset(group, key)
        if dset is None:
            return '', -1
        try:
            value = dset[()]
        except (TypeError, ValueError, OSError):
            return '', -3
        if isinstance(value, np.ndarray):
            if not value.size:
                return '', -2
            value = value.reshape(-1)[0]
        if isinstance(value, (bytes, np.bytes_)):
            value = value.decode('utf-8', errors='replace')
        return str(value), 0

    @staticmethod
    def _dataset(group, key):
        # Third party modules
        from h5py import Dataset

        obj = group.get(key)
        if isinstance(obj, Dataset):
            return obj
        return None


@contextmanager
def opened_file(navigator, filename, failure=None):
    """Context manager yielding an open file, closed on exit.

    :param failure: Exception raised from the original `OSError` when
        the file cannot be opened, defaults to re-raising the
        original error.
    :type failure: Exception, optional
    """
    try:
        handle = navigator.open_file(filename)
    except (OSError, TypeError, ValueError) as exc:
        if failure is None:
            raise
        raise failure from exc
    try:
        yield handle
    finally:
        release(navigator, handle, filename)


@contextmanager
def opened_group(navigator, parent, path, failure=None):
    """Context manager yielding an open group, closed on exit.

    :param failure: Exception raised from the original `KeyError`
        when the group does not exist, defaults to re-raising the
        original error.
    :type failure: Exception, optional
    """
    try:
        handle = navigator.open_group(parent, path)
    except KeyError as exc:
        if failure is None:
            raise
        raise failure from exc
    try:
        yield handle
    finally:
        release(navigator, handle, path)


def release(navigator, handle, label):
    """Close `handle` without letting a close failure replace an
    error that is already propagating.
    """
    try:
        navigator.close(handle)
    except Exception as exc:
        logger.warning(f'Unable to close {label} ({exc})')
