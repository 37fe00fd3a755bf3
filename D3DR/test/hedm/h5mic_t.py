#!/usr/bin/env python
"""
File       : hedm/h5mic_t.py
Description: Unit tests for hedm/h5mic.py and hedm/navigator.py code
"""

# System modules
import gc
import logging
import os
from tempfile import TemporaryDirectory
from typing import get_args
import unittest
import weakref

# Third party modules
import numpy as np

# Local modules
from D3DR.hedm.h5mic import (
    COLUMN_NAMES,
    CannotOpenFile,
    EmptyConfiguredPath,
    H5MicError,
    H5MicReader,
    InvalidDimensions,
    MissingDataGroup,
    MissingHeaderGroup,
    MissingInternalPath,
    MissingPhasesGroup,
    NoPhasesFound,
)
from D3DR.hedm.models import ColumnName
from D3DR.hedm.navigator import H5Navigator
from D3DR.test.hedm.mic_files import (
    CountingNavigator,
    mic_tree,
    write_mic_file,
)

logger = logging.getLogger('H5MicReaderTest')


class H5MicReaderTest(unittest.TestCase):
    """Unit test for D3DR.hedm.h5mic.H5MicReader on HDF5 files"""

    def setUp(self):
        self.tmpdir = TemporaryDirectory()
        self.filename = os.path.join(self.tmpdir.name, 'scan.h5')

    def tearDown(self):
        self.tmpdir.cleanup()

    def reader(self, **kwargs):
        kwargs.setdefault('filename', self.filename)
        kwargs.setdefault('h5path', 'Scan 1')
        return H5MicReader(logger=logger, **kwargs)

    def testReadFile(self):
        """Unit test to test reading every column"""
        write_mic_file(self.filename)
        reader = self.reader()
        columns = reader.read_file()
        self.assertEqual(list(columns), list(COLUMN_NAMES))
        for name, array in columns.items():
            self.assertIsNotNone(array, name)
            self.assertEqual(array.shape, (12,))
        self.assertEqual(reader.number_of_elements, 12)
        self.assertEqual(reader.phase.dtype, np.int32)
        self.assertEqual(reader.euler1.dtype, np.float32)
        np.testing.assert_array_equal(reader.euler1, np.arange(12))
        np.testing.assert_array_equal(reader.y, np.arange(12) + 6)
        self.assertEqual(reader.error_code, 0)

    def testHeader(self):
        """Unit test to test the header fields"""
        write_mic_file(self.filename, original_header='line 1\nline 2')
        reader = self.reader()
        header = reader.read_header_only()
        self.assertEqual(reader.x_dimension, 4)
        self.assertEqual(reader.y_dimension, 3)
        self.assertEqual(reader.x_resolution, 0.5)
        self.assertEqual(reader.y_resolution, 0.25)
        self.assertEqual(header.original_header, 'line 1\nline 2')
        self.assertEqual(reader.original_header, 'line 1\nline 2')

    def testPhases(self):
        """Unit test to test the phase records"""
        write_mic_file(self.filename)
        reader = self.reader()
        reader.read_header_only()
        phases = reader.phases
        self.assertEqual(len(phases), 2)
        self.assertEqual(phases[0].phase_index, 1)
        self.assertEqual(
            phases[0].lattice_constants, [4.0, 4.0, 4.0, 90.0, 90.0, 90.0])
        self.assertEqual(phases[0].basis_atoms, 'Ni')
        self.assertEqual(phases[1].symmetry, '194')

    def testPhaseOrder(self):
        """Unit test to test the phase order with and without sorting
        on the stored phase index
        """
        phases = {
            name: {'Phase': int(name), 'LatticeConstants': [1.0]*6,
                   'BasisAtoms': '', 'Symmetry': ''}
            for name in ('2', '10', '1')}
        write_mic_file(self.filename, phases=phases)
        reader = self.reader()
        reader.read_header_only()
        self.assertEqual(
            [p.phase_index for p in reader.phases], [1, 10, 2])
        reader = self.reader(sort_phases=True)
        reader.read_header_only()
        self.assertEqual(
            [p.phase_index for p in reader.phases], [1, 2, 10])

    def testArraySelection(self):
        """Unit test to test reading a subset of the columns"""
        write_mic_file(self.filename)
        reader = self.reader(
            arrays={'Confidence', 'Phase'}, read_all_arrays=False)
        columns = reader.read_file()
        present = [k for k, v in columns.items() if v is not None]
        self.assertEqual(present, ['Confidence', 'Phase'])
        for name in ('Euler1', 'Euler2', 'Euler3', 'X', 'Y'):
            self.assertIsNone(reader.get_array(name))

    def testReadAllOverridesSelection(self):
        """Unit test to test that the read-all flag wins over a
        selection
        """
        write_mic_file(self.filename)
        reader = self.reader(arrays={'X'})
        reader.read_file()
        self.assertTrue(all(
            reader.get_array(name) is not None for name in COLUMN_NAMES))

    def testMissingColumn(self):
        """Unit test to test that a missing column stays zero filled"""
        columns = [c for c in COLUMN_NAMES if c != 'Euler2']
        write_mic_file(self.filename, columns=columns)
        reader = self.reader()
        with self.assertLogs(logger, 'WARNING') as logs:
            reader.read_file()
        self.assertTrue(any('Data/Euler2' in m for m in logs.output))
        np.testing.assert_array_equal(reader.euler2, np.zeros(12))
        np.testing.assert_array_equal(reader.euler3, np.arange(12) + 2)

    def testSoftMissingScalar(self):
        """Unit test to test that a missing header scalar falls back on
        its default
        """
        write_mic_file(self.filename, skip_fields=('XRes',))
        reader = self.reader()
        with self.assertLogs(logger, 'WARNING') as logs:
            reader.read_file()
        self.assertTrue(any('Header/XRes' in m for m in logs.output))
        self.assertEqual(reader.x_resolution, 0.0)
        self.assertEqual(reader.number_of_elements, 12)

    def testMissingPhasesGroup(self):
        """Unit test to test that a missing Phases group is fatal"""
        write_mic_file(self.filename, phases_group=False)
        reader = self.reader()
        with self.assertRaises(MissingPhasesGroup) as cm:
            reader.read_file()
        self.assertEqual(cm.exception.code, -106)
        self.assertEqual(reader.error_code, -106)
        self.assertEqual(reader.phases, [])
        self.assertIsNone(reader.euler1)

    def testNoPhasesFound(self):
        """Unit test to test that an empty Phases group is fatal"""
        write_mic_file(self.filename, phases={})
        with self.assertRaises(NoPhasesFound):
            self.reader().read_file()

    def testMissingHeaderGroup(self):
        """Unit test to test that a missing Header group is fatal"""
        write_mic_file(self.filename, header=False)
        with self.assertRaises(MissingHeaderGroup) as cm:
            self.reader().read_header_only()
        self.assertEqual(cm.exception.code, -105)

    def testMissingDataGroup(self):
        """Unit test to test that a missing Data group is fatal"""
        write_mic_file(self.filename, data=False)
        reader = self.reader()
        with self.assertRaises(MissingDataGroup):
            reader.read_file()
        self.assertEqual(len(reader.phases), 2)

    def testCannotOpenFile(self):
        """Unit test to test a file that does not exist"""
        reader = self.reader(
            filename=os.path.join(self.tmpdir.name, 'missing.h5'))
        with self.assertRaises(CannotOpenFile) as cm:
            reader.read_file()
        self.assertEqual(cm.exception.code, -100)
        self.assertIn('missing.h5', reader.error_message)

    def testInfiniteDimension(self):
        """Unit test to test that a non-finite integer field falls back
        on its default
        """
        # Third party modules
        from h5py import File

        write_mic_file(self.filename)
        with File(self.filename, 'a') as f:
            del f['Scan 1/Header/XDim']
            f['Scan 1/Header/XDim'] = np.float32(np.inf)
        reader = self.reader()
        with self.assertLogs(logger, 'WARNING') as logs:
            reader.read_header_only()
        self.assertTrue(any('Header/XDim' in m for m in logs.output))
        self.assertEqual(reader.x_dimension, 0)
        self.assertEqual(reader.y_dimension, 3)

    def testMissingInternalPath(self):
        """Unit test to test a scan path that does not exist"""
        write_mic_file(self.filename)
        with self.assertRaises(MissingInternalPath) as cm:
            self.reader(h5path='Scan 2').read_file()
        self.assertEqual(cm.exception.code, -101)

    def testErrorTaxonomy(self):
        """Unit test to test that every error is an H5MicError with a
        distinct code
        """
        errors = (
            CannotOpenFile, MissingInternalPath, EmptyConfiguredPath,
            MissingHeaderGroup, MissingPhasesGroup, NoPhasesFound,
            MissingDataGroup, InvalidDimensions)
        codes = [error.code for error in errors]
        self.assertEqual(len(set(codes)), len(codes))
        self.assertTrue(all(code < 0 for code in codes))
        self.assertTrue(all(issubclass(e, H5MicError) for e in errors))

    def testColumnNames(self):
        """Unit test to test that the configuration model knows every
        column
        """
        self.assertEqual(get_args(ColumnName), COLUMN_NAMES)


class H5MicReaderResourceTest(unittest.TestCase):
    """Unit test for the handle bookkeeping of
    D3DR.hedm.h5mic.H5MicReader
    """

    def reader(self, navigator, **kwargs):
        return H5MicReader(
            filename='scan.h5', h5path='Scan 1', navigator=navigator,
            logger=logger, **kwargs)

    def testPhaseCount(self):
        """Unit test to test the number and order of the phases"""
        phases = {
            f'phase_{i}': {'Phase': i, 'LatticeConstants': [1.0]*6,
                           'BasisAtoms': '', 'Symmetry': ''}
            for i in (3, 1, 2)}
        reader = self.reader(CountingNavigator(mic_tree(phases=phases)))
        reader.read_header_only()
        self.assertEqual([p.phase_index for p in reader.phases], [3, 1, 2])

    def testHandlesReleasedOnFailure(self):
        """Unit test to test that every handle is closed after a
        missing Phases group
        """
        navigator = CountingNavigator(mic_tree(phases_group=False))
        reader = self.reader(navigator)
        with self.assertRaises(MissingPhasesGroup):
            reader.read_file()
        self.assertEqual(navigator.live_handles, 0)
        self.assertIn('/', navigator.closed)
        self.assertEqual(reader.phases, [])

    def testHandlesReleasedOnSuccess(self):
        """Unit test to test that every handle is closed exactly once"""
        navigator = CountingNavigator(mic_tree())
        self.reader(navigator).read_file()
        self.assertEqual(navigator.live_handles, 0)
        self.assertEqual(sorted(navigator.opened), sorted(navigator.closed))
        self.assertEqual(navigator.closed[-1], '/')

    def testCloseFailureKeepsError(self):
        """Unit test to test that a failing close does not replace the
        original error
        """
        navigator = CountingNavigator(
            mic_tree(phases_group=False), fail_close=True)
        with self.assertRaises(MissingPhasesGroup):
            self.reader(navigator).read_file()
        self.assertEqual(navigator.live_handles, 0)

    def testHeaderOnlySkipsData(self):
        """Unit test to test that a header only read never opens the
        Data group
        """
        navigator = CountingNavigator(mic_tree())
        reader = self.reader(navigator)
        reader.read_header_only()
        self.assertNotIn('/Scan 1/Data', navigator.opened)
        self.assertEqual(sum(navigator.array_reads.values()), 2)
        self.assertEqual(navigator.live_handles, 0)
        self.assertTrue(all(v is None for v in reader.columns.values()))

    def testFailedHeaderReleasesArrays(self):
        """Unit test to test that a header failure on a second read
        leaves no columns sized for the first file
        """
        reader = self.reader(CountingNavigator(mic_tree()))
        reader.read_file()
        self.assertEqual(reader.euler1.shape, (12,))
        reader.navigator = CountingNavigator(
            mic_tree(x_dim=5, y_dim=5, phases_group=False))
        with self.assertRaises(MissingPhasesGroup):
            reader.read_file()
        self.assertEqual(reader.x_dimension, 5)
        self.assertTrue(all(v is None for v in reader.columns.values()))
        self.assertEqual(reader.number_of_elements, 0)
        reader.navigator = CountingNavigator(mic_tree())
        reader.read_file()
        reader.navigator = CountingNavigator(mic_tree(phases={}))
        with self.assertRaises(NoPhasesFound):
            reader.read_header_only()
        self.assertIsNone(reader.euler1)

    def testInvalidDimensions(self):
        """Unit test to test that a zero y dimension allocates nothing"""
        navigator = CountingNavigator(mic_tree(y_dim=0))
        reader = self.reader(navigator)
        with self.assertRaises(InvalidDimensions) as cm:
            reader.read_file()
        self.assertEqual(cm.exception.code, -200)
        self.assertNotIn('/Scan 1/Data', navigator.opened)
        self.assertTrue(all(v is None for v in reader.columns.values()))
        self.assertEqual(reader.number_of_elements, 0)
        self.assertEqual(navigator.live_handles, 0)

    def testEmptyPath(self):
        """Unit test to test that an empty scan path fails before any
        file access
        """
        navigator = CountingNavigator(mic_tree())
        reader = H5MicReader(
            filename='scan.h5', h5path='', navigator=navigator,
            logger=logger)
        with self.assertRaises(EmptyConfiguredPath) as cm:
            reader.read_file()
        self.assertEqual(cm.exception.code, -102)
        self.assertEqual(navigator.opened, [])

    def testRereadReleasesArrays(self):
        """Unit test to test that a second read releases the arrays of
        the first read before allocating new ones
        """
        seen = []
        reader = None

        def check_released(key):
            if key in COLUMN_NAMES:
                seen.append(reader.get_array(key))

        navigator = CountingNavigator(
            mic_tree(), on_read_array=check_released)
        reader = self.reader(navigator)
        reader.read_file()
        first = weakref.ref(reader.euler1)
        seen.clear()
        reader.read_file()
        gc.collect()
        self.assertIsNone(first())
        self.assertEqual(len(seen), len(COLUMN_NAMES))
        self.assertTrue(all(array is None for array in seen))
        self.assertEqual(reader.euler1.shape, (12,))

    def testHeaderReplacesPhases(self):
        """Unit test to test that a second header read discards the
        phases of the first one
        """
        navigator = CountingNavigator(mic_tree())
        reader = self.reader(navigator)
        reader.read_header_only()
        reader.read_header_only()
        self.assertEqual(len(reader.phases), 2)

    def testSoftMissingPhaseField(self):
        """Unit test to test that a missing phase field keeps its
        default and the remaining phases are still read
        """
        tree = mic_tree()
        del tree['Header']['Phases']['1']['LatticeConstants']
        reader = self.reader(CountingNavigator(tree))
        with self.assertLogs(logger, 'WARNING'):
            reader.read_header_only()
        self.assertEqual(len(reader.phases), 2)
        self.assertEqual(reader.phases[0].lattice_constants, [0.0]*6)
        self.assertEqual(reader.phases[1].basis_atoms, 'Ti')


class H5NavigatorTest(unittest.TestCase):
    """Unit test for D3DR.hedm.navigator.H5Navigator"""

    def setUp(self):
        self.tmpdir = TemporaryDirectory()
        self.filename = os.path.join(self.tmpdir.name, 'scan.h5')
        write_mic_file(self.filename)
        self.navigator = H5Navigator()
        self.file = self.navigator.open_file(self.filename)
        self.header = self.navigator.open_group(self.file, 'Scan 1/Header')

    def tearDown(self):
        self.navigator.close(self.file)
        self.tmpdir.cleanup()

    def testGroupNames(self):
        """Unit test to test the enumeration of child groups"""
        self.assertEqual(self.navigator.group_names(self.header), ['Phases'])

    def testOpenGroup(self):
        """Unit test to test opening a dataset as a group"""
        with self.assertRaises(KeyError):
            self.navigator.open_group(self.header, 'XRes')
        with self.assertRaises(KeyError):
            self.navigator.open_group(self.header, 'Nothing')

    def testReadScalar(self):
        """Unit test to test reading scalars"""
        self.assertEqual(
            self.navigator.read_scalar(self.header, 'XDim', 0), (4, 0))
        self.assertEqual(
            self.navigator.read_scalar(self.header, 'Nothing', 7), (7, -1))

    def testReadArray(self):
        """Unit test to test reading into a buffer of the wrong size"""
        group = self.navigator.open_group(self.file, 'Scan 1/Data')
        buffer = np.ones(5, dtype=np.float32)
        self.assertEqual(
            self.navigator.read_array(group, 'Euler1', buffer), -2)
        np.testing.assert_array_equal(buffer, np.ones(5))

    def testReadString(self):
        """Unit test to test reading a string"""
        value, err = self.navigator.read_string(self.header, 'OriginalHeader')
        self.assertEqual(err, 0)
        self.assertIsInstance(value, str)
        self.assertTrue(value.startswith('# mic file'))


if __name__ == '__main__':
    unittest.main()
