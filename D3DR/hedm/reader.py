#!/usr/bin/env python
"""
File       : reader.py
Description: Module for Readers used in HEDM workflows.
"""

# Local modules
from D3DR import Reader


class H5MicFileReader(Reader):
    """Reader for HEDM mic scans stored in `.h5` files."""
    def read(
            self, filename, h5path, arrays=None, read_all_arrays=None,
            header_only=False, sort_phases=False, inputdir=None):
        """Return the header, phases and data columns of the mic scan
        stored at `h5path` in `filename`.

        :param filename: Name of the `.h5` file to read from.
        :type filename: str
        :param h5path: Path of the scan group inside the file.
        :type h5path: str
        :param arrays: Names of the data columns to read,
            defaults to all columns.
        :type arrays: list[str], optional
        :param read_all_arrays: Read every data column regardless of
            `arrays`, defaults to `True` unless `arrays` is given.
        :type read_all_arrays: bool, optional
        :param header_only: Only read the header and the phases,
            defaults to `False`.
        :type header_only: bool, optional
        :param sort_phases: Order the phases by their stored phase
            index, defaults to `False`.
        :type sort_phases: bool, optional
        :param inputdir: Input directory, used only if `filename` is
            not an absolute path, defaults to the reader's `inputdir`.
        :type inputdir: str, optional
        :raises D3DR.hedm.h5mic.H5MicError: Upon a structural failure
            reading the file.
        :return: The header (`'header'`), the phases (`'phases'`), the
            columns that were read (`'data'`) and the number of grid
            points (`'number_of_elements'`).
        :rtype: dict
        """
        # Local modules
        from D3DR.hedm.h5mic import H5MicReader

        config = self.get_config(
            config={
                'filename': filename,
                'h5path': h5path,
                'arrays': arrays,
                'read_all_arrays': read_all_arrays,
                'header_only': header_only,
                'sort_phases': sort_phases,
            },
            schema='hedm.models.H5MicReaderConfig')
        filename = self.resolve_filename(config.filename, inputdir)
        self.logger.debug(f'Reading {filename} with {config}')

        reader = H5MicReader(
            filename=filename, h5path=config.h5path, arrays=config.arrays,
            read_all_arrays=config.read_all_arrays,
            sort_phases=config.sort_phases, logger=self.logger)
        if config.header_only:
            reader.read_header_only()
            data = {}
        else:
            data = {k: v for k, v in reader.read_file().items()
                    if v is not None}

        return {
            'header': reader.header.model_dump(),
            'phases': [phase.model_dump() for phase in reader.phases],
            'data': data,
            'number_of_elements': reader.number_of_elements,
        }


if __name__ == '__main__':
    # Local modules
    from D3DR.reader import main

    main()
