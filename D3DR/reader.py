#!/usr/bin/env python
"""
File       : reader.py
Description: generic Reader module

Define a generic `Reader` object and a command line entry point to run
a single `Reader` outside of a host pipeline.
"""

# System modules
import argparse
import os
from typing import get_args

# Local modules
from D3DR.models import LogLevel
from D3DR.pipeline import PipelineItem


class Reader(PipelineItem):
    """Generic file reader.

    The job of any `Reader` is to provide data stored in a file to the
    host pipeline. A `Reader` does not receive or pass along any data
    returned by other filters.
    """
    def read(self, filename):
        """Read and return the contents of `filename`.

        :param filename: Name of file to read from.
        :type filename: str
        :raises NotImplementedError: Always, subclasses implement the
            actual file format.
        """
        raise NotImplementedError(
            f'{self.__class__.__name__} does not implement "read"')

    def resolve_filename(self, filename, inputdir=None):
        """Return `filename` as an absolute path, relative paths are
        taken relative to `inputdir` (or the reader's own `inputdir`).

        :param filename: Name of file to read from.
        :type filename: str
        :param inputdir: Input directory, defaults to the reader's
            `inputdir`.
        :type inputdir: str, optional
        :return: The absolute file path.
        :rtype: str
        """
        if os.path.isabs(filename):
            return filename
        if inputdir is None:
            inputdir = self.inputdir
        return os.path.normpath(os.path.join(str(inputdir), filename))


class OptionParser():
    """User based option parser"""
    def __init__(self):
        self.parser = argparse.ArgumentParser(prog='PROG')
        self.parser.add_argument(
            '--filename', action='store',
            dest='filename', default='', help='Input file')
        self.parser.add_argument(
            '--reader', action='store', dest='reader',
            default='hedm.H5MicFileReader',
            help='Reader class name relative to the D3DR package')
        self.parser.add_argument(
            '--h5path', action='store',
            dest='h5path', default=None, help='Scan group path in the file')
        self.parser.add_argument(
            '--arrays', nargs='*', dest='arrays', default=None,
            help='Names of the data columns to read')
        self.parser.add_argument(
            '--header-only', action='store_true',
            dest='header_only', help='Only read the header')
        self.parser.add_argument(
            '--config', action='store', dest='config', default=None,
            help='YAML file with additional reader arguments')
        self.parser.add_argument(
            '--log-level', type=str.upper, choices=get_args(LogLevel),
            dest='log_level', default='INFO', help='logging level')


def main(opt_parser=OptionParser):
    """Main function"""
    optmgr = opt_parser()
    opts = optmgr.parser.parse_args()

    kwargs = {}
    if opts.config is not None:
        # Third party modules
        from yaml import safe_load

        with open(opts.config) as file:
            kwargs.update(safe_load(file) or {})
    for key in ('filename', 'h5path', 'arrays'):
        value = getattr(opts, key)
        if value:
            kwargs[key] = value
    if opts.header_only:
        kwargs['header_only'] = True

    mod_name, cls_name = opts.reader.rsplit('.', 1)
    module = __import__(f'D3DR.{mod_name}', fromlist=[cls_name])
    try:
        reader_cls = getattr(module, cls_name)
    except AttributeError:
        print(f'Unsupported reader {opts.reader}')
        raise

    reader = reader_cls(log_level=opts.log_level)
    data = reader.read(**kwargs)
    reader.logger.info(f'Reader {reader.__name__} read {kwargs.get("filename")}')

    return data


if __name__ == '__main__':
    main()
