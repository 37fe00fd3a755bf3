"""This subpackage contains `PipelineItems` unique to High Energy
Diffraction Microscopy (HEDM) data processing workflows.

[`D3DR.hedm.h5mic`](D3DR.hedm.h5mic.md) holds the reader engine for
`.h5` mic files and its error classes,
[`D3DR.hedm.navigator`](D3DR.hedm.navigator.md) the underlying HDF5
file and group access.
"""

from D3DR.hedm.reader import H5MicFileReader
