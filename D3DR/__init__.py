"""The DREAM3D Review filters (D3DR) provide a set of small, modular
components that a host data processing pipeline can invoke on
microscopy and materials science data. We call these components
`PipelineItem`s (subclassed into `Reader`s and `Processor`s). Every
item is a leaf: it receives its input data from the host, performs one
narrow I/O or numeric operation and hands the result back.

[`D3DR.hedm`](D3DR.hedm.md) contains the readers for High Energy
Diffraction Microscopy (HEDM) `.h5` mic files.
[`D3DR.common`](D3DR.common.md) contains the statistics and array
averaging `Processor`s that apply to data from multiple techniques.
"""

from D3DR.models import D3DRBaseModel
from D3DR.reader import Reader
from D3DR.processor import Processor

version = '0.1.0'
