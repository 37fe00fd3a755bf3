"""This subpackage of `D3DR` contains `PipelineItem`s that are or can
be used in workflows for processing data from multiple different
techniques: statistics on attribute arrays and averaging of element
arrays onto vertices.

[`D3DR.common.models`](D3DR.common.models.md) contains the
configuration models of these `Processor`s.
"""

from D3DR.common.processor import (
    AverageEdgeFaceCellArrayToVertexArrayProcessor,
    FindNormProcessor,
    FindSurfaceRoughnessProcessor,
)
