#!/usr/bin/env python
#-*- coding: utf-8 -*-
#pylint: disable=
"""
File       : processor.py
Description: Module for Processors used in multiple experiment-specific
             workflows.
"""

# Third party modules
import numpy as np

# Local modules
from D3DR import Processor

# Element types accepted by the numeric kernels
NUMERIC_TYPES = (
    np.bool_,
    np.int8, np.int16, np.int32, np.int64,
    np.uint8, np.uint16, np.uint32, np.uint64,
    np.float32, np.float64,
)


def as_numeric_array(data, name='data'):
    """Return `data` as a numpy array whose element type is one of
    `NUMERIC_TYPES`.

    :raises TypeError: For any other element type.
    :rtype: numpy.ndarray
    """
    data = np.asarray(data)
    if data.dtype.type not in NUMERIC_TYPES:
        raise TypeError(f'Unsupported element type for {name} ({data.dtype})')
    return data


class FindNormProcessor(Processor):
    """A Processor to compute the p-norm of every tuple of an
    attribute array.
    """
    def process(self, data, config=None):
        """Return the p-norm of every tuple of the last array in
        `data`.

        :param data: Input array of shape `(n_tuples,)` or
            `(n_tuples, n_components)`.
        :type data: Union[numpy.ndarray, list[PipelineData]]
        :param config: Initialization parameters for an instance of
            common.models.FindNormConfig.
        :type config: dict, optional
        :raises TypeError: For an unsupported element type.
        :raises ValueError: For a negative p-space value.
        :return: The norm of each tuple.
        :rtype: numpy.ndarray
        """
        config = self.get_config(
            config={} if config is None else config,
            schema='common.models.FindNormConfig')
        values = as_numeric_array(self.unwrap_pipelinedata(data)[-1])
        if values.ndim == 1:
            values = values.reshape(-1, 1)
        elif values.ndim != 2:
            raise ValueError(
                f'Invalid input array dimension ({values.ndim})')

        p = np.float32(config.p)
        with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
            norm = np.power(values.astype(np.float32), p).sum(
                axis=1, dtype=np.float32)
            norm = np.power(norm, np.float32(1) / p)
        self.logger.debug(
            f'Computed the {config.p}-norm of {norm.size} tuples')
        return norm.astype(np.float32)


class FindSurfaceRoughnessProcessor(Processor):
    """A Processor to estimate the roughness of a surface from the
    boundary cells of an image geometry.

    A straight line `y = a + b*x` is fit through the centres of the
    boundary cells. The roughness is the mean perpendicular distance
    of those centres to the line.
    """
    def process(self, data, config=None):
        """Return the roughness and the fitted line parameters.

        :param data: Boundary cell flags, one per cell with x varying
            fastest, a value larger than zero marks a boundary cell.
        :type data: Union[numpy.ndarray, list[PipelineData]]
        :param config: Initialization parameters for an instance of
            common.models.ImageGeometryConfig.
        :type config: dict
        :raises ValueError: If the flags do not match the geometry or
            do not define a line.
        :return: The mean distance, the intercept `a` and the slope
            `b`.
        :rtype: numpy.ndarray
        """
        config = self.get_config(
            config=config, schema='common.models.ImageGeometryConfig')
        flags = as_numeric_array(
            self.unwrap_pipelinedata(data)[-1], 'boundary cells').ravel()
        if flags.size != config.num_cells:
            raise ValueError(
                f'Number of boundary cell flags ({flags.size}) does not '
                f'match the image dimensions {config.dimensions}')

        indices = np.flatnonzero(flags > 0)
        if not indices.size:
            raise ValueError('No boundary cells found')
        nx, ny, _ = config.dimensions
        xs = config.origin[0] + (indices % nx + 0.5) * config.spacing[0]
        ys = config.origin[1] + ((indices // nx) % ny + 0.5) * config.spacing[1]

        if np.all(xs == xs[0]):
            raise ValueError(
                'Boundary cells do not define a line as a function of x')
        xmean = xs.mean()
        ymean = ys.mean()
        ssxx = np.sum(xs*xs) - xs.size * xmean * xmean
        ssxy = np.sum(xs*ys) - xs.size * xmean * ymean
        b = ssxy / ssxx
        a = ymean - b * xmean
        distance = np.mean(np.abs(ys - (a + b*xs)) / np.sqrt(1.0 + b*b))
        self.logger.info(
            f'Surface roughness: {distance} (line y = {a} + {b} x)')

        return np.array([distance, a, b], dtype=np.float64)


class AverageEdgeFaceCellArrayToVertexArrayProcessor(Processor):
    """A Processor to average an edge, face or cell attribute array of
    a node based geometry onto its vertices.
    """
    def process(self, data, connectivity, config=None):
        """Return, for every vertex, the mean value of the elements
        that share it. Vertices without elements get zero.

        :param data: Element attribute array of shape `(n_elements,)`
            or `(n_elements, n_components)`.
        :type data: Union[numpy.ndarray, list[PipelineData]]
        :param connectivity: Vertex indices of every element, shape
            `(n_elements, n_vertices_per_element)`.
        :type connectivity: numpy.ndarray
        :param config: Initialization parameters for an instance of
            common.models.AverageVertexConfig.
        :type config: dict, optional
        :raises ValueError: If `data` and `connectivity` do not match
            or the connectivity refers to unknown vertices.
        :return: The vertex attribute array.
        :rtype: numpy.ndarray
        """
        config = self.get_config(
            config={} if config is None else config,
            schema='common.models.AverageVertexConfig')
        values = as_numeric_array(self.unwrap_pipelinedata(data)[-1])
        connectivity = np.asarray(connectivity)
        if connectivity.ndim != 2 or not np.issubdtype(
                connectivity.dtype, np.integer):
            raise ValueError(
                'connectivity must be a 2D integer array '
                f'({connectivity.shape}, {connectivity.dtype})')
        if values.shape[0] != connectivity.shape[0]:
            raise ValueError(
                f'Number of element values ({values.shape[0]}) does not '
                f'match the number of elements ({connectivity.shape[0]})')

        num_vertices = config.num_vertices
        if num_vertices is None:
            num_vertices = int(connectivity.max()) + 1 if connectivity.size \
                else 0
        if connectivity.size and (
                connectivity.min() < 0 or connectivity.max() >= num_vertices):
            raise ValueError(
                f'Connectivity refers to vertices outside [0, {num_vertices})')

        num_per_element = connectivity.shape[1]
        sums = np.zeros((num_vertices,) + values.shape[1:], dtype=np.float64)
        counts = np.zeros(num_vertices, dtype=np.int64)
        np.add.at(
            sums, connectivity.ravel(),
            np.repeat(values.astype(np.float64), num_per_element, axis=0))
        np.add.at(counts, connectivity.ravel(), 1)

        counts = counts.reshape((-1,) + (1,)*(values.ndim-1))
        return (sums / np.maximum(counts, 1)).astype(np.float32)
