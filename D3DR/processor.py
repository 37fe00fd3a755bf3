#!/usr/bin/env python
#-*- coding: utf-8 -*-
"""
File       : processor.py
Description: Processor module

Define a generic `Processor` object.
"""

# Local modules
from D3DR.pipeline import PipelineItem


class Processor(PipelineItem):
    """Generic data processor.

    The job of any `Processor` is to receive data handed over by the
    host pipeline, process it in some way, and return the result for
    the host to pass on.
    """
    def process(self, data):
        """Extract the contents of the input data and return it
        unaltered.

        :param data: Input data.
        :return: Processed data.
        """
        # If needed, extract data from a returned value of Reader.read
        if isinstance(data, list):
            if all(isinstance(d, dict) for d in data):
                data = data[-1]['data']
        return data
