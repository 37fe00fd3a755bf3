#-*- coding: utf-8 -*-
#pylint: disable=
"""
File       : pipeline.py
Description: Base classes shared by every D3DR filter

Define the `PipelineData` wrapper used to exchange data with the host
pipeline and the `PipelineItem` base class of all `Reader`s and
`Processor`s.
"""

# System modules
import logging
from time import time
from types import MethodType
from typing import (
    Literal,
    Optional,
)

# Third party modules
from pydantic import (
    ConfigDict,
    Field,
    PrivateAttr,
    conlist,
    constr,
    model_validator,
)

# Local modules
from D3DR.models import RunConfig


class PipelineData(dict):
    """Wrapper for all results of PipelineItem.execute."""
    def __init__(self, name=None, data=None, schema=None):
        super().__init__()
        self.__setitem__('name', name)
        self.__setitem__('data', data)
        self.__setitem__('schema', schema)


class PipelineItem(RunConfig):
    """Class representing a single filter invoked by a host
    pipeline.
    """
    logger: Optional[logging.Logger] = None
    name: Optional[constr(strip_whitespace=True, min_length=1)] = None
    schema_: Optional[constr(strip_whitespace=True, min_length=1)] = \
        Field(None, alias='schema')

    _method: MethodType = PrivateAttr(default=None)
    _method_type: Literal['read', 'process'] = PrivateAttr(default=None)
    _args: dict = PrivateAttr(default={})
    _allowed_args: conlist(item_type=str) = PrivateAttr(default=[])
    _required_args: conlist(item_type=str) = PrivateAttr(default=[])

    model_config = ConfigDict(
        arbitrary_types_allowed=True, populate_by_name=True)

    @model_validator(mode='after')
    def validate_config(self):
        """Validate the `PipelineItem` configuration.

        :return: The validated configuration.
        :rtype: PipelineItem
        """
        # System modules
        from inspect import (
            Parameter,
            signature,
        )

        if self.name is None:
            self.__name__ = self.__class__.__name__
        else:
            self.__name__ = self.name
        if self.logger is None:
            self.logger = logging.getLogger(self.__name__)
            self.logger.propagate = False
            if not self.logger.handlers:
                log_handler = logging.StreamHandler()
                log_handler.setFormatter(logging.Formatter(
                    '{asctime}: {name:20}: {levelname}: {message}',
                    datefmt='%Y-%m-%d %H:%M:%S', style='{'))
                self.logger.addHandler(log_handler)
        self.logger.setLevel(self.log_level)

        if hasattr(self, 'read'):
            self._method_type = 'read'
        elif hasattr(self, 'process'):
            self._method_type = 'process'
        else:
            return self
        self._method = getattr(self, self._method_type)
        sig = signature(self._method)
        self._allowed_args = [k for k, v in sig.parameters.items()
                              if v.kind == v.POSITIONAL_OR_KEYWORD]
        self._required_args = [k for k, v in sig.parameters.items()
                               if (v.kind == v.POSITIONAL_OR_KEYWORD
                                   and v.default is Parameter.empty)]
        self._args = {}
        return self

    @property
    def method(self):
        return self._method

    @property
    def method_type(self):
        return self._method_type

    @property
    def schema(self):
        return self.schema_

    def get_args(self):
        return self._args

    def set_args(self, **args):
        for k, v in args.items():
            if k in self._allowed_args:
                self._args[k] = v

    def get_required_args(self):
        return self._required_args

    @staticmethod
    def unwrap_pipelinedata(data):
        """Given a list of PipelineData objects, return a list of
        their `data` values.

        :param data: Input data to read or process that needs to be
            unwrapped from PipelineData before use.
        :type data: list[PipelineData]
        :return: The `'data'` values of the items in the input data.
        :rtype: list[object]
        """
        unwrapped_data = []
        if isinstance(data, list):
            for d in data:
                if isinstance(d, PipelineData):
                    unwrapped_data.append(d['data'])
                else:
                    unwrapped_data.append(d)
        else:
            unwrapped_data = [data]
        return unwrapped_data

    def get_config(
            self, data=None, config=None, schema=None, remove=True, **kwargs):
        """Look through `data` for the first item whose value for the
        `'schema'` key matches `schema`. Convert the value for that
        item's `'data'` key into the configuration's Pydantic model
        identified by `schema` and return it. If no item is found and
        config is specified, validate it against the configuration's
        Pydantic model identified by `schema` and return it.

        :param data: Input data from a previous `PipelineItem`.
        :type data: list[PipelineData], optional
        :param config: Initialization parameters for an instance of
            the Pydantic model identified by `schema`, required if
            data is unspecified, invalid or does not contain an item
            that matches the schema.
        :type config: dict, optional
        :param schema: Name of the Pydantic model class relative to
            the `D3DR` package (e.g. `'hedm.models.H5MicReaderConfig'`),
            defaults to the internal PipelineItem `schema` attribute.
        :type schema: str, optional
        :param remove: If there is a matching entry in `data`, remove
           it from the list, defaults to `True`.
        :type remove: bool, optional
        :raises ValueError: If there's no match for `schema` in `data`.
        :return: The first matching configuration model.
        :rtype: D3DRBaseModel
        """
        self.logger.debug(f'Getting {schema} configuration')
        t0 = time()

        if schema is None:
            schema = self.schema
        matching_config = False
        if isinstance(data, list):
            for i, d in enumerate(data):
                if isinstance(d, dict) and d.get('schema') == schema:
                    matching_config = d.get('data')
                    if remove:
                        data.pop(i)
                    break

        if not matching_config:
            if isinstance(config, dict):
                matching_config = dict(config)
            else:
                raise ValueError(
                    f'Unable to find a configuration for schema `{schema}`')

        mod_name, cls_name = schema.rsplit('.', 1)
        module = __import__(f'D3DR.{mod_name}', fromlist=[cls_name])
        matching_config.update(kwargs)
        model_config = getattr(module, cls_name)(**matching_config)

        self.logger.debug(
            f'Got {schema} configuration in {time()-t0:.3f} seconds')

        return model_config

    def execute(self, data):
        """Run the appropriate method of the object and return the
        result wrapped for the host pipeline.

        :param data: Input data.
        :type data: list[PipelineData]
        :return: The wrapped result of running read or process.
        :rtype: PipelineData
        """
        if 'data' in self._allowed_args:
            self._args['data'] = data
        missing = [k for k in self._required_args if k not in self._args]
        if missing:
            raise ValueError(
                f'Missing required argument(s) for "{self._method_type}": '
                + ', '.join(missing))
        t0 = time()
        self.logger.debug(f'Executing "{self._method_type}" with schema '
                          f'"{self.schema}" and {self._args}')
        self.logger.info(f'Executing "{self._method_type}"')
        result = self._method(**self._args)
        self.logger.info(
            f'Finished "{self._method_type}" in {time()-t0:.3f} seconds')
        return PipelineData(name=self.__name__, data=result, schema=self.schema)
