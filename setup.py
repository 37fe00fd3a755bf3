#!/usr/bin/env python
"""
Standard python setup.py file
to build     : python setup.py build
to install   : python setup.py install --prefix=<some dir>
to clean     : python setup.py clean
to run tests : python -m unittest discover -s D3DR/test -t . -p '*_t.py'
"""

import setuptools

# [set version]
version = '0.1.0'
# [version set]

with open("README.md", "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="D3DR",
    version=version,
    author="",
    author_email="",
    description="DREAM3D Review filters: HEDM mic file reader and "
                "attribute array processors",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=[
        'D3DR',
        'D3DR.common',
        'D3DR.hedm',
    ],
    package_dir={
        'D3DR': 'D3DR',
        'D3DR.common': 'D3DR/common',
        'D3DR.hedm': 'D3DR/hedm',
    },
    entry_points={
        'console_scripts': ['D3DR = D3DR.reader:main']
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    python_requires='>=3.8',
    install_requires=[
        'PyYAML',
        'h5py',
        'numpy',
        'pydantic>=2',
    ],
    extras_require={
        'test': ['pytest'],
    },
)
