#!/usr/bin/env python
from setuptools import setup

setup(name='dsdlc',
      version='0.1',
      description='Front end for the DSDL interface definition language: parsing, constant evaluation and schema assembly',
      packages=['dsdlc'],
      python_requires='>=3.7',
      install_requires=['lark>=1.1', 'dataslots>=1.0'],
      extras_require={'test': ['pytest']},
)
