#!/usr/bin/env python
# coding: utf-8

from setuptools import setup, find_packages


setup(
    name='kubediscovery',
    url='https://github.com/miracle2k/kubediscovery',
    version='0.1',
    license='BSD',
    author='Michael Elsdörfer',
    author_email='michael@elsdoerfer.com',
    description=
        'decides whether and how Kubernetes discovery is wired into a node',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'click>=2.0',
        'pyyaml>=3.11',
        'gevent>=0.6.1',
        'werkzeug>=2.2',
        'clint>=0.3.7',
    ],
    extras_require={
        'test': ['pytest', 'mock'],
    },
    classifiers=[
        'Development Status :: 2 - Pre-Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: BSD License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
    ],
    entry_points="""
[console_scripts]
kubediscovery = kubediscovery.cli:run
""",
)
