from setuptools import setup, find_packages

with open("README.rst", 'r') as f:
    long_description = f.read()

setup(
    name='pyPFASST',
    version='0.1',
    description='A Python implementation of the parallel full approximation scheme in space and time (PFASST)',
    license="BSD-2",
    long_description=long_description,
    url="http://www.parallel-in-time.org/",

    packages=find_packages(),

    include_package_data=True,

    install_requires=[
        'numpy>=1.15.4',
        'scipy>=0.17.1',
        'qmat>=0.1.8',
    ],
    extras_require={
        'mpi': ['mpi4py>=3.0'],
        'test': ['pytest>=6.0', 'mpi4py>=3.0'],
    },
)
