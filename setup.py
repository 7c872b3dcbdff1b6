#!/usr/bin/env python3
"""
Setup script for pyECOD curation tools
"""

from setuptools import setup, find_packages

setup(
    name="pyecod-curation",
    version="0.1.0",
    description="Evidence coverage and traceability analysis for ECOD domain partitions",
    author="RD Schaeffer",
    author_email="dustin.schaeffer@gmail.com",
    packages=find_packages(exclude=["ecod_curation.tests", "ecod_curation.tests.*"]),
    install_requires=[
        "psycopg2-binary>=2.9.3",
        "pyyaml>=6.0",
        "pandas>=1.4.0",
    ],
    extras_require={
        'test': [
            "pytest>=7.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'ecod-curate=ecod_curation.cli.main:main',
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
    ],
    python_requires=">=3.8",
)
