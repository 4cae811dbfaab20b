"""
Setup script for dmat-core

Pure Python package in a src/ layout. The compute kernels come from
scipy's bundled BLAS (default) or from a system CBLAS library loaded at
runtime through ctypes, so nothing is compiled at install time.
"""

from pathlib import Path
from setuptools import setup, find_packages


# Read version from src/dmat/__init__.py
def get_version():
    version_file = Path("src/dmat/__init__.py")
    if version_file.exists():
        for line in version_file.read_text().splitlines():
            if line.startswith("__version__"):
                return line.split("=")[1].strip().strip('"').strip("'")
    return "0.1.0"


# Read long description from README
def get_long_description():
    readme = Path("README.md")
    if readme.exists():
        return readme.read_text(encoding="utf-8")
    return ""


setup(
    name="dmat-core",
    version=get_version(),
    description="Dense column-major double matrices with BLAS-backed kernels",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.20",
        "scipy>=1.7",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Mathematics",
    ],
    zip_safe=True,
)
