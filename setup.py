"""
Setup configuration for Earth Smiles package
Enables installation and proper module importing
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="earthsmiles",
    version="1.0.0",
    author="Earth Smiles Development Team",
    description="Semicircular bund (earth smile) design calculator with layout and cross-section rendering",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["earthsmiles_core", "earthsmiles_core.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Hydrology",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.24.0",
        "pandas>=2.0.0",
        "matplotlib>=3.7.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "earthsmiles=earthsmiles_core.__main__:main",
        ],
    },
)
