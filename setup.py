#!/usr/bin/env python3
"""
Setup configuration for the Rx Barcode Generator
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

setup(
    name="rx-barcode-generator",
    version="1.0.0",
    author="Rx Barcode Team",
    author_email="",
    description="Pharmacy Rx/NDC Code 128 and GS1 Data Matrix barcode generator",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*", "docs", "examples", "scripts"]),
    python_requires=">=3.9",
    install_requires=[
        "streamlit>=1.37",
        "pandas>=1.5",
        "openpyxl>=3.1",
        "reportlab>=3.6",
        "pymongo>=4.0",
        "python-dateutil>=2.8",
        "python-barcode>=0.15",
        "Pillow>=9.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Healthcare Industry",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
    keywords="gs1 barcode ndc gtin datamatrix code128 pharmacy healthcare",
)
