"""
csvx - Schema checker for CSV files
Install: pip install -e .
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="csvx",
    version="5.1.0",
    author="Diegoproggramer",
    author_email="",
    description="✓ Validate CSV files against typed csvx schemas",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/Diegoproggramer/csvx",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Utilities",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2.0.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "black>=23.0",
            "ruff>=0.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "csvx=csvx.cli:cli_main",
        ],
    },
    keywords="csv, schema, validation, checker, data-quality",
    project_urls={
        "Bug Reports": "https://github.com/Diegoproggramer/csvx/issues",
        "Source": "https://github.com/Diegoproggramer/csvx",
    },
)
