"""
setup.py

Packaging metadata and CLI entry point for bundle-pipeline.

Version: 1.0.0: rule execution engine for npm projects with file discovery,
async loader pipeline, bounded parallel processing and a click CLI.
"""
from setuptools import setup, find_packages

setup(
    name="bundle-pipeline",
    version="1.0.0",
    packages=find_packages(include=["bundler", "bundler.*", "cli", "cli.*"]),
    install_requires=[
        "click",
        "pydantic>=2.0",
        "PyYAML",
        "python-dotenv",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "hypothesis",
        ],
    },
    entry_points={
        "console_scripts": [
            "bundle-pipeline=cli:cli",
        ],
    },
    python_requires=">=3.10",
)
