"""
Setup script for readprep-core.

readprep is the practice core of a reading/writing exam trainer. It turns
public-domain and news text into exam-sized passages, assembles
diversified practice sessions from generated items, adapts difficulty to
recent accuracy and schedules spaced review of missed items.

The 'readprep' command is a developer CLI over the core.
"""

from setuptools import find_packages, setup

setup(
    name="readprep-core",
    version="0.3.0",
    description="Passage ingestion, session selection and spaced review for reading exam practice",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="readprep",
    packages=find_packages(include=["readprep", "readprep.*"]),
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "readprep=readprep.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Education",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Text Processing",
    ],
    keywords="reading exam practice spaced-repetition passages education",
)
