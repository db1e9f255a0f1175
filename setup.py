"""Setuptools configuration for the Kudos Board UI and API."""

from setuptools import find_packages, setup


setup(
    name="kudos-board",
    version="1.0.0",
    description="Kudos Board web UI with offline fallback and its PostgreSQL-backed REST API",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={"board": ["templates/pages/*.html"]},
    py_modules=[
        "load_data",
        "run",
        "run_api",
    ],
    install_requires=[
        "flask",
        "psycopg[binary]",
    ],
    extras_require={
        "test": ["pytest", "beautifulsoup4"],
        "docs": ["sphinx"],
    },
)
