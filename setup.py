"""Setup file for editable install compatibility."""
from setuptools import setup, find_packages

setup(
    name="mean-variance-frontier",
    version="1.0.0",
    description="Closed-form minimum-variance and efficient frontier portfolios",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    install_requires=[
        "numpy>=1.20",
        "pandas>=1.3",
        "scipy>=1.7",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.8",
)
