# setup.py
from setuptools import setup, find_packages

setup(
    name="number_maker",
    version="0.1.0",
    description="Find formulas that make every number from a string of digits",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "sympy",
        "matplotlib",
        "pillow",
        "numpy",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "number-maker = number_maker.cli:main",
        ],
    },
)
