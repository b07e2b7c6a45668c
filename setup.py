"""Setup script for DNA Evolve"""

from setuptools import find_packages, setup

with open("requirements.txt") as f:
    requirements = [
        line.strip() for line in f if line.strip() and not line.startswith("#")
    ]

setup(
    name="dna-evolve",
    version="0.1.0",
    description="Generational genetic algorithm engine for DNA-encoded candidates",
    packages=find_packages(exclude=["tests*"]),
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={
        "dev": ["pytest", "pytest-mock", "black", "isort", "mypy"],
    },
    entry_points={
        "console_scripts": ["dna-evolve=dna_evolve.cli:main"],
    },
)
