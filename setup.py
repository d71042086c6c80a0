"""Setup file for package."""

import pathlib
from setuptools import find_packages, setup

long_description = (pathlib.Path(__file__).parent.resolve() / "README.md").read_text(
    encoding="utf-8"
)

setup(
    name="python-sofm",
    version="0.1.0",
    description="Python implementation of the Self-Organizing Feature Map",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "Topic :: Software Development :: Libraries",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
    ],
    keywords="som sofm kohonen-map self-organizing-map machine-learning",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=["numpy", "pandas", "scikit-learn", "tqdm"],
    extras_require={"test": ["pytest"]},
    license="MIT",
)
