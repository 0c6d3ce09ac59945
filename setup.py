# -*- coding: utf-8 -*-
import setuptools
import pathlib
import site
import sys

# odd bug with develop (editable) installs, see: https://github.com/pypa/pip/issues/7953
site.ENABLE_USER_SITE = "--user" in sys.argv[1:]

required = [
    "setuptools-git",  # see link at bottom
    "nbconvert",  # provides jupyter-nbconvert, run as a subprocess
    "simplejson>= 3.19.2",
    "mashumaro",
    "loguru",
    "rich>=13.0.0",
    "click>=8.0.0",
    "click-option-group",
    "psutil>=6.1.0",
    "tqdm",
]

extras = {
    "test": ["pytest"],
    "dev": ["pytest", "doit", "ruff"],
}

here = pathlib.Path(__file__).parent.resolve()

long_description = (here / "README.md").read_text(encoding="utf-8")

# Read version
version = {}
with open("src/qopublish/_version.py", "r") as f:
    exec(f.read(), version)

if __name__ == "__main__":
    setuptools.setup(
        name="qopublish",
        version=version["__version__"],
        description="Convert and publish the QuantumOptics.jl example notebooks.",
        long_description=long_description,
        long_description_content_type="text/markdown",
        keywords=[
            "QuantumOptics.jl",
            "Jupyter",
            "nbconvert",
            "Documentation",
        ],
        classifiers=[
            "License :: OSI Approved :: MIT License",
            "Development Status :: 4 - Beta",
        ],
        license="MIT",
        package_dir={"": "src"},
        packages=setuptools.find_packages(
            where="src",
            exclude=["*.test", "*.test.*", "test.*", "test", "test_*"],
        ),
        entry_points={
            "console_scripts": [
                "qopublish=qopublish.cli:cli",
            ],
        },
        install_requires=required,
        extras_require=extras,
        python_requires=">= 3.11",
        setup_requires=["wheel"],  # force install of wheel first
    )
# https://setuptools.readthedocs.io/en/latest/userguide/datafiles.html
