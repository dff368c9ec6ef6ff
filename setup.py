from setuptools import setup, find_packages
import pathlib

# Detect layout
use_src = pathlib.Path("src/tabcheck").exists()
pkg_args = {"package_dir": {"": "src"}, "packages": find_packages(where="src")} if use_src \
           else {"packages": find_packages(where=".", exclude=["tests", "tests.*"])}

setup(
    name="tab-check",
    version="0.1.0",
    description="Line-accurate structural and per-column validation of CSV-like text",
    python_requires=">=3.8",
    include_package_data=True,
    install_requires=[
        "typer",
        "PyYAML",
        "jsonschema",
        "pandas",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["tabcheck=tabcheck.cli:app"],
    },
    **pkg_args
)
