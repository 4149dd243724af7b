# setup.py
from setuptools import setup, find_packages

setup(
    name="keel",
    version="0.3.0",
    description="Incremental namespaces for REPL-driven, form-at-a-time evaluation",
    packages=find_packages(include=["keel", "keel.*", "keel_repl", "keel_repl.*"]),
    python_requires=">=3.10",
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": ["keel-repl=keel_repl.repl_server:main"],
    },
    zip_safe=False,
)
