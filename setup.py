# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="beavieeer",
    version="0.1.0",
    description="Beavieeer: a small dynamically-typed scripting language with a Pratt parser and tree-walking evaluator",
    python_requires=">=3.10",
    packages=find_namespace_packages(include=["beavieeer", "beavieeer.*", "beavieeer_lsp", "beavieeer_lsp.*"]),
    package_data={"beavieeer.prelude": ["*.bv"]},
    install_requires=[
        "pygls>=1.1,<2",
        "lsprotocol",
    ],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": [
            "beavieeer=beavieeer.__main__:main",
            "beavieeer-ls=beavieeer_lsp.server:main",
        ],
    },
    zip_safe=False,
)
