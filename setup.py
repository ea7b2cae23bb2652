# setup.py
from setuptools import setup, find_packages

setup(
    name="lispwalk",
    version="0.3.0",
    description="A tree-walking Lisp evaluator and a Python import-resolution tracer",
    packages=find_packages(include=["lispwalk", "lispwalk.*", "lispwalk_lsp", "lispwalk_lsp.*"]),
    package_data={"lispwalk": ["prelude/*.lisp"]},
    python_requires=">=3.10",
    install_requires=[
        "pygls>=1.1,<2",
        "lsprotocol>=2023.0.0",
    ],
    extras_require={
        "test": ["pytest>=7", "hypothesis>=6"],
    },
    entry_points={
        "console_scripts": [
            "lispwalk=lispwalk.cli:main",
            "lispwalk-ls=lispwalk_lsp.server:main",
        ],
    },
    zip_safe=False,
)
