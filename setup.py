from setuptools import setup

setup(
    name="nfa-builder",
    version="0.1.0",
    description="Thompson construction of NFAs for lexical token classes, with DOT export.",
    python_requires=">=3.9",
    packages=["nfa_builder"],
    py_modules=["main"],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "nfa-builder=nfa_builder.cli:run",
        ],
    },
)
