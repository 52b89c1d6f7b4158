import pathlib
import re

import setuptools


setuptools.setup(
    name="nodewalk",
    version="0.1.0",
    description="Traversal and dispatch engine for heterogeneous node trees.",
    long_description=re.sub(
        pattern="(?ms)^.. description-end.*",
        repl="",
        string=pathlib.Path("README.rst").read_text(encoding="utf-8"),
        count=1,
    ),
    long_description_content_type="text/x-rst",
    license="MIT",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Libraries",
    ],
    python_requires=">=3.9",
    packages=setuptools.find_packages(include=["nodewalk", "nodewalk.*"]),
    install_requires=[
        "attrs",
        "ConfigArgParse",
        "toml",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "nodewalk = nodewalk.driver:main",
        ],
    },
)
