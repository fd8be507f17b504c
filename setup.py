"""
loadpath - Setup Configuration

Virtual filesystem and load path resolution for embedded interpreters:
in-memory, host, hybrid and search-path stores behind one require/load
contract.

License: Apache-2.0
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

# Core dependencies
core_deps = [
    # Configuration validation
    "pydantic>=2.11.9",
    # CLI
    "click>=8.1.7",
]

# Development dependencies
dev_deps = [
    # Testing
    "pytest>=8.4.1",
    "pytest-mock>=3.14.1",
    "pytest-cov>=6.2.1",
    # Code quality
    "black>=25.0.0",
    "flake8>=7.1.0",
    "mypy>=1.13.0",
]

setup(
    name="loadpath",
    version="0.1.0",

    # Package description
    description="Virtual filesystem and load path resolution for embedded interpreters",
    long_description=long_description,
    long_description_content_type="text/markdown",

    # Package discovery
    packages=find_packages(where="src"),
    package_dir={"": "src"},

    # Python version requirement
    python_requires=">=3.11",

    # Dependencies
    install_requires=core_deps,

    # Optional dependencies (extras)
    extras_require={
        "test": ["pytest>=8.4.1", "pytest-mock>=3.14.1"],
        "dev": core_deps + dev_deps,
    },

    # PyPI classifiers
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
        "Operating System :: POSIX :: Linux",
        "Operating System :: MacOS",
        "Operating System :: Microsoft :: Windows",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Programming Language :: Python :: 3 :: Only",
        "Topic :: Software Development :: Interpreters",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: System :: Filesystems",
    ],

    keywords=[
        "vfs", "virtual-filesystem", "require", "load-path",
        "interpreter", "embedding", "module-loading",
    ],

    license="Apache-2.0",

    include_package_data=True,
    zip_safe=False,

    entry_points={
        "console_scripts": [
            "loadpath=loadpath.cli:main",
        ],
    },
)
