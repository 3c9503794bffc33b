from setuptools import setup, find_namespace_packages
import os

install_requires = ["pydantic>=2"]

# Define optional dependencies for development and specific features
extras_require = {"dev": ["pytest", "pygls>=1.0.0,<2"], "lsp": ["pygls>=1.0.0,<2"]}  # Language Server Protocol support

setup(
    name="blockasm-compiler",
    version="0.1.0",
    packages=find_namespace_packages(where=".", include=["basm", "basm.*"]),
    install_requires=install_requires,
    extras_require=extras_require,
    python_requires=">=3.11",
    entry_points={
        "console_scripts": [
            "basm = basm.cli:main",
        ],
    },
    include_package_data=True,
    package_data={},
    description="A compiler front end for the Block-ASM block-project language.",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
)
