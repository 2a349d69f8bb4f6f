#!/usr/bin/env python

"""The setup script."""

from setuptools import setup, find_packages

with open("requirements.txt") as f:
    required = f.read().splitlines()

with open("requirements-test.txt") as f:
    test_required = f.read().splitlines()

with open("README.md") as f:
    readme = f.read()


setup(
    name="fix-plugin-azure-mssql",
    version="0.1.0",
    description="Manage Azure SQL elastic job credentials from a declarative definition.",
    python_requires=">=3.9",
    classifiers=[
        # Audience
        "Intended Audience :: System Administrators",
        "Intended Audience :: Information Technology",
        # License information
        "License :: OSI Approved :: Apache Software License",
        # Supported python versions
        "Programming Language :: Python :: 3",
        # Extra metadata
        "Environment :: Console",
        "Topic :: Utilities",
    ],
    entry_points={"console_scripts": ["fix-azure-mssql=fix_plugin_azure_mssql.__main__:main"]},
    install_requires=required,
    extras_require={"test": test_required},
    license="Apache Software License 2.0",
    long_description=readme,
    long_description_content_type="text/markdown",
    include_package_data=True,
    packages=find_packages(include=["fix_plugin_azure_mssql", "fix_plugin_azure_mssql.*"]),
    tests_require=test_required,
    zip_safe=False,
    keywords="azure sql job credential",
)
