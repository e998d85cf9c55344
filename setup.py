from setuptools import find_packages, setup

setup(
    name="migration-hooks",
    version="0.1.0",
    description="Priority-ordered lifecycle hooks and per-step handler files for schema migration runs",
    packages=find_packages(include=["migration_hooks", "migration_hooks.*"]),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "pydantic>=2",
        "PyYAML",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "migration-hooks=migration_hooks.cli:main",
        ],
    },
)
