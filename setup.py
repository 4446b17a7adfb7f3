from setuptools import find_packages, setup

setup(
    name="relfetch",
    version="0.1.0",
    description="List and download GitHub release assets",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "requests",
        "rich",
        "platformdirs",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-mock",
        ],
    },
    entry_points={
        "console_scripts": [
            "relfetch=relfetch.cli:main",
        ],
    },
)
