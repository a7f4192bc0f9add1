from setuptools import setup, find_packages

setup(
    name="numeric_kernel",
    version="0.1.0",
    description="Deterministic fixed-precision decimal numeric kernel for financial calculators",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "pandas",
        "pydantic>=2",
        "pydantic-settings>=2",
        "structlog",
    ],
    extras_require={
        "test": [
            "pytest",
            "numpy",
            "scipy",
        ],
    },
    python_requires=">=3.8",
)
