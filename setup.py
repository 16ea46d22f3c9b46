"""
Setup script for the arango_ops package.
"""

from setuptools import setup, find_packages

setup(
    name="arango_ops",
    version="0.1.0",
    description="Document, edge and index operations for ArangoDB",
    author="Shubham Singh",
    author_email="shubh2014shiv@gmail.com",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["client", "arango_ops_exceptions"],
    install_requires=[
        "httpx>=0.24.0",
        "pydantic>=2.0.0,<3.0.0",
        "pydantic-settings>=2.0.0",
        "pydantic-yaml>=1.1.0",
        "pyyaml>=6.0",
        "tenacity>=8.0.0",  # For retry logic
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "isort>=5.12.0",
            "mypy>=1.0.0",
            "flake8>=6.0.0",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.8",
)
