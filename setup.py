"""Setup script for the Blog API backend"""
from setuptools import find_namespace_packages, setup

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="blogapi",
    version="0.1.0",
    description="Blogging platform REST API - users, posts, categories and likes",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_namespace_packages(include=["blogapi", "blogapi.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Framework :: FastAPI",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110.0",
        "uvicorn[standard]>=0.27.0",
        "sqlalchemy>=2.0.0",
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",
        "python-jose[cryptography]>=3.3.0",
        "bcrypt>=4.0.0",
        "email-validator>=2.1.0",
        "python-multipart>=0.0.9",
        "slowapi>=0.1.9",
        "prometheus-client>=0.19.0",
        "prometheus-fastapi-instrumentator>=6.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "httpx>=0.26.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "blogapi=blogapi.main:run",
        ],
    },
)
