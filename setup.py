#!/usr/bin/env python3
"""
Setup script for the heritage-catalog package
"""

from setuptools import setup, find_packages

setup(
    name="heritage-catalog",
    version="1.0.0",
    package_dir={"": "backend"},
    packages=find_packages(where="backend", include=["heritage_catalog", "heritage_catalog.*"]),
    python_requires=">=3.9",
    install_requires=[
        # 🚀 Web Framework
        "fastapi>=0.104.1",

        # 📋 Data Validation & Settings
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",
        "python-dotenv>=1.0.0",

        # 🗄️ Database
        "asyncpg>=0.29.0",

        # 📊 Observability
        "prometheus-client>=0.19.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "httpx>=0.25.2",
        ],
    },
)
