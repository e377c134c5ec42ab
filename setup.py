"""
Character Authentication

Pluggable authenticator modules for the character host application.
"""

from setuptools import setup, find_packages

setup(
    name="character-authentication",
    version="1.0.0",
    description="Pluggable authenticators for the character host application",
    author="Character",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.11",
    install_requires=[
        # Web framework
        "fastapi>=0.110.0",
        "uvicorn>=0.27.0",
        "python-multipart>=0.0.9",
        "itsdangerous>=2.1.0",

        # Configuration and schemas
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",

        # Database
        "sqlalchemy[asyncio]>=2.0.25",
        "aiosqlite>=0.19.0",
        "asyncpg>=0.29.0",

        # Password hashing
        "bcrypt>=4.1.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.1.0",
            "httpx>=0.26.0",
            "black>=23.10.0",
            "flake8>=6.1.0",
            "mypy>=1.7.0",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3.11",
        "License :: Other/Proprietary License",
    ],
)
