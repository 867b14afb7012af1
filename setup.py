from setuptools import setup, find_packages

setup(
    name="lingualink",
    version="0.1",
    packages=find_packages(exclude=("tests", "tests.*", "alembic", "alembic.*")),
    python_requires=">=3.9",
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy>=2.0",
        "psycopg2-binary",
        "python-jose[cryptography]",
        "passlib[bcrypt]",
        "bcrypt<5",
        "python-multipart",
        "pydantic[email]>=2",
        "pydantic-settings",
        "python-dotenv",
        "alembic",
        "stripe>=8",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
