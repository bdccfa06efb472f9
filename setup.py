#!/usr/bin/env python

from setuptools import setup

setup(
    name="fileapi",
    version="1.0.0",
    description="API for text files in Google Drive, addressed by path per project",
    packages=["fileapi", "fileapi.api", "fileapi.drive"],
    include_package_data=True,
    zip_safe=False,
    keywords=["API", "text", "google drive"],
    classifiers=[
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    ],
    python_requires=">=3.10",
    install_requires=[
        "fastapi[all]",
        "httpx",
        "python-dotenv",
        "authlib",
        "pydantic>=2",
        "pydantic-settings",
        "class-doc",
        "uvicorn",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-httpx>=0.32",
            "anyio",
            "mypy",
            "flake8",
            "pre-commit",
        ]
    },
    entry_points={
        "console_scripts": [
            "fileapi = fileapi.__main__:main"
        ]
    },
)
