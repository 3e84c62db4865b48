from setuptools import setup, find_packages


with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="dumpreport",
    version="0.3.0",
    author="Andrey Golovanov",
    description="Aggregate test-run result dumps and cluster health into a browsable report.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={
        "dumpreport": ["templates/*.html"],
        "dumpreport.schemas": ["*.json"],
    },
    python_requires=">=3.10",
    install_requires=[
        "PyYAML>=6.0",
        "jsonschema>=4.0",
        "nbformat>=5.7",
        "jinja2>=3.1",
        "fastapi>=0.100",
        "uvicorn>=0.23",
    ],
    extras_require={
        "dev": ["pytest>=7.0", "httpx>=0.24"],
    },
    entry_points={
        "console_scripts": ["dumpreport=dumpreport.cli:main"],
    },
)
