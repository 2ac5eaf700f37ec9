from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="gitviz",
    version="0.1.0",
    author="gitviz developers",
    author_email="example@example.com",
    description="Git history statistics as JSON or grep-friendly text",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/example/gitviz",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
    install_requires=[
        "gitpython>=3.1.0",
        "pandas>=1.0.0",
        "numpy>=1.18.0",
        "tqdm>=4.50.0",
        "orjson>=3.6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "gitviz=gitviz.cli:main",
        ],
    },
)
