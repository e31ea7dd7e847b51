from setuptools import setup, find_packages

setup(
    name="dvpackager",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "rich>=13.0.0",  # Explicit minimum version
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "dvpackager=dvpackager.__main__:main",
        ],
    },
    python_requires=">=3.8",
)
