from setuptools import find_packages, setup

setup(
    name="restpager",
    version="0.1.0",
    description="One iteration contract for paginated REST endpoints",
    packages=find_packages(include=["restpager", "restpager.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0",
        "PyYAML>=6.0",
        "rich>=13.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "restpager=restpager.cli:main",
        ],
    },
)
