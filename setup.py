"""Setup configuration for the crack field background."""
from setuptools import setup, find_packages

setup(
    name="crackfield",
    version="0.1.0",
    description="A procedural crack and injection background effect",
    author="Eric",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "pygame>=2.5.0",
        "watchdog>=3.0.0",
        "numpy>=1.20.0",
        "scipy>=1.7.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.8",
    entry_points={
        "console_scripts": [
            "crackfield=crackfield.__main__:main",
        ],
    },
)
