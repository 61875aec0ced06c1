# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="lstree",
    version="0.3.0",
    description="List directory contents as a tree, respecting .gitignore and .ignore files",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["lstree", "lstree.*"]),
    python_requires=">=3.8",
    install_requires=[
        "rich>=12.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'lstree=lstree.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
        "Environment :: Console",
    ],
)
