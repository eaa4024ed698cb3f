# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="rolereach",
    version="1.0.0",
    description="Role reachability audit for low-code application models",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["rolereach*"]),
    python_requires=">=3.9",
    install_requires=[
        "requests",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'rolereach=rolereach.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
