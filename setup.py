"""
Setup script for Aim Coach
"""

from pathlib import Path
from setuptools import setup, find_packages

# Read requirements
requirements = []
req_file = Path(__file__).parent / "requirements.txt"
if req_file.exists():
    with open(req_file) as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith('#'):
                requirements.append(line)

# Read README
readme_file = Path(__file__).parent / "README.md"
long_description = ""
if readme_file.exists():
    with open(readme_file) as f:
        long_description = f.read()

setup(
    name="aim-coach",
    version="1.0.0",
    author="Aim Coach",
    description="Shot accuracy analytics and coaching recommendations",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["aim_coach.tests"]),
    include_package_data=True,
    package_data={
        'aim_coach': [
            'config/*.yaml',
            'schemas/*.json',
        ]
    },
    install_requires=requirements,
    extras_require={
        'test': ['pytest>=7.0.0'],
    },
    python_requires=">=3.9",
    entry_points={
        'console_scripts': [
            'aim-coach=aim_coach.main:main',
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Games/Entertainment",
    ],
)
