from setuptools import setup, find_packages
import os

# Read version
with open(os.path.join('oraforge', 'VERSION'), 'r') as f:
    version = f.read().strip()

setup(
    name='oraforge',
    version=version,
    packages=find_packages(exclude=['tests', 'tests.*']),
    include_package_data=True,
    install_requires=[
        'sqlparse>=0.4.4',
        'sqlalchemy>=2.0.0',
    ],
    extras_require={
        'oracle': ['oracledb>=1.3.0'],
        'test': ['pytest>=7.0.0'],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
    ],
    entry_points={
        'console_scripts': [
            'oraforge=oraforge.main:main',
        ],
    },
    package_data={
        '': ['VERSION'],
    },
)
