#!/usr/bin/env python

# Copyright 2019 CSIRO (Data61)
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from setuptools import find_packages, setup

readme = open("README.md").read()

setup(
    name="classmoments",
    version="0.1.0",
    description="Class-conditional means and covariances over in-memory "
    "or chunked data",
    long_description=readme,
    long_description_content_type="text/markdown",
    author="Data61",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_dir={"classmoments": "classmoments"},
    include_package_data=True,
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.16",
        "tables>=3.4.2",
        "tqdm>=4.19.6",
    ],
    extras_require={
        "dev": [
            "pytest>=3.1.3",
            "pytest-mock>=1.6.2",
            "pytest-cov>=2.5.1",
            "flake8-docstrings>=1.1.0",
            "flake8-isort>=2.5",
            "flake8-quotes>=0.11.0",
            "mypy>=0.521",
        ]
    },
    license="Apache 2.0",
    zip_safe=False,
    keywords="classmoments",
    classifiers=[
        "Development Status :: 4 - Beta",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: POSIX",
        "Natural Language :: English",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Intended Audience :: Science/Research",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
)
