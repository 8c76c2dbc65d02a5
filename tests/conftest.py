"""Configuration for test suite."""

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

from collections import namedtuple

import numpy as np
import pytest

TestClassData = namedtuple(
    "TestClassData",
    [
        "data",
        "nlab",
        "nclasses",
        "rnd",
    ],
)


@pytest.fixture
def small_data():
    """The four point example used throughout the docs."""
    x = np.array([[1., 2.], [3., 4.], [5., 6.], [7., 8.]])
    nlab = np.array([1, 1, 2, 2])
    return x, nlab


@pytest.fixture(params=list(range(10)))
def random_class_data(request):
    """Make a bunch of random labelled datasets."""
    r = np.random.RandomState(request.param)
    m = r.randint(20, 200)
    k = r.randint(1, 6)
    c = r.randint(1, 5)
    x = r.normal(loc=r.uniform(-10, 10, size=k),
                 scale=r.uniform(0.5, 3, size=k), size=(m, k))
    nlab = r.randint(0, c + 1, size=m)
    # make sure every class has at least two samples
    nlab[:2 * c] = np.repeat(np.arange(1, c + 1), 2)
    data = TestClassData(data=x, nlab=nlab, nclasses=c, rnd=r)
    return data
