"""Exceptions and warnings raised while computing class statistics."""

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

import logging
import sys
from typing import Any, Callable, List, Sequence

log = logging.getLogger(__name__)


class Error(Exception):
    """Base class for exceptions in classmoments."""

    def __init__(self, msg: str = "classmoments error.") -> None:
        super().__init__(msg)


def catch_and_exit(f: Callable) -> Callable:
    """Decorate function to exit program if it throws an Error."""

    def wrapped(*args: Any, **kwargs: Any) -> None:
        try:
            f(*args, **kwargs)
        except Error as e:
            log.error(f"{type(e).__name__}: {e}")
            sys.exit(1)

    return wrapped


class InvalidArgument(Error):
    """An argument has a value the computation cannot use."""

    def __init__(self, name: str, value: Any, expected: str) -> None:
        super().__init__(
            f"Invalid value {value!r} for '{name}': expected {expected}"
        )


class ShapeMismatch(Error):
    """Two arrays that must agree in a dimension do not."""

    def __init__(self, what: str, expected: int, got: int) -> None:
        super().__init__(
            f"{what} mismatch: expected {expected} but got {got}"
        )


class BlockTooLarge(Error):
    """Materialising a source would exceed the allowed block size."""

    def __init__(self, size_mb: float, max_mb: float) -> None:
        super().__init__(
            f"Reading the whole source needs {size_mb:0.2f}MB which exceeds "
            f"the maximum block size of {max_mb:0.2f}MB"
        )


class DegenerateNormalization(RuntimeWarning):
    """Unbiased (M-1) normalisation requested for single-sample classes."""

    def __init__(self, classes: Sequence[Any]) -> None:
        cls_list: List[Any] = list(classes)
        super().__init__(
            f"Classes {cls_list} have a single sample so their covariance "
            "cannot be normalised by M-1; returning NaN"
        )
