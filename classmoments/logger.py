"""Custom logging for applications using classmoments."""

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


def configure_logging(verbosity: str) -> logging.Handler:
    """Configure the classmoments logger to write to STDERR."""
    log = logging.getLogger("classmoments")
    log.setLevel(verbosity)
    ch = logging.StreamHandler()
    ch.setFormatter(ElapsedFormatter())
    log.addHandler(ch)
    return ch


class ElapsedFormatter(logging.Formatter):
    """Format logging message to include elapsed time."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003
        """Format incoming message."""
        lvl = record.levelname
        name = record.name
        t = int(round(record.relativeCreated / 1000.0))
        msg = record.getMessage()
        logstr = "+{}s {}:{} {}".format(t, name, lvl, msg)
        return logstr
