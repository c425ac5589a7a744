# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

from importlib.metadata import PackageNotFoundError, version


def cfsim_version() -> str:
    try:
        return version("cfsim")
    except PackageNotFoundError:  # pragma: nocover
        return "UNKNOWN"
