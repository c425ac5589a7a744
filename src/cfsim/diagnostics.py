# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

"""
Warning and error classes and general cfsim diagnostic code.
"""


class DataWarning(UserWarning):
    """
    Warning raised for detectable problems with input data.
    """

    pass


class DataError(Exception):
    """
    Error raised for detectable problems with input data.
    """

    pass


class FieldError(KeyError):
    """
    The requested field is not rated in a rating vector.  Asking a vector for
    the value of one of its own rated fields and not finding it is a contract
    violation, so this is raised rather than returning a sentinel.
    """

    entity: int
    "The ID of the vector's owner."
    field: int
    "The missing field ID."

    def __init__(self, entity: int, field: int):
        super().__init__(f"{entity}[{field}]")
        self.entity = entity
        self.field = field


class ConfigWarning(UserWarning):
    """
    Warning raised for detectable problems with component configurations.
    """

    pass
