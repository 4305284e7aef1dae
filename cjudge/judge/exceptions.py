# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Exceptions raised by the judge package.

Note what's missing: there is no exception for "the program crashed" or
"the code didn't compile". Those are verdicts, and they come back inside
a JudgeResult. These classes cover faults around the engine: bad input
files and infrastructure trouble.
"""


class JudgeError(Exception):
    """Base for judge-side faults that aren't a verdict."""


class TestCaseFileError(JudgeError):
    """Raised when a test-case file is missing, unparseable, or malformed."""

    __test__ = False
