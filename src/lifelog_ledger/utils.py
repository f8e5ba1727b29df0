# -*- coding: utf-8 -*-
"""Console helpers shared by the client, ledger and processor."""

from __future__ import annotations
import sys


def eprint(msg: str, verbose: bool=False):
    if verbose:
        print(msg, file=sys.stderr)

def progress_print(msg: str, quiet: bool=False):
    if not quiet:
        print(msg, file=sys.stderr)
