"""Code to run if this package is used as a Python module."""

from .guacnoauth import main

main()
