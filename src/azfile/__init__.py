"""Uniform object access to Azure Files shares."""
from .exc import AzFileError, InvalidInputError
from .util import HaltFlag, HaltInterrupt, ThreadingHaltFlag

__VERSION__ = "0.1.0"
