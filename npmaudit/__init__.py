"""npm audit fix — automated npm vulnerability remediation for CI"""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("npmaudit")
except PackageNotFoundError:
    __version__ = "dev"

__author__ = "npmaudit"
