"""Resource copier for bundled and helper-directory resources."""

from .bundled import HELPERS_DIR_ENV, BundledResourceCopier

__all__ = ["HELPERS_DIR_ENV", "BundledResourceCopier"]
