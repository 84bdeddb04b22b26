"""Resource bundle discovery."""

from .bundle import BUNDLE_SUFFIX, Bundle, locate_bundle, resource_path

__all__ = ["BUNDLE_SUFFIX", "Bundle", "locate_bundle", "resource_path"]
