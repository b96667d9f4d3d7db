import copy
from typing import Any, Dict, Mapping

from .site import SiteContext


def build_argument_bundle(
    flags: Mapping[str, Any], site: SiteContext
) -> Dict[str, Any]:
    """Merge parsed flags with the site context into a fresh bundle.

    The manifest is deep-copied so a delegate cannot mutate the shared
    `SiteContext` through the bundle.
    """
    site_package_json: Dict[str, Any] = {}
    if site.is_local_site and site.manifest is not None:
        site_package_json = copy.deepcopy(dict(site.manifest.raw))
    return {
        **flags,
        "directory": site.directory,
        "sitePackageJson": site_package_json,
        "browserslist": list(site.browser_targets),
    }
