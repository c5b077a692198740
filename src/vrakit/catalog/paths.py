"""
Consumer API routes and reference parsing.

Routes are ``str.format`` templates with named segments. ``build_path`` is the
only way values get into a route and it always percent-encodes them, so an id
containing ``/`` or spaces cannot change the shape of the path.
"""

from __future__ import annotations

import string
from urllib.parse import quote

IDENTITY_API = "/identity/api"
TENANT_SUBTENANTS = IDENTITY_API + "/tenants/{tenant}/subtenants"

CONSUMER = "/catalog-service/api/consumer"
CONSUMER_REQUESTS = CONSUMER + "/requests"
CONSUMER_RESOURCES = CONSUMER + "/resources"

ENTITLED_CATALOG_ITEMS = CONSUMER + "/entitledCatalogItems"
ENTITLED_CATALOG_ITEM = ENTITLED_CATALOG_ITEMS + "/{catalog_item_id}"
ENTITLED_CATALOG_ITEM_VIEWS = CONSUMER + "/entitledCatalogItemViews"
REQUEST_TEMPLATE = ENTITLED_CATALOG_ITEM + "/requests/template"
CATALOG_ITEM_REQUESTS = ENTITLED_CATALOG_ITEM + "/requests"

REQUEST = CONSUMER_REQUESTS + "/{request_id}"
REQUEST_RESOURCE_VIEWS = REQUEST + "/resourceViews"
REQUEST_RESOURCES = REQUEST + "/resources"

RESOURCE = CONSUMER_RESOURCES + "/{resource_id}"
RESOURCE_ACTIONS = RESOURCE + "/actions"
RESOURCE_ACTION_REQUESTS = RESOURCE_ACTIONS + "/{action_id}/requests"
RESOURCE_ACTION_TEMPLATE = RESOURCE_ACTION_REQUESTS + "/template"

_formatter = string.Formatter()


def build_path(template: str, **segments: object) -> str:
    """Fill the named segments of ``template`` with URL-encoded values.

    Raises:
        KeyError: a segment named in the template was not supplied
        ValueError: a supplied value is empty, or a supplied name is unused
    """
    names = {field for _, field, _, _ in _formatter.parse(template) if field}
    unused = set(segments) - names
    if unused:
        raise ValueError(f"Unknown path segments: {', '.join(sorted(unused))}")

    encoded: dict[str, str] = {}
    for name in names:
        value = str(segments[name])
        if not value:
            raise ValueError(f"Path segment '{name}' must not be empty")
        encoded[name] = quote(value, safe="")
    return template.format(**encoded)


def request_id_from_location(location: str | None) -> str | None:
    """Return the final path segment of a Location reference.

    ``https://host/catalog-service/api/consumer/requests/abc-123`` yields
    ``abc-123``. Returns None when the reference is missing, holds no ``/``,
    or ends with one (empty trailing segment). Query strings and fragments
    are not part of the id.
    """
    if not location:
        return None
    reference = location.split("#", 1)[0].split("?", 1)[0]
    index = reference.rfind("/")
    if index < 0:
        return None
    request_id = reference[index + 1 :]
    return request_id or None
