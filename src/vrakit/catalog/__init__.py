from vrakit.catalog.actions import ActionCatalog, ActionTemplateEngine
from vrakit.catalog.models import (
    Action,
    ActionTemplate,
    BusinessGroup,
    CatalogItem,
    Request,
    RequestState,
    RequestTemplate,
    Resource,
)
from vrakit.catalog.reader import CatalogReader
from vrakit.catalog.requests import RequestPoller, RequestSubmitter
from vrakit.catalog.resources import ResourceEnumerator

__all__ = [
    "Action",
    "ActionCatalog",
    "ActionTemplate",
    "ActionTemplateEngine",
    "BusinessGroup",
    "CatalogItem",
    "CatalogReader",
    "Request",
    "RequestPoller",
    "RequestState",
    "RequestSubmitter",
    "RequestTemplate",
    "Resource",
    "ResourceEnumerator",
]
