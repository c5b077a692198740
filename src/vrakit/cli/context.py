from __future__ import annotations

from vrakit.clients.vra import VRAClient
from vrakit.config.settings import Settings, get_settings
from vrakit.workflows.deployment import DeploymentWorkflow


def build_workflow(settings: Settings | None = None) -> DeploymentWorkflow:
    """Create a workflow wired to the configured service endpoint."""
    settings = settings or get_settings()
    client = VRAClient.from_settings(settings)
    return DeploymentWorkflow.from_settings(client, settings)
