from vrakit.workflows.deployment import DeploymentWorkflow
from vrakit.workflows.results import ActionResult, ProvisionResult

__all__ = ["ActionResult", "DeploymentWorkflow", "ProvisionResult"]
