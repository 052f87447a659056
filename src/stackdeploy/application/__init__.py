"""Application layer - the deploy step and the services it composes."""

from .deploy_step import DeployVirtualMachineStep
from .job_waiter import AsyncJobWaiter
from .pipeline import Step, StepAction, compensating, run_steps
from .resolver import ResourceResolver
from .user_data import BootCommandTemplateData, UserDataRenderer

__all__ = [
    "AsyncJobWaiter",
    "BootCommandTemplateData",
    "DeployVirtualMachineStep",
    "ResourceResolver",
    "Step",
    "StepAction",
    "UserDataRenderer",
    "compensating",
    "run_steps",
]
