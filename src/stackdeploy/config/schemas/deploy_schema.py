"""Deploy step configuration schema."""
from typing import Any, Dict, List

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from stackdeploy.domain.core.exceptions import ConfigurationError
from stackdeploy.domain.provisioning.request import ProvisioningRequest


class DeployConfig(BaseModel):
    """Configuration consumed by the deploy virtual machine step."""
    model_config = ConfigDict(extra="forbid")

    # Resource references, either by id or by name
    service_offering_id: str = Field("", description="Service offering identifier")
    service_offering: str = Field("", description="Service offering name")
    disk_offering_id: str = Field("", description="Disk offering identifier")
    disk_offering: str = Field("", description="Disk offering name")
    zone_id: str = Field("", description="Zone identifier")
    zone: str = Field("", description="Zone name")
    template_id: str = Field("", description="Source template identifier")
    template: str = Field("", description="Source template name")
    network_ids: List[str] = Field(default_factory=list, description="Network identifiers")
    networks: List[str] = Field(default_factory=list, description="Network names")

    hypervisor: str = Field("", description="Hypervisor tag passed to the create call")
    user_data: str = Field("", description="User data, may contain template placeholders")
    template_name: str = Field("", description="Name of the template being built")

    # Async job handling
    state_timeout: float = Field(300.0, description="Seconds to wait for an async job")
    poll_interval: float = Field(2.0, description="Seconds between async job status checks")

    name_prefix: str = Field("packer", description="Prefix of the temporary display name")

    @field_validator('state_timeout', 'poll_interval')
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """Validate timing values."""
        if v <= 0:
            raise ValueError("Timing values must be positive")
        return v

    @field_validator('name_prefix')
    @classmethod
    def validate_name_prefix(cls, v: str) -> str:
        """Validate display name prefix."""
        if not v.strip():
            raise ValueError("Name prefix cannot be empty")
        return v.strip()

    @model_validator(mode='after')
    def validate_poll_interval(self) -> 'DeployConfig':
        """Validate relationship between poll interval and timeout."""
        if self.poll_interval > self.state_timeout:
            raise ValueError("Poll interval cannot be greater than state timeout")
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DeployConfig':
        """
        Build a configuration from raw step settings.

        Raises:
            ConfigurationError: listing every offending field; model-level
                failures carry no field name.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            fields = sorted({
                ".".join(str(part) for part in err["loc"])
                for err in e.errors()
                if err["loc"]
            })
            raise ConfigurationError(f"Invalid deploy configuration: {e}", fields) from e

    def to_request(self) -> ProvisioningRequest:
        """Build the provisioning request described by this configuration."""
        return ProvisioningRequest(
            service_offering_id=self.service_offering_id,
            service_offering=self.service_offering,
            disk_offering_id=self.disk_offering_id,
            disk_offering=self.disk_offering,
            zone_id=self.zone_id,
            zone=self.zone,
            template_id=self.template_id,
            template=self.template,
            network_ids=list(self.network_ids),
            networks=list(self.networks),
            hypervisor=self.hypervisor,
            user_data=self.user_data,
            template_name=self.template_name,
        )
