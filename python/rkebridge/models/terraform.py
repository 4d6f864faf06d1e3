"""
rkebridge/models/terraform.py

Defines Pydantic models for 'terraform show -json' output and the lookup that
turns an rke_cluster resource inside it into a flat-representation accessor:
 - OutputValue, Values, TerraformState
 - StateResource
 - find_resource_values
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, Field

from rkebridge.models.validator import validate_type
from rkebridge.resource.data import DictResourceData

RKE_CLUSTER_RESOURCE_TYPE = "rke_cluster"


class OutputValue(BaseModel):
    """Represents a Terraform output value as parsed from 'terraform show -json'.

    Attributes:
        sensitive: True if the output is marked sensitive.
        value: Arbitrary data from the Terraform output.
        type: Optional Terraform type hint (string, list, etc.).
    """

    sensitive: bool
    value: Any
    type: Union[str, List[Any], None] = None


class StateResource(BaseModel):
    """One managed or data resource inside a module.

    Attributes:
        address: Full resource address, e.g. 'module.k8s.rke_cluster.main'.
        mode: 'managed' or 'data'.
        type: Resource type, e.g. 'rke_cluster'.
        name: Resource name within its module.
        values: The resource's attribute values (the flat representation).
    """

    address: str
    mode: str = "managed"
    type: str
    name: str
    values: Dict[str, Any] = Field(default_factory=dict)


class Values(BaseModel):
    """Represents the 'values' block in a Terraform JSON state.

    Attributes:
        outputs: Mapping of output_name -> OutputValue for all outputs.
        root_module: Dictionary containing resources and possibly child modules.
    """

    outputs: Dict[str, OutputValue] = Field(default_factory=dict)
    root_module: Dict[str, Any]


class TerraformState(BaseModel):
    """Represents a Terraform JSON state at a high level.

    Attributes:
        format_version: The format version string of the Terraform state.
        terraform_version: The version of Terraform that generated this state.
        values: A Values instance including outputs and resource info.
    """

    format_version: str
    terraform_version: str
    values: Values

    def _resources_in_module(self, module_data: Dict[str, Any]) -> List[StateResource]:
        """Recursively collect resources in a module, including child modules."""
        resources = module_data.get("resources")
        own = (
            validate_type(resources, List[StateResource])
            if isinstance(resources, list)
            else []
        )

        child_modules = module_data.get("child_modules")
        nested = (
            [
                res
                for child in child_modules
                if isinstance(child, dict)
                for res in self._resources_in_module(child)
            ]
            if isinstance(child_modules, list)
            else []
        )
        return own + nested

    def resources(self) -> List[StateResource]:
        """All resources in the state, root module first."""
        return self._resources_in_module(self.values.root_module)


def find_resource_values(
    state: TerraformState,
    resource_type: str = RKE_CLUSTER_RESOURCE_TYPE,
    name: Optional[str] = None,
) -> DictResourceData:
    """Locate a managed resource and expose its attribute values for parsing.

    Args:
        state: The parsed Terraform state.
        resource_type: Resource type to match.
        name: Resource name or full address to match. If None, exactly one
            resource of resource_type must exist.

    Returns:
        A DictResourceData over the resource's values.

    Raises:
        KeyError: If no resource matches.
        ValueError: If several resources match and name does not disambiguate.
    """
    matches = [
        res
        for res in state.resources()
        if res.mode == "managed"
        and res.type == resource_type
        and (name is None or name in (res.name, res.address))
    ]
    if not matches:
        wanted = f"{resource_type}.{name}" if name else resource_type
        raise KeyError(f"Resource '{wanted}' not found in Terraform state.")
    if len(matches) > 1:
        addresses = ", ".join(res.address for res in matches)
        raise ValueError(
            f"Multiple '{resource_type}' resources found ({addresses}); pass a name."
        )
    return DictResourceData(matches[0].values)
