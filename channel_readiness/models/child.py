# Copyright contributors to the ITBench project. All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from typing import List, Optional

from pydantic import BaseModel, Field

from channel_readiness.models.status import ConditionStatusEnum

DEPLOYMENT_AVAILABLE = "Available"


class ChildCondition(BaseModel):
    type: str = Field(..., description="The type of the child condition (e.g., 'Available', 'Progressing').")
    status: ConditionStatusEnum = Field(..., description='The status of the condition: "True", "False", or "Unknown".')
    reason: Optional[str] = Field(default=None, description="A brief machine-readable explanation reported by the child.")
    message: Optional[str] = Field(default=None, description="A human-readable message reported by the child.")


class ChildStatus(BaseModel):
    conditions: List[ChildCondition] = Field(default_factory=list, description="List of conditions reported by the child resource.")


class ObservedDeployment(BaseModel):
    name: Optional[str] = Field(None, description="The name of the deployment.")
    exists: bool = Field(True, description="False if the deployment was looked up and not found.")
    status: ChildStatus = Field(default_factory=ChildStatus, description="The deployment status.")


class ObservedService(BaseModel):
    name: Optional[str] = Field(None, description="The name of the service.")
    exists: bool = Field(True, description="False if the service was looked up and not found.")


class ObservedEndpoints(BaseModel):
    name: Optional[str] = Field(None, description="The name of the endpoints.")
    exists: bool = Field(True, description="False if the endpoints were looked up and not found.")
    ready_addresses: int = Field(0, description="Number of ready addresses backing the service.")


class ObservedChannelService(BaseModel):
    name: str = Field(..., description="The name of the service representing the channel.")
    error: Optional[str] = Field(None, description="The error raised while reconciling the channel service, if any.")


class ObservedDeadLetterSink(BaseModel):
    uri: Optional[str] = Field(None, description="The resolved URI of the dead letter sink.")
    CACerts: Optional[str] = Field(None, description="CA certificates of the resolved dead letter sink.")
    audience: Optional[str] = Field(None, description="OIDC audience of the resolved dead letter sink.")
    error: Optional[str] = Field(None, description="The error raised while resolving the dead letter sink, if any.")


class ObservedChildren(BaseModel):
    """Child resources seen by one reconcile pass. ``None`` means not observed yet."""

    dispatcher: Optional[ObservedDeployment] = None
    service: Optional[ObservedService] = None
    endpoints: Optional[ObservedEndpoints] = None
    channel_service: Optional[ObservedChannelService] = None
    dead_letter_sink: Optional[ObservedDeadLetterSink] = None
