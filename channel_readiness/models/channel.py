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

from typing import ClassVar, Dict, Optional

from pydantic import BaseModel, Field

from channel_readiness.app.utils import get_url_scheme
from channel_readiness.condition_manager import ConditionManager
from channel_readiness.condition_store import ConditionStore
from channel_readiness.models.child import DEPLOYMENT_AVAILABLE, ChildStatus
from channel_readiness.models.status import READY, Condition
from channel_readiness.projector import ChildStatusProjector
from channel_readiness.registry import ConditionRegistry

# Ready is True when all the dependent conditions below are True.
IMC_CONDITION_READY = READY

# A k8s Service for the dispatcher exists. Service has no meaningful status of its own.
IMC_CONDITION_SERVICE_READY = "ServiceReady"

# The dispatcher Service is backed by at least one endpoint.
IMC_CONDITION_ENDPOINTS_READY = "EndpointsReady"

# The channel meets the Addressable contract and has a non-empty hostname.
IMC_CONDITION_ADDRESSABLE = "Addressable"

# The ExternalName Service representing the channel is ready. There are no endpoints to check.
IMC_CONDITION_CHANNEL_SERVICE_READY = "ChannelServiceReady"

# A dead letter sink in spec.delivery resolved to a URI, or none is configured.
IMC_CONDITION_DEAD_LETTER_SINK_RESOLVED = "DeadLetterSinkResolved"

# Keyed off the dispatcher Deployment's Available condition. Informational only.
IMC_CONDITION_DISPATCHER_READY = "DispatcherReady"

IMC_CONDITION_REGISTRY = ConditionRegistry.declare_dependents(
    IMC_CONDITION_SERVICE_READY,
    IMC_CONDITION_ENDPOINTS_READY,
    IMC_CONDITION_ADDRESSABLE,
    IMC_CONDITION_CHANNEL_SERVICE_READY,
    IMC_CONDITION_DEAD_LETTER_SINK_RESOLVED,
    happy=IMC_CONDITION_READY,
    auxiliary=[IMC_CONDITION_DISPATCHER_READY],
)

DISPATCHER_PROJECTOR = ChildStatusProjector(
    parent_type=IMC_CONDITION_DISPATCHER_READY,
    child_type=DEPLOYMENT_AVAILABLE,
    child_label="Dispatcher Deployment",
    false_reason="DispatcherDeploymentFalse",
    unknown_reason="DispatcherDeploymentUnknown",
)


class Metadata(BaseModel):
    name: str
    namespace: str = "default"
    generation: int = Field(0, description="Sequence number of the desired state, bumped on every spec change.")
    labels: Optional[Dict[str, str]] = None


class Destination(BaseModel):
    uri: Optional[str] = Field(None, description="An absolute URI or a path relative to the resolved reference.")
    ref: Optional[Dict[str, str]] = Field(None, description="Reference to an addressable object (apiVersion, kind, name, namespace).")


class DeliverySpec(BaseModel):
    deadLetterSink: Optional[Destination] = Field(None, description="The sink receiving events that could not be delivered.")
    retry: Optional[int] = Field(None, description="The minimum number of retries before sending to the dead letter sink.")


class ChannelSpec(BaseModel):
    delivery: Optional[DeliverySpec] = None


class Addressable(BaseModel):
    name: Optional[str] = None
    url: Optional[str] = None
    CACerts: Optional[str] = None
    audience: Optional[str] = None


class DeliveryStatus(BaseModel):
    deadLetterSinkUri: Optional[str] = None
    deadLetterSinkCACerts: Optional[str] = None
    deadLetterSinkAudience: Optional[str] = None


class InMemoryChannelStatus(ConditionStore):
    condition_registry: ClassVar[ConditionRegistry] = IMC_CONDITION_REGISTRY

    address: Optional[Addressable] = Field(None, description="The address at which the channel accepts events.")
    deliveryStatus: DeliveryStatus = Field(default_factory=DeliveryStatus, description="The resolved delivery options.")

    def manage(self) -> ConditionManager:
        return ConditionManager(self.condition_registry, self)

    def get_condition(self, type: str) -> Optional[Condition]:
        return self.manage().get_condition(type)

    def initialize_conditions(self):
        self.manage().initialize_conditions()

    def set_address(self, address: Optional[Addressable]):
        if address is not None and address.url:
            self.address = address.model_copy(update={"name": get_url_scheme(address.url)})
            self.manage().mark_true(IMC_CONDITION_ADDRESSABLE)
        else:
            self.address = address
            self.manage().mark_false(IMC_CONDITION_ADDRESSABLE, "emptyHostname", "hostname is the empty string")

    def mark_dispatcher_failed(self, reason: str, message: str):
        self.manage().mark_false(IMC_CONDITION_DISPATCHER_READY, reason, message)

    def mark_dispatcher_unknown(self, reason: str, message: str):
        self.manage().mark_unknown(IMC_CONDITION_DISPATCHER_READY, reason, message)

    def propagate_dispatcher_status(self, deployment_status: ChildStatus) -> Optional[Condition]:
        return DISPATCHER_PROJECTOR.project(self.manage(), deployment_status)

    def mark_service_failed(self, reason: str, message: str):
        self.manage().mark_false(IMC_CONDITION_SERVICE_READY, reason, message)

    def mark_service_unknown(self, reason: str, message: str):
        self.manage().mark_unknown(IMC_CONDITION_SERVICE_READY, reason, message)

    def mark_service_true(self):
        self.manage().mark_true(IMC_CONDITION_SERVICE_READY)

    def mark_channel_service_failed(self, reason: str, message: str):
        self.manage().mark_false(IMC_CONDITION_CHANNEL_SERVICE_READY, reason, message)

    def mark_channel_service_unknown(self, reason: str, message: str):
        self.manage().mark_unknown(IMC_CONDITION_CHANNEL_SERVICE_READY, reason, message)

    def mark_channel_service_true(self):
        self.manage().mark_true(IMC_CONDITION_CHANNEL_SERVICE_READY)

    def mark_endpoints_failed(self, reason: str, message: str):
        self.manage().mark_false(IMC_CONDITION_ENDPOINTS_READY, reason, message)

    def mark_endpoints_unknown(self, reason: str, message: str):
        self.manage().mark_unknown(IMC_CONDITION_ENDPOINTS_READY, reason, message)

    def mark_endpoints_true(self):
        self.manage().mark_true(IMC_CONDITION_ENDPOINTS_READY)

    def mark_dead_letter_sink_resolved_succeeded(self, delivery_status: DeliveryStatus):
        self.deliveryStatus = delivery_status
        self.manage().mark_true(IMC_CONDITION_DEAD_LETTER_SINK_RESOLVED)

    def mark_dead_letter_sink_not_configured(self):
        self.deliveryStatus = DeliveryStatus()
        self.manage().mark_true_with_reason(
            IMC_CONDITION_DEAD_LETTER_SINK_RESOLVED, "DeadLetterSinkNotConfigured", "No dead letter sink is configured."
        )

    def mark_dead_letter_sink_unknown(self, reason: str, message: str):
        self.manage().mark_unknown(IMC_CONDITION_DEAD_LETTER_SINK_RESOLVED, reason, message)

    def mark_dead_letter_sink_resolved_failed(self, reason: str, message: str):
        self.deliveryStatus = DeliveryStatus()
        self.manage().mark_false(IMC_CONDITION_DEAD_LETTER_SINK_RESOLVED, reason, message)


class InMemoryChannel(BaseModel):
    apiVersion: str = "messaging.knative.dev/v1"
    kind: str = "InMemoryChannel"
    metadata: Metadata
    spec: ChannelSpec = Field(default_factory=ChannelSpec)
    status: InMemoryChannelStatus = Field(default_factory=InMemoryChannelStatus)

    def get_condition_set(self) -> ConditionRegistry:
        return self.status.condition_registry

    def has_dead_letter_sink(self) -> bool:
        delivery = self.spec.delivery
        return delivery is not None and delivery.deadLetterSink is not None

    def is_ready(self) -> bool:
        """True if Ready is True and the status reflects the latest spec."""
        return self.status.manage().is_happy(self.metadata.generation)
