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

import logging
from typing import List, Optional

from channel_readiness.app.config import AppConfig
from channel_readiness.app.utils import service_hostname
from channel_readiness.condition_store import ConditionStore
from channel_readiness.models.channel import (
    Addressable,
    DeliveryStatus,
    InMemoryChannel,
    InMemoryChannelStatus,
)
from channel_readiness.models.child import ObservedChildren
from channel_readiness.models.status import Condition
from channel_readiness.observer import DEFAULT_OBSERVER, Observer

logger = logging.getLogger(__name__)


class ChannelStatusReconciler:

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        observer: Optional[Observer] = None,
        _logger: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config if config else AppConfig()
        self.observer = observer if observer else DEFAULT_OBSERVER
        self.logger = _logger if _logger else logger

    def reconcile(self, channel: InMemoryChannel, observed: ObservedChildren) -> InMemoryChannelStatus:
        """Run one reconcile pass over ``channel.status`` and return a snapshot of it."""
        logger = self.logger

        key = f"{channel.metadata.namespace}/{channel.metadata.name}"
        logger.info(f"Reconcile status of '{key}' at generation {channel.metadata.generation}...")
        status = channel.status
        before = status.snapshot()

        status.initialize_conditions()
        self.reconcile_dispatcher(status, observed)
        self.reconcile_service(status, observed)
        self.reconcile_endpoints(status, observed)
        self.reconcile_channel_service(channel, observed)
        self.reconcile_dead_letter_sink(channel, observed)
        status.manage().observe_generation(channel.metadata.generation)

        if self.config.emit_transition_events:
            for condition in transitions(before, status):
                self.observer.notify("reconcile:condition:transition", {"condition": condition}, resource=key)

        ready = channel.is_ready()
        top = status.manage().get_top_level_condition()
        if ready:
            logger.info(f"'{key}' is ready.")
        else:
            logger.warning(f"'{key}' is not ready. Reason: {top.reason}, Message: {top.message}")
        self.observer.notify("reconcile:end", {"ready": ready, "observedGeneration": status.observedGeneration}, resource=key)
        return status.snapshot()

    def reconcile_dispatcher(self, status: InMemoryChannelStatus, observed: ObservedChildren):
        dispatcher = observed.dispatcher
        if dispatcher is None:
            return
        if not dispatcher.exists:
            status.mark_dispatcher_failed("DispatcherDeploymentDoesNotExist", "Dispatcher Deployment does not exist")
            return
        status.propagate_dispatcher_status(dispatcher.status)

    def reconcile_service(self, status: InMemoryChannelStatus, observed: ObservedChildren):
        service = observed.service
        if service is None:
            status.mark_service_unknown("DispatcherServiceNotObserved", "Dispatcher Service has not been observed yet")
        elif not service.exists:
            status.mark_service_failed("DispatcherServiceDoesNotExist", "Dispatcher Service does not exist")
        else:
            status.mark_service_true()

    def reconcile_endpoints(self, status: InMemoryChannelStatus, observed: ObservedChildren):
        endpoints = observed.endpoints
        if endpoints is None:
            status.mark_endpoints_unknown("DispatcherEndpointsNotObserved", "Dispatcher Endpoints have not been observed yet")
        elif not endpoints.exists:
            status.mark_endpoints_failed("DispatcherEndpointsDoesNotExist", "Dispatcher Endpoints does not exist")
        elif endpoints.ready_addresses < 1:
            status.mark_endpoints_failed("DispatcherEndpointsNotReady", "There are no endpoints ready for Dispatcher service")
        else:
            status.mark_endpoints_true()

    def reconcile_channel_service(self, channel: InMemoryChannel, observed: ObservedChildren):
        status = channel.status
        channel_service = observed.channel_service
        if channel_service is None:
            status.mark_channel_service_unknown("ChannelServiceNotObserved", "Channel Service has not been observed yet")
            return
        if channel_service.error:
            status.mark_channel_service_failed("ChannelServiceFailed", f"Channel Service failed: {channel_service.error}")
            return
        status.mark_channel_service_true()
        hostname = service_hostname(channel_service.name, channel.metadata.namespace, self.config.cluster_domain)
        status.set_address(Addressable(url=f"{self.config.url_scheme}://{hostname}"))

    def reconcile_dead_letter_sink(self, channel: InMemoryChannel, observed: ObservedChildren):
        status = channel.status
        if not channel.has_dead_letter_sink():
            status.mark_dead_letter_sink_not_configured()
            return
        sink = observed.dead_letter_sink
        if sink is None:
            status.mark_dead_letter_sink_unknown("DeadLetterSinkNotResolved", "The dead letter sink has not been resolved yet")
        elif sink.error or not sink.uri:
            message = sink.error if sink.error else "The dead letter sink resolved to an empty URI"
            status.mark_dead_letter_sink_resolved_failed("DeadLetterSinkResolveFailed", message)
        else:
            status.mark_dead_letter_sink_resolved_succeeded(
                DeliveryStatus(deadLetterSinkUri=sink.uri, deadLetterSinkCACerts=sink.CACerts, deadLetterSinkAudience=sink.audience)
            )


def transitions(before: ConditionStore, after: ConditionStore) -> List[Condition]:
    changed = []
    for condition in after.conditions:
        prior = before.get(condition.type)
        if prior is None or prior.status != condition.status:
            changed.append(condition)
    return changed
