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

from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from channel_readiness.models.channel import (
    ChannelSpec,
    DeliverySpec,
    Destination,
    InMemoryChannel,
    Metadata,
)
from channel_readiness.models.child import (
    ChildCondition,
    ChildStatus,
    ObservedChannelService,
    ObservedChildren,
    ObservedDeadLetterSink,
    ObservedDeployment,
    ObservedEndpoints,
    ObservedService,
)
from channel_readiness.registry import ConditionRegistry

BASETIME = datetime(year=2024, month=10, day=1, hour=0, minute=0, second=0, tzinfo=timezone.utc)

REGISTRY = ConditionRegistry.declare_dependents("D1", "D2", "D3", "D4", auxiliary=["Extra"])


class FakeClock:
    def __init__(self, start: datetime = BASETIME, step: timedelta = timedelta(seconds=1)):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current


def build_child_status(type_status_reason_trios: List[Tuple[str, str, Optional[str]]]) -> ChildStatus:
    conditions = [ChildCondition(type=x[0], status=x[1], reason=x[2], message=f"{x[0]} is {x[1]}" if x[2] else None) for x in type_status_reason_trios]
    return ChildStatus(conditions=conditions)


def build_channel(generation: int = 1, dead_letter_sink_uri: Optional[str] = None) -> InMemoryChannel:
    spec = ChannelSpec()
    if dead_letter_sink_uri:
        spec = ChannelSpec(delivery=DeliverySpec(deadLetterSink=Destination(uri=dead_letter_sink_uri)))
    return InMemoryChannel(metadata=Metadata(name="imc", namespace="ns", generation=generation), spec=spec)


AVAILABLE_DEPLOYMENT = build_child_status(
    [
        ("Progressing", "True", "NewReplicaSetAvailable"),
        ("Available", "True", "MinimumReplicasAvailable"),
    ]
)
UNAVAILABLE_DEPLOYMENT = build_child_status(
    [
        ("Available", "False", "MinimumReplicasUnavailable"),
    ]
)

HEALTHY = ObservedChildren(
    dispatcher=ObservedDeployment(name="imc-dispatcher", status=AVAILABLE_DEPLOYMENT),
    service=ObservedService(name="imc-dispatcher"),
    endpoints=ObservedEndpoints(name="imc-dispatcher", ready_addresses=2),
    channel_service=ObservedChannelService(name="imc-kn-channel"),
    dead_letter_sink=ObservedDeadLetterSink(uri="http://sink.ns.svc.cluster.local"),
)
