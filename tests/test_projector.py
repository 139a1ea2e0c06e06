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

from channel_readiness.condition_manager import ConditionManager
from channel_readiness.condition_store import ConditionStore
from channel_readiness.models.child import ChildStatus
from channel_readiness.projector import ChildStatusProjector
from tests.channel_statuses import REGISTRY, FakeClock, build_child_status

projector = ChildStatusProjector(
    parent_type="D2",
    child_type="Available",
    child_label="Worker Deployment",
    false_reason="WorkerDeploymentFalse",
    unknown_reason="WorkerDeploymentUnknown",
)


def build_manager() -> ConditionManager:
    manager = ConditionManager(REGISTRY, ConditionStore(), clock=FakeClock())
    manager.initialize_conditions()
    return manager


def test_project_true():
    manager = build_manager()
    condition = projector.project(manager, build_child_status([("Available", "True", "MinimumReplicasAvailable")]))
    assert condition.is_true()
    assert condition.reason is None
    assert manager.get_condition("D2").is_true()


def test_project_false_wraps_child_reason():
    manager = build_manager()
    condition = projector.project(manager, build_child_status([("Available", "False", "MinimumReplicasUnavailable")]))
    assert condition.is_false()
    assert condition.reason == "WorkerDeploymentFalse"
    assert condition.message == "The status of Worker Deployment is False: MinimumReplicasUnavailable : Available is False"
    top = manager.get_top_level_condition()
    assert top.is_false()
    assert top.reason == "WorkerDeploymentFalse"


def test_project_unknown():
    manager = build_manager()
    condition = projector.project(manager, build_child_status([("Available", "Unknown", None)]))
    assert condition.is_unknown()
    assert condition.reason == "WorkerDeploymentUnknown"
    assert condition.message == "The status of Worker Deployment is Unknown:  : "


def test_project_without_designated_condition_leaves_parent_untouched():
    manager = build_manager()
    manager.mark_false("D2", "Broken", "broken before")
    before = manager.store.snapshot()
    assert projector.project(manager, build_child_status([("Progressing", "True", "NewReplicaSetAvailable")])) is None
    assert projector.project(manager, ChildStatus()) is None
    assert manager.store == before


def test_project_uses_first_designated_condition():
    manager = build_manager()
    child_status = build_child_status(
        [
            ("Available", "True", "MinimumReplicasAvailable"),
            ("Available", "False", "MinimumReplicasUnavailable"),
        ]
    )
    assert projector.project(manager, child_status).is_true()


def test_project_is_idempotent():
    manager = build_manager()
    child_status = build_child_status([("Available", "False", "MinimumReplicasUnavailable")])
    projector.project(manager, child_status)
    once = manager.store.snapshot()
    projector.project(manager, child_status)
    assert manager.store == once
